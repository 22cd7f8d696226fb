from pydantic import StrictStr

from livesync.db.repositories.user_repository import UserRepository
from livesync.domains.realtime.live_query import LiveQuery
from livesync.domains.realtime.registry import Registry

COLLECTION = "users"


def all_users() -> LiveQuery:
    """Все пользователи, новые первыми"""
    return LiveQuery(COLLECTION, UserRepository.select_all(), UserRepository.to_document)


def users_by_name(name_filter: str) -> LiveQuery:
    """Пользователи, в имени которых встречается name_filter (без учета регистра)"""
    return LiveQuery(COLLECTION, UserRepository.select_by_name(name_filter), UserRepository.to_document)


def register_user_publications(registry: Registry) -> None:
    registry.publication("users.all")(all_users)
    registry.publication("users.byName", StrictStr)(users_by_name)
