"""
Методы коллекции users.

Имена методов ('Users.create' и т.д.) - часть протокола, их нельзя менять.
Все обработчики получают уже проверенные параметры.
"""

from typing import Any, Dict, Optional

from pydantic import StrictStr
from sqlalchemy.ext.asyncio import AsyncSession

from livesync.domains.realtime.registry import Registry
from livesync.domains.users.schemas import UserCreate, UserModifier
from livesync.domains.users.services import UsersService

COLLECTION = "users"


async def create(session: AsyncSession, data: UserCreate) -> str:
    return await UsersService(session).create_user(data)


async def update(session: AsyncSession, user_id: str, modifier: UserModifier) -> int:
    return await UsersService(session).update_user(user_id, modifier)


async def remove(session: AsyncSession, user_id: str) -> int:
    return await UsersService(session).remove_user(user_id)


async def find_by_id(session: AsyncSession, user_id: str) -> Optional[Dict[str, Any]]:
    return await UsersService(session).find_user(user_id)


def register_user_methods(registry: Registry) -> None:
    registry.method("Users.create", UserCreate, invalidates=COLLECTION)(create)
    registry.method("Users.update", StrictStr, UserModifier, invalidates=COLLECTION)(update)
    registry.method("Users.remove", StrictStr, invalidates=COLLECTION)(remove)
    registry.method("Users.find", StrictStr)(find_by_id)
