from livesync.domains.links.publications import register_link_publications
from livesync.domains.realtime.registry import Registry
from livesync.domains.users.methods import register_user_methods
from livesync.domains.users.publications import register_user_publications


def build_registry() -> Registry:
    """Сборка таблицы методов и публикаций приложения"""
    registry = Registry()
    register_user_methods(registry)
    register_user_publications(registry)
    register_link_publications(registry)
    return registry.freeze()
