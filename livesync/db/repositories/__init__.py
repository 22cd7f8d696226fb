from livesync.db.repositories.link_repository import LinkRepository
from livesync.db.repositories.user_repository import UserRepository

__all__ = [
    "LinkRepository",
    "UserRepository",
]
