from livesync.domains.users.entities import User
from livesync.domains.users.schemas import UserCreate, UserModifier

__all__ = [
    "User",
    "UserCreate",
    "UserModifier",
]
