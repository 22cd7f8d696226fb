from livesync.db.models.link import Link
from livesync.db.models.user import User

__all__ = [
    "Link",
    "User",
]
