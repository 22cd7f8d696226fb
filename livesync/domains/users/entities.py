import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class User:
    """Сущность пользователя"""

    def __init__(
        self,
        id: str,
        name: str,
        created_at: datetime,
        extra: Optional[Dict[str, Any]] = None
    ):
        self.id = id
        self.name = name
        self.created_at = created_at
        self.extra = dict(extra or {})

    def to_document(self) -> Dict[str, Any]:
        """Представление пользователя в виде документа коллекции"""
        document = dict(self.extra)
        document.update({
            "_id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
        })
        return document

    @classmethod
    def create_user(cls, name: str, created_at: datetime) -> "User":
        """Создание нового пользователя с идентификатором от хранилища"""
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(id=str(uuid.uuid4()), name=name, created_at=created_at)

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, name={self.name!r}, created_at={self.created_at.isoformat()})"
