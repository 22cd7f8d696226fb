import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.types import TypeDecorator

from livesync.core.db import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """DateTime, который всегда хранит и возвращает время в UTC

    SQLite не сохраняет часовой пояс, поэтому при чтении он проставляется заново.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class BaseModel(Base):
    __abstract__ = True

    # Идентификатор назначает хранилище, клиент его не выбирает
    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
