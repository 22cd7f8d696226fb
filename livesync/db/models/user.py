from sqlalchemy import JSON, Column, Index, String

from livesync.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    # name не уникален: фильтр по имени может вернуть несколько строк
    name = Column(String(255), nullable=False)
    # Поля, записанные через $set и отсутствующие в схеме
    extra = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_users_created_at", "created_at"),
    )
