import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from livesync.db.repositories.user_repository import UserRepository
from livesync.domains.users.entities import User
from livesync.domains.users.schemas import UserCreate, UserModifier

logger = logging.getLogger(__name__)

# Поля, которые нельзя менять после создания документа
IMMUTABLE_FIELDS = ("_id", "createdAt")


class UsersService:
    """Сервис для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    async def create_user(self, user_data: UserCreate) -> str:
        """Создание пользователя; возвращает его идентификатор"""
        user = User.create_user(name=user_data.name, created_at=user_data.created_at)
        created_user = await self.user_repository.create(user)
        logger.info(f"Created user {created_user.id}")
        return created_user.id

    async def update_user(self, user_id: str, modifier: UserModifier) -> int:
        """Применение модификатора $set; возвращает число найденных документов"""
        fields = dict(modifier.set_)
        for field in IMMUTABLE_FIELDS:
            if field in fields:
                logger.warning(f"Ignoring $set of immutable field {field} for user {user_id}")
                fields.pop(field)

        if modifier.operators:
            logger.warning(
                f"Ignoring unsupported modifier operators {sorted(modifier.operators)} for user {user_id}"
            )

        return await self.user_repository.apply_set(user_id, fields)

    async def remove_user(self, user_id: str) -> int:
        """Удаление пользователя; возвращает число удаленных документов"""
        removed = await self.user_repository.delete(user_id)
        if removed:
            logger.info(f"Removed user {user_id}")
        return removed

    async def find_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Разовое чтение пользователя; None, если его нет"""
        user = await self.user_repository.get_by_id(user_id)
        return user.to_document() if user else None
