from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from livesync.db.models.user import User as UserModel
from livesync.domains.users.entities import User


def escape_like(value: str, escape: str = "\\") -> str:
    """Экранирование спецсимволов LIKE, чтобы фильтр совпадал буквально"""
    return (
        value.replace(escape, escape * 2)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def select_all() -> Select:
        """Все пользователи, новые первыми"""
        return select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id)

    @staticmethod
    def select_by_name(name_filter: str) -> Select:
        """Пользователи, в имени которых есть подстрока (без учета регистра)"""
        pattern = f"%{escape_like(name_filter)}%"
        return (
            select(UserModel)
            .where(UserModel.name.ilike(pattern, escape="\\"))
            .order_by(UserModel.created_at.desc(), UserModel.id)
        )

    async def add(self, user: User) -> None:
        """Добавление пользователя в текущую транзакцию без коммита"""
        self.session.add(self._to_model(user))
        await self.session.flush()

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = self._to_model(user)
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        return self._to_domain(db_user)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Получение пользователя по идентификатору"""
        db_user = await self.session.get(UserModel, user_id)
        return self._to_domain(db_user) if db_user else None

    async def apply_set(self, user_id: str, fields: Dict[str, Any]) -> int:
        """Частичное обновление полей; возвращает число найденных документов"""
        db_user = await self.session.get(UserModel, user_id)
        if db_user is None:
            return 0

        fields = dict(fields)
        if "name" in fields:
            db_user.name = fields.pop("name")
        if fields:
            # новый dict, чтобы SQLAlchemy заметил изменение JSON
            db_user.extra = {**(db_user.extra or {}), **fields}

        await self.session.commit()
        return 1

    async def delete(self, user_id: str) -> int:
        """Удаление пользователя"""
        db_user = await self.session.get(UserModel, user_id)
        if db_user is None:
            return 0

        await self.session.delete(db_user)
        await self.session.commit()
        return 1

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(UserModel))
        return result.scalar_one()

    async def get_all(self) -> List[User]:
        """Получение списка пользователей"""
        result = await self.session.execute(self.select_all())
        return [self._to_domain(user) for user in result.scalars().all()]

    @staticmethod
    def _to_domain(db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=db_user.id,
            name=db_user.name,
            created_at=db_user.created_at,
            extra=db_user.extra
        )

    @staticmethod
    def _to_model(user: User) -> UserModel:
        """Преобразование доменной сущности в модель БД"""
        return UserModel(
            id=user.id,
            name=user.name,
            created_at=user.created_at,
            extra=dict(user.extra)
        )

    @classmethod
    def to_document(cls, db_user: UserModel) -> Dict[str, Any]:
        return cls._to_domain(db_user).to_document()
