from typing import Any, Dict, List

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from livesync.db.models.link import Link as LinkModel
from livesync.domains.links.entities import Link


class LinkRepository:
    """Репозиторий для работы со ссылками"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def select_all() -> Select:
        return select(LinkModel).order_by(LinkModel.created_at, LinkModel.id)

    async def add(self, link: Link) -> None:
        """Добавление ссылки в текущую транзакцию без коммита"""
        self.session.add(
            LinkModel(id=link.id, title=link.title, url=link.url, created_at=link.created_at)
        )
        await self.session.flush()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(LinkModel))
        return result.scalar_one()

    async def get_all(self) -> List[Link]:
        result = await self.session.execute(self.select_all())
        return [self._to_domain(link) for link in result.scalars().all()]

    @staticmethod
    def _to_domain(db_link: LinkModel) -> Link:
        return Link(
            id=db_link.id,
            title=db_link.title,
            url=db_link.url,
            created_at=db_link.created_at
        )

    @classmethod
    def to_document(cls, db_link: LinkModel) -> Dict[str, Any]:
        return cls._to_domain(db_link).to_document()
