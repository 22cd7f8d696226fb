from typing import Any, Callable, Dict, List

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession


class LiveQuery:
    """Живой результат публикации

    Хранит запрос, а не данные: каждое чтение заново исполняет его, поэтому
    порядок всегда соответствует текущему состоянию хранилища.
    """

    def __init__(
        self,
        collection: str,
        statement: Select,
        to_document: Callable[[Any], Dict[str, Any]]
    ):
        self.collection = collection
        self.statement = statement
        self._to_document = to_document

    def observes(self, collection: str) -> bool:
        return self.collection == collection

    async def fetch(self, session: AsyncSession) -> List[Dict[str, Any]]:
        """Исполнение запроса и преобразование строк в документы"""
        result = await session.execute(self.statement)
        return [self._to_document(row) for row in result.scalars().all()]

    def __repr__(self) -> str:
        return f"LiveQuery(collection={self.collection!r})"
