"""
Заполнение пустых коллекций демо-данными при старте.

Каждая коллекция заполняется в своей транзакции: ошибка в одной не мешает
другой, но в конце поднимается SeedError и запуск приложения прерывается.
Повторный запуск на непустой коллекции ничего не вставляет.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from livesync.core.errors import SeedError
from livesync.db.repositories.link_repository import LinkRepository
from livesync.db.repositories.user_repository import UserRepository
from livesync.domains.links.entities import Link
from livesync.domains.users.entities import User

logger = logging.getLogger(__name__)

SEED_LINKS = [
    {
        "title": "Do the Tutorial",
        "url": "https://react-tutorial.meteor.com/simple-todos/01-creating-app.html",
    },
    {"title": "Follow the Guide", "url": "https://guide.meteor.com"},
    {"title": "Read the Docs", "url": "https://docs.meteor.com"},
    {"title": "Discussions", "url": "https://forums.meteor.com"},
]

SEED_USERS = [
    {"name": "Alice Johnson", "created_at": datetime(2025, 1, 15, tzinfo=timezone.utc)},
    {"name": "Bob Smith", "created_at": datetime(2025, 3, 22, tzinfo=timezone.utc)},
    {"name": "Carol White", "created_at": datetime(2025, 6, 10, tzinfo=timezone.utc)},
]


async def seed_links(session: AsyncSession) -> int:
    repository = LinkRepository(session)
    if await repository.count() > 0:
        return 0

    # строго возрастающие метки сохраняют порядок вставки
    now = datetime.now(timezone.utc)
    for index, row in enumerate(SEED_LINKS):
        created_at = now + timedelta(milliseconds=index)
        try:
            await repository.add(Link.create_link(title=row["title"], url=row["url"], created_at=created_at))
        except Exception:
            logger.error(f"Failed to seed link {row['title']!r} ({row['url']})")
            raise
    await session.commit()
    return len(SEED_LINKS)


async def seed_users(session: AsyncSession) -> int:
    repository = UserRepository(session)
    if await repository.count() > 0:
        return 0

    for row in SEED_USERS:
        try:
            await repository.add(User.create_user(name=row["name"], created_at=row["created_at"]))
        except Exception:
            logger.error(f"Failed to seed user {row['name']!r}")
            raise
    await session.commit()
    return len(SEED_USERS)


SEEDERS: Dict[str, Callable[[AsyncSession], Awaitable[int]]] = {
    "links": seed_links,
    "users": seed_users,
}


async def seed_database(session_factory: sessionmaker) -> Dict[str, int]:
    """Заполнение всех пустых коллекций; возвращает число вставок по коллекциям

    Raises:
        SeedError: если хотя бы одну коллекцию заполнить не удалось.
    """
    inserted: Dict[str, int] = {}
    failures: Dict[str, BaseException] = {}

    for collection, seeder in SEEDERS.items():
        try:
            async with session_factory() as session:
                inserted[collection] = await seeder(session)
        except Exception as e:
            logger.exception(f"Seeding collection {collection} failed")
            failures[collection] = e
            continue

        if inserted[collection]:
            logger.info(f"Seeded {inserted[collection]} documents into {collection}")
        else:
            logger.info(f"Collection {collection} is not empty, seeding skipped")

    if failures:
        raise SeedError(failures)
    return inserted
