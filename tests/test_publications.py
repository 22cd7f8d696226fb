from datetime import datetime, timezone

import pytest

from livesync.domains.users.schemas import UserCreate
from livesync.domains.users.services import UsersService


async def create(session, name, day):
    data = UserCreate.model_validate({"name": name, "createdAt": datetime(2025, 1, day, tzinfo=timezone.utc)})
    return await UsersService(session).create_user(data)


async def names(registry, session, publication, params):
    query = registry.publish(publication, params)
    return [doc["name"] for doc in await query.fetch(session)]


@pytest.mark.asyncio
async def test_by_name_is_case_insensitive_substring(registry, session):
    await create(session, "Alice", 1)
    await create(session, "Natalie", 2)
    await create(session, "Bob", 3)

    assert await names(registry, session, "users.byName", ["ali"]) == ["Natalie", "Alice"]
    assert await names(registry, session, "users.byName", ["ALI"]) == ["Natalie", "Alice"]
    assert await names(registry, session, "users.byName", ["zzz"]) == []


@pytest.mark.asyncio
async def test_empty_filter_matches_everything_in_all_order(registry, session):
    await create(session, "Alice", 1)
    await create(session, "Bob", 3)
    await create(session, "Carol", 2)

    expected = ["Bob", "Carol", "Alice"]
    assert await names(registry, session, "users.all", []) == expected
    assert await names(registry, session, "users.byName", [""]) == expected


@pytest.mark.asyncio
async def test_filter_wildcards_are_literal(registry, session):
    await create(session, "100% Alice", 1)
    await create(session, "Bob_Smith", 2)
    await create(session, "Carol", 3)

    assert await names(registry, session, "users.byName", ["%"]) == ["100% Alice"]
    assert await names(registry, session, "users.byName", ["_"]) == ["Bob_Smith"]


@pytest.mark.asyncio
async def test_live_query_reflects_new_rows(registry, session):
    await create(session, "Alice", 1)
    await create(session, "Bob", 2)
    query = registry.publish("users.all", [])

    assert [doc["name"] for doc in await query.fetch(session)] == ["Bob", "Alice"]

    await create(session, "Zed", 20)
    assert [doc["name"] for doc in await query.fetch(session)] == ["Zed", "Bob", "Alice"]


@pytest.mark.asyncio
async def test_equal_timestamps_keep_stable_order(registry, session):
    for name in ("A", "B", "C"):
        await create(session, name, 5)
    query = registry.publish("users.all", [])

    first = [doc["_id"] for doc in await query.fetch(session)]
    second = [doc["_id"] for doc in await query.fetch(session)]
    assert first == second == sorted(first)


@pytest.mark.asyncio
async def test_links_publication_observes_links(registry, session):
    query = registry.publish("links", [])

    assert query.observes("links")
    assert not query.observes("users")
    assert await query.fetch(session) == []
