"""Tests for ShareStore — share persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from hostshare.access.exceptions import ConflictError
from hostshare.access.store import ShareStore
from hostshare.models import FolderShare, HostShare

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from .conftest import Services, World


@pytest.fixture
def store(services: Services) -> ShareStore:
    return services.store


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


class TestCreateHostShare:
    async def test_create(self, store: ShareStore, async_session: AsyncSession, world: World):
        share = await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        assert share.host_id == world.web
        assert share.owner_id == "u1"
        assert share.shared_with_user_id == "u2"
        assert share.created_by == "admin"
        assert share.access_level == "viewer"
        assert share.id

    async def test_duplicate_conflicts_and_keeps_one_row(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        with pytest.raises(ConflictError):
            await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        rows = await store.list_host_shares_for_host(async_session, world.web)
        assert len(rows) == 1

    async def test_same_user_different_hosts(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        await store.create_host_share(async_session, world.db, "u1", "u2", "admin")
        rows = await store.list_host_shares_for_user(async_session, "u2")
        assert {r.host_id for r in rows} == {world.web, world.db}


class TestCreateFolderShare:
    async def test_create(self, store: ShareStore, async_session: AsyncSession, world: World):
        share = await store.create_folder_share(async_session, "prod", "u1", "u2", "admin")
        assert share.folder_name == "prod"
        assert share.owner_id == "u1"

    async def test_duplicate_conflicts(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        await store.create_folder_share(async_session, "prod", "u1", "u2", "admin")
        with pytest.raises(ConflictError):
            await store.create_folder_share(async_session, "prod", "u1", "u2", "admin")
        rows = await store.list_folder_shares_for_folder(async_session, "u1", "prod")
        assert len(rows) == 1

    async def test_empty_folder_name_is_distinct_key(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        await store.create_folder_share(async_session, "", "u1", "u2", "admin")
        await store.create_folder_share(async_session, "prod", "u1", "u2", "admin")
        rows = await store.list_folder_shares_for_user(async_session, "u2")
        assert sorted(r.folder_name for r in rows) == ["", "prod"]


class TestCrossSessionCreate:
    async def test_second_session_observes_conflict(
        self, services: Services, async_engine: AsyncEngine
    ):
        factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
        async with factory() as sess:
            await services.directory.add_user(sess, "u1", "alice")
            await services.directory.add_user(sess, "u2", "bob")
            host = await services.directory.add_host(sess, "web", "u1")
            host_id = host.id
            await sess.commit()

        async def attempt() -> str:
            async with factory() as sess:
                try:
                    await services.store.create_host_share(sess, host_id, "u1", "u2", "admin")
                except ConflictError:
                    await sess.rollback()
                    return "conflict"
                await sess.commit()
                return "created"

        assert await attempt() == "created"
        assert await attempt() == "conflict"

        async with factory() as sess:
            result = await sess.execute(select(HostShare).where(HostShare.host_id == host_id))
            assert len(result.scalars().all()) == 1


# ---------------------------------------------------------------------------
# lookup / delete
# ---------------------------------------------------------------------------


class TestDelete:
    async def test_delete_host_share(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        share = await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        assert await store.delete_host_share(async_session, share.id) is True
        assert await store.get_host_share(async_session, share.id) is None

    async def test_delete_missing_host_share(self, store: ShareStore, async_session: AsyncSession):
        assert await store.delete_host_share(async_session, "nope") is False

    async def test_delete_folder_share(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        share = await store.create_folder_share(async_session, "prod", "u1", "u2", "admin")
        assert await store.delete_folder_share(async_session, share.id) is True
        assert await store.delete_folder_share(async_session, share.id) is False

    async def test_delete_host_shares_for_host(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        await store.create_host_share(async_session, world.web, "u1", "u3", "admin")
        await store.create_host_share(async_session, world.db, "u1", "u2", "admin")
        assert await store.delete_host_shares_for_host(async_session, world.web) == 2
        remaining = await store.list_host_shares_for_user(async_session, "u2")
        assert [r.host_id for r in remaining] == [world.db]

    async def test_delete_shares_for_user_as_recipient_and_owner(
        self, store: ShareStore, async_session: AsyncSession, world: World
    ):
        await store.create_host_share(async_session, world.web, "u1", "u2", "admin")
        await store.create_host_share(async_session, world.build, "u2", "u3", "admin")
        await store.create_host_share(async_session, world.web, "u1", "u3", "admin")
        await store.create_folder_share(async_session, "ci", "u2", "u1", "admin")
        await store.create_folder_share(async_session, "prod", "u1", "u2", "admin")
        await store.create_folder_share(async_session, "prod", "u1", "u3", "admin")

        host_count, folder_count = await store.delete_shares_for_user(async_session, "u2")
        assert (host_count, folder_count) == (2, 2)

        result = await async_session.execute(select(FolderShare))
        left = result.scalars().all()
        assert [(s.owner_id, s.shared_with_user_id) for s in left] == [("u1", "u3")]
