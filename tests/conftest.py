"""Shared fixtures for hostshare tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import Session, SQLModel, create_engine

import hostshare.models  # noqa: F401  (registers tables on SQLModel.metadata)
from hostshare import AccessEngineAsync
from hostshare.access.cascade import CascadeService
from hostshare.access.dialect import enable_sqlite_foreign_keys
from hostshare.access.directory import DirectoryService
from hostshare.access.guard import PermissionGuard
from hostshare.access.resolver import AccessResolver
from hostshare.access.sharing import SharingService
from hostshare.access.store import ShareStore
from hostshare.models import FolderShare, Host, HostShare, User

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy import Engine
    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
def engine() -> Engine:
    """In-memory SQLite engine with all tables created."""
    eng = create_engine("sqlite://", echo=False)
    SQLModel.metadata.create_all(eng)
    return eng


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """SQLModel session bound to the in-memory engine, rolled back after each test."""
    with Session(engine) as s:
        s.begin()
        yield s
        s.rollback()


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with foreign keys enforced and all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def unenforced_session() -> AsyncIterator[AsyncSession]:
    """Session on an in-memory SQLite store that does not enforce foreign keys."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    factory = async_sessionmaker(eng, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await eng.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Async SQLModel session, rolled back after each test."""
    factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@dataclass
class Services:
    store: ShareStore
    directory: DirectoryService
    resolver: AccessResolver
    guard: PermissionGuard
    sharing: SharingService
    cascade: CascadeService


@pytest.fixture
def services() -> Services:
    store = ShareStore(HostShare, FolderShare)
    directory = DirectoryService(Host, User)
    resolver = AccessResolver(store, directory)
    guard = PermissionGuard(directory, resolver)
    return Services(
        store=store,
        directory=directory,
        resolver=resolver,
        guard=guard,
        sharing=SharingService(store, directory, guard),
        cascade=CascadeService(store, directory),
    )


@dataclass
class World:
    """A small population: one admin, three users, five hosts.

    ``u1`` owns web (prod), db (prod), and scratch (no folder).
    ``u2`` owns build (ci) and lab (no folder).
    """

    web: int
    db: int
    scratch: int
    build: int
    lab: int


@pytest.fixture
async def world(services: Services, async_session: AsyncSession) -> World:
    d = services.directory
    await d.add_user(async_session, "admin", "root", is_admin=True)
    await d.add_user(async_session, "u1", "alice")
    await d.add_user(async_session, "u2", "bob")
    await d.add_user(async_session, "u3", "carol")
    web = await d.add_host(async_session, "web", "u1", folder="prod")
    db = await d.add_host(async_session, "db", "u1", folder="prod")
    scratch = await d.add_host(async_session, "scratch", "u1")
    build = await d.add_host(async_session, "build", "u2", folder="ci")
    lab = await d.add_host(async_session, "lab", "u2")
    return World(web=web.id, db=db.id, scratch=scratch.id, build=build.id, lab=lab.id)


@pytest.fixture
async def access(async_engine: AsyncEngine) -> AsyncIterator[AccessEngineAsync]:
    """Async facade over the shared in-memory engine, seeded with users."""
    facade = AccessEngineAsync(engine=async_engine)
    await facade.add_user("admin", "root", is_admin=True)
    await facade.add_user("u1", "alice")
    await facade.add_user("u2", "bob")
    await facade.add_user("u3", "carol")
    yield facade
    await facade.close()
