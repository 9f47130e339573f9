"""Dialect-aware SQL helpers — atomic create-if-absent, SQLite foreign keys."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import event, insert
from sqlalchemy.exc import IntegrityError

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession


def get_dialect(engine: Engine | AsyncEngine) -> str:
    """Return 'sqlite', 'postgresql', or 'mssql'."""
    # AsyncEngine wraps a sync engine
    sync_engine = getattr(engine, "sync_engine", engine)
    name = sync_engine.dialect.name
    if name == "sqlite":
        return "sqlite"
    if name in ("postgresql", "postgres"):
        return "postgresql"
    if name in ("mssql", "pyodbc"):
        return "mssql"
    return name


def enable_sqlite_foreign_keys(engine: Engine | AsyncEngine) -> None:
    """Enforce foreign keys on every new connection of a SQLite *engine*.

    SQLite ignores ``ON DELETE CASCADE`` and dangling references unless
    ``PRAGMA foreign_keys`` is set per connection.  Connections the pool
    already holds are not affected, so call this before first use.
    """
    sync_engine = getattr(engine, "sync_engine", engine)
    if event.contains(sync_engine, "connect", _set_sqlite_pragma):
        return
    event.listen(sync_engine, "connect", _set_sqlite_pragma)


def _set_sqlite_pragma(dbapi_connection: object, connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def insert_if_absent(
    session: AsyncSession,
    dialect: str,
    model: type,
    values: dict[str, Any],
    conflict_keys: list[str],
) -> bool:
    """Insert one row unless a row with the same *conflict_keys* exists.

    Returns True if the row was inserted.  The check and the insert are a
    single statement on SQLite/PostgreSQL (``ON CONFLICT DO NOTHING``), so
    two concurrent identical inserts cannot both succeed.  Other dialects
    insert inside a savepoint and treat a unique violation as "exists".

    *conflict_keys* must be covered by a unique constraint on *model*.
    """
    if dialect in ("sqlite", "postgresql"):
        return await _insert_on_conflict(session, dialect, model, values, conflict_keys)
    return await _insert_savepoint(session, model, values)


async def _insert_on_conflict(
    session: AsyncSession,
    dialect: str,
    model: type,
    values: dict[str, Any],
    conflict_keys: list[str],
) -> bool:
    from sqlalchemy.dialects import sqlite as sqlite_dialect

    dialect_module = sqlite_dialect
    if dialect == "postgresql":
        from sqlalchemy.dialects import postgresql as pg_dialect

        dialect_module = pg_dialect

    stmt = (
        dialect_module.insert(model)
        .values(**values)
        .on_conflict_do_nothing(index_elements=conflict_keys)
    )
    result = await session.execute(stmt)
    return result.rowcount == 1  # type: ignore[union-attr]


async def _insert_savepoint(
    session: AsyncSession,
    model: type,
    values: dict[str, Any],
) -> bool:
    try:
        async with session.begin_nested():
            await session.execute(insert(model).values(**values))
    except IntegrityError:
        return False
    return True
