"""Async engine, sessions and table bootstrap for the interview database."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.config.settings import DatabaseConfig, settings

# Models must be imported so their tables exist on Base.metadata
from app.models import Base

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def resolve_schema_name(raw_schema: str | None) -> str | None:
    """Return a usable schema name, or None to stay on the default search_path."""

    schema = (raw_schema or "").strip()
    if not schema:
        return None
    if _IDENTIFIER.fullmatch(schema) is None:
        logger.warning("Ignoring invalid DB_SCHEMA %r; using the default schema.", raw_schema)
        return None
    return schema


def bind_schema(metadata: MetaData, schema: str | None) -> None:
    """Point every table without an explicit schema at ``schema``."""

    if not schema:
        return
    metadata.schema = schema
    for table in metadata.tables.values():
        if table.schema is None:
            table.schema = schema


def engine_options(config: DatabaseConfig, *, debug: bool = False) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    Serverless databases (and debug runs) get a ``NullPool`` so idle
    connections do not keep the database awake.
    """

    options: dict[str, Any] = {"echo": debug, "pool_pre_ping": True}
    if config.serverless or debug:
        options["poolclass"] = NullPool
    return options


def _search_path_sql(schema: str) -> str:
    quoted = schema.replace('"', '""')
    return f'SET search_path TO "{quoted}", public'


SCHEMA_NAME = resolve_schema_name(settings.database.schema_name)
bind_schema(Base.metadata, SCHEMA_NAME)

engine: AsyncEngine = create_async_engine(
    settings.database.url,
    **engine_options(settings.database, debug=settings.debug),
)

SessionFactory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Yield a session already switched to the configured schema."""

    async with SessionFactory() as session:
        if SCHEMA_NAME:
            await session.execute(text(_search_path_sql(SCHEMA_NAME)))
        yield session


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency wrapper around :func:`session_scope`."""

    async with session_scope() as session:
        yield session


async def init_models() -> None:
    """Create the schema (when configured) and any missing tables."""

    async with engine.begin() as conn:
        if SCHEMA_NAME:
            quoted = SCHEMA_NAME.replace('"', '""')
            await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{quoted}"'))
            await conn.execute(text(_search_path_sql(SCHEMA_NAME)))
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Ensured tables %s in schema %s",
        ", ".join(sorted(table.name for table in Base.metadata.sorted_tables)),
        SCHEMA_NAME or "default",
    )


async def dispose_engine() -> None:
    await engine.dispose()
