"""Tests for the database bootstrap helpers."""

from __future__ import annotations

import pytest
from sqlalchemy import Column, Integer, MetaData, Table
from sqlalchemy.pool import NullPool

from app.config.settings import DatabaseConfig
from app.database import bind_schema, engine_options, resolve_schema_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("   ", None),
        (" recrutamento ", "recrutamento"),
        ("rh; DROP TABLE jobs", None),
        ("1schema", None),
    ],
)
def test_resolve_schema_name(raw, expected):
    assert resolve_schema_name(raw) == expected


def test_bind_schema_keeps_explicit_table_schemas():
    metadata = MetaData()
    plain = Table("jobs", metadata, Column("id", Integer, primary_key=True))
    pinned = Table("audit", metadata, Column("id", Integer, primary_key=True), schema="logs")

    bind_schema(metadata, "recrutamento")

    assert plain.schema == "recrutamento"
    assert pinned.schema == "logs"


def test_bind_schema_without_schema_is_a_no_op():
    metadata = MetaData()
    table = Table("jobs", metadata, Column("id", Integer, primary_key=True))

    bind_schema(metadata, None)

    assert table.schema is None


def test_engine_options_pool_choice():
    pooled = engine_options(DatabaseConfig(serverless=False))
    serverless = engine_options(DatabaseConfig(serverless=True))
    debug = engine_options(DatabaseConfig(serverless=False), debug=True)

    assert "poolclass" not in pooled
    assert serverless["poolclass"] is NullPool
    assert debug["poolclass"] is NullPool
    assert debug["echo"] is True
    assert pooled["pool_pre_ping"] is True
