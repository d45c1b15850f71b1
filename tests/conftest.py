"""Shared pytest fixtures for easysql unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from easysql.compile.builder import QueryAssembler
from easysql.compile.sqlite import SQLiteDialect
from easysql.config import get_settings
from easysql.execute.sqlite import SQLiteExecutor
from tests.fixtures import ITEMS, TAGS, RecordingExecutor, load_ddl

_ENV_VARS = (
    "EASYSQL_DATABASE_URL",
    "EASYSQL_DIALECT",
    "EASYSQL_PARAMSTYLE",
    "EASYSQL_LOG_SQL",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the caller's EASYSQL_* environment."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def qa() -> QueryAssembler:
    """Render-only assembler using ``:name`` placeholders."""
    return QueryAssembler(dialect=SQLiteDialect(), log_sql=False)


@pytest.fixture()
def recorder() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture()
def recording_qa(recorder: RecordingExecutor) -> QueryAssembler:
    return QueryAssembler(recorder, SQLiteDialect(), log_sql=False)


@pytest.fixture()
def sqlite_executor() -> Iterator[SQLiteExecutor]:
    """In-memory SQLite database seeded with the sample catalogue."""
    executor = SQLiteExecutor()
    conn = executor.connect()
    conn.executescript(load_ddl("sqlite"))
    conn.executemany("INSERT INTO item VALUES (?,?,?,?,?,?)", ITEMS)
    conn.executemany("INSERT INTO tag VALUES (?,?,?)", TAGS)
    conn.commit()
    yield executor
    executor.close()
