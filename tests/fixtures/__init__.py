"""Test fixtures: sample DDL, seed rows, and a recording executor."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

from easysql.execute.base import ReaderAction, RowMapper, map_rows
from easysql.schema.types import BoundParameter

_FIXTURES_DIR = Path(__file__).parent

#: (id, name, kind, price, removed, created_at)
ITEMS: list[tuple[Any, ...]] = [
    (1, "Apple", "fruit", 1.5, None, "2024-01-05 00:00:00"),
    (2, "Banana", "fruit", 0.5, 0, "2024-01-10 00:00:00"),
    (3, "Carrot", "vegetable", 0.8, 1, "2024-02-01 00:00:00"),
    (4, "Date", "fruit", 3.0, None, "2024-02-15 00:00:00"),
    (5, "Eggplant", "vegetable", 2.2, 0, "2024-03-01 00:00:00"),
    (6, "Fig", "fruit", 2.8, None, "2024-03-20 00:00:00"),
    (7, "Garlic", "vegetable", 0.3, None, "2024-04-02 00:00:00"),
    (8, "7Up", "drink", 1.2, None, "2024-04-10 00:00:00"),
]

#: (id, item_id, label)
TAGS: list[tuple[Any, ...]] = [
    (1, 1, "red"),
    (2, 1, "sweet"),
    (3, 2, "yellow"),
    (4, 6, "sweet"),
]


def load_ddl(target: Literal["sqlite", "postgres"] = "sqlite") -> str:
    """Return the sample DDL SQL string for the given backend.

    Args:
        target: ``'sqlite'`` (default) or ``'postgres'``.

    Returns:
        DDL string ready to execute against the target backend.
    """
    filename = f"ddl_{target}.sql"
    return (_FIXTURES_DIR / filename).read_text()


class RecordingExecutor:
    """In-memory ``Executor`` that records every call and returns canned results.

    Attributes:
        calls: ``(kind, sql, params)`` tuples in call order.
        rows: Returned by row-producing calls.
        scalar: Returned by ``execute_scalar``.
        rowcount: Returned by ``execute_non_query``.
        closed: Set by ``close``.
    """

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        scalar: Any = None,
        rowcount: int = 0,
    ) -> None:
        self.rows = rows or []
        self.scalar = scalar
        self.rowcount = rowcount
        self.calls: list[tuple[str, str, tuple[BoundParameter, ...]]] = []
        self.closed = False

    def _record(self, kind: str, sql: str, params: Sequence[BoundParameter]) -> None:
        self.calls.append((kind, sql, tuple(params)))

    def execute_rowset(self, sql: str, params: Sequence[BoundParameter]) -> list[dict[str, Any]]:
        self._record("rowset", sql, params)
        return list(self.rows)

    def execute_scalar(self, sql: str, params: Sequence[BoundParameter]) -> Any:
        self._record("scalar", sql, params)
        return self.scalar

    def execute_non_query(self, sql: str, params: Sequence[BoundParameter]) -> int:
        self._record("non_query", sql, params)
        return self.rowcount

    def query(self, sql: str, params: Sequence[BoundParameter], mapper: RowMapper[Any]) -> list[Any]:
        self._record("query", sql, params)
        return map_rows(self.rows, mapper)

    def execute_reader(
        self, sql: str, params: Sequence[BoundParameter], action: ReaderAction
    ) -> None:
        self._record("reader", sql, params)
        action(iter(self.rows))

    def close(self) -> None:
        self.closed = True
