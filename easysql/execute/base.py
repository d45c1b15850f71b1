"""Capabilities the assembler consumes: ``Executor`` and ``RowMapper``.

The assembler never opens connections itself.  It renders SQL and hands the
text plus its :class:`~easysql.schema.types.BoundParameter` list to an
``Executor``; typed results go through a caller-supplied ``RowMapper``.

Implementations must acquire connections in a scoped block and release them
on every exit path, and must let driver errors propagate unmodified.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

from easysql.schema.types import BoundParameter

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

#: One result row, keyed by column name.
Row = Mapping[str, Any]

#: Callback receiving a streaming iterator over result rows.
ReaderAction = Callable[[Iterator[Row]], None]


@runtime_checkable
class RowMapper(Protocol[T_co]):
    """Maps one result row to an instance of ``T``."""

    def map_row(self, row: Row, row_index: int) -> T_co:
        """Build one object from ``row``.

        Args:
            row: Column-name keyed row.
            row_index: Zero-based position of the row in the result.
        """
        ...


@runtime_checkable
class Executor(Protocol):
    """Runs parameterized SQL against a database."""

    def execute_rowset(
        self, sql: str, params: Sequence[BoundParameter]
    ) -> list[dict[str, Any]]:
        """Run a query and return every row as a dict."""
        ...

    def execute_scalar(self, sql: str, params: Sequence[BoundParameter]) -> Any | None:
        """Run a query and return the first column of the first row, or ``None``."""
        ...

    def execute_non_query(self, sql: str, params: Sequence[BoundParameter]) -> int:
        """Run a statement, commit, and return the affected row count."""
        ...

    def query(
        self,
        sql: str,
        params: Sequence[BoundParameter],
        mapper: RowMapper[T],
    ) -> list[T]:
        """Run a query and map every row through ``mapper``."""
        ...

    def execute_reader(
        self,
        sql: str,
        params: Sequence[BoundParameter],
        action: ReaderAction,
    ) -> None:
        """Run a query and stream its rows to ``action`` while the connection is held."""
        ...

    def close(self) -> None:
        """Release any connection held by the executor."""
        ...


def bind_values(params: Sequence[BoundParameter]) -> dict[str, Any]:
    """Return the ``{name: value}`` mapping for a parameter list.

    A later parameter with the same name overrides an earlier one.
    """
    return {p.name: p.value for p in params}


def map_rows(rows: Sequence[Row], mapper: RowMapper[T]) -> list[T]:
    """Apply ``mapper`` to ``rows`` in order."""
    return [mapper.map_row(row, index) for index, row in enumerate(rows)]
