"""Offset pagination over arbitrary base queries using a rank window.

Pagination does not rely on ``LIMIT``/``OFFSET`` or ``TOP``.  The filtered
rows are numbered with ``ROW_NUMBER()`` in the requested order and only the
numbers inside the requested window are selected, which works on every
backend with ranking window functions (SQLite 3.25+, PostgreSQL, MySQL 8,
SQL Server)::

    WITH OrderedRows AS (
    SELECT tbltbl.*, ROW_NUMBER() OVER (ORDER BY tbltbl.name ASC) AS RowNum
    FROM (SELECT id, name FROM item WHERE 1=1 AND kind = :kind) AS tbltbl
    )
    SELECT * FROM OrderedRows WHERE RowNum > :startRowIndex AND RowNum <= :startRowIndex + :maximumRows
     ORDER BY name ASC

The total is counted separately over the same filtered subquery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from easysql.schema.types import SortOrder

T = TypeVar("T")

#: Bind parameter holding the zero-based number of rows to skip.
START_ROW_PARAM = "startRowIndex"

#: Bind parameter holding the page size.
MAX_ROWS_PARAM = "maximumRows"

#: Alias of the filtered subquery in both page and count statements.
SUBQUERY_ALIAS = "tbltbl"


@dataclass(frozen=True)
class PageRequest:
    """Everything needed to page one base query.

    Attributes:
        page_index: Zero-based page number.
        page_size: Rows per page.
        key: Primary key column; the fallback sort column and the COUNT target.
        fields: Select list of the base query (e.g. ``"*"`` or ``"id, name"``).
        tables: FROM source of the base query (table, join or subquery).
        sort: Sort column; ``key`` is used when empty.
        order: Sort direction.
    """

    page_index: int
    page_size: int
    key: str
    fields: str
    tables: str
    sort: str = ""
    order: SortOrder = SortOrder.ASC

    @property
    def offset(self) -> int:
        """Number of rows before the first row of this page."""
        return self.page_index * self.page_size

    @property
    def sort_column(self) -> str:
        return self.sort or self.key


@dataclass
class Page(Generic[T]):
    """One page of rows plus the total number of matching rows.

    ``total`` is reported as ``0`` whenever ``rows`` is empty, without
    counting; a request past the last page therefore reports no matches.
    """

    rows: list[T] = field(default_factory=list)
    total: int = 0
    page_index: int = 0
    page_size: int = 0

    @property
    def page_count(self) -> int:
        if self.page_size <= 0:
            return 0
        return -(-self.total // self.page_size)


def absorb_condition(condition: str) -> str:
    """Turn an accumulated condition into a standalone ``WHERE 1=1 ...`` clause."""
    if condition.strip():
        return f"WHERE 1=1 {condition.strip()}"
    return "WHERE 1=1"


def filtered_subquery(request: PageRequest, where: str) -> str:
    return f"(SELECT {request.fields} FROM {request.tables} {where}) AS {SUBQUERY_ALIAS}"


def build_page_statement(
    request: PageRequest,
    where: str,
    start_placeholder: str,
    max_placeholder: str,
) -> str:
    """Return the ranked-subquery statement selecting one page.

    Args:
        request: The page request.
        where: Clause produced by :func:`absorb_condition`.
        start_placeholder: Rendered placeholder of :data:`START_ROW_PARAM`.
        max_placeholder: Rendered placeholder of :data:`MAX_ROWS_PARAM`.
    """
    sort = request.sort_column
    order = request.order.value
    lines = [
        "WITH OrderedRows AS (",
        f"SELECT {SUBQUERY_ALIAS}.*, ROW_NUMBER() OVER (ORDER BY {SUBQUERY_ALIAS}.{sort} {order}) AS RowNum",
        f"FROM {filtered_subquery(request, where)}",
        ")",
        f"SELECT * FROM OrderedRows WHERE RowNum > {start_placeholder} "
        f"AND RowNum <= {start_placeholder} + {max_placeholder}",
        f" ORDER BY {sort} {order}",
    ]
    return "\n".join(lines)


def build_count_statement(request: PageRequest, where: str) -> str:
    """Return the scalar statement counting every row the filter matches."""
    return f"SELECT COUNT({request.key}) FROM {filtered_subquery(request, where)}"
