"""Fluent statement assembly, rendering, and execution.

``QueryAssembler`` is the top-level surface.  It owns one
:class:`~easysql.schema.container.StatementContainer`, appends predicate
fragments and bind parameters to it, renders the final SQL on demand, and
delegates execution to an injected
:class:`~easysql.execute.base.Executor`::

    qa = QueryAssembler(SQLiteExecutor("app.db"))
    qa.reset("SELECT * FROM item")
    qa.and_equal("kind", "book").and_like("name", "python").order_by_desc("id")
    qa.get_sql()
    # SELECT * FROM item WHERE kind = :kind AND name LIKE '%' || :name || '%' ORDER BY id DESC
    rows = qa.execute()

Parameter naming
----------------
A bound predicate derives its parameter name from the column: ``.`` becomes
``dot`` so that ``t.Id`` binds as ``tdotId``.  When the condition text
already references that name, or a parameter of that name is registered,
the name gets an ``_other`` suffix (then ``_other2``, ``_other3`` ...), so
two predicates on one column never share a bind parameter.

State
-----
Nothing is cleared implicitly: call :meth:`QueryAssembler.reset` at the
start of every logical query.  An assembler is not thread-safe; use one per
query-building session (see :mod:`easysql.session`).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from easysql.compile import sqltext
from easysql.compile.base import CompiledSQL, SQLDialect
from easysql.compile.pagination import (
    MAX_ROWS_PARAM,
    START_ROW_PARAM,
    Page,
    PageRequest,
    absorb_condition,
    build_count_statement,
    build_page_statement,
)
from easysql.compile.registry import DialectFactory
from easysql.compile.render import render
from easysql.config import get_settings
from easysql.errors import MalformedInputError, NoExecutorError
from easysql.execute.base import Executor, ReaderAction, RowMapper
from easysql.schema.container import StatementContainer
from easysql.schema.types import BoundParameter, DbType, SortOrder

logger = logging.getLogger(__name__)

T = TypeVar("T")

_AND = "AND"
_OR = "OR"
_NONE = ""

_DOT_TOKEN = "dot"
_OTHER_SUFFIX = "_other"
_INTEGER_TOKEN_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$", re.ASCII)

#: Quick-search letter meaning "no filter".
QUICK_SEARCH_ALL = "All"


class QueryAssembler:
    """Accumulates predicates and parameters, renders SQL, runs it.

    Args:
        executor: Runs rendered statements.  Optional; without one the
            assembler can still render SQL.
        dialect: Placeholder and concatenation rules.  Defaults to the
            dialect named by :class:`~easysql.config.Settings`.
        container: Statement state to build on.  A fresh container is
            created when omitted.
        log_sql: Log every rendered statement at DEBUG.  Defaults to
            ``Settings.log_sql``.
    """

    def __init__(
        self,
        executor: Executor | None = None,
        dialect: SQLDialect | None = None,
        *,
        container: StatementContainer | None = None,
        log_sql: bool | None = None,
    ) -> None:
        if dialect is None or log_sql is None:
            settings = get_settings()
            if dialect is None:
                dialect = DialectFactory.create(settings.dialect, settings.paramstyle)
            if log_sql is None:
                log_sql = settings.log_sql
        self._executor = executor
        self._dialect = dialect
        self._container = container if container is not None else StatementContainer()
        self._log_sql = log_sql

    @property
    def container(self) -> StatementContainer:
        return self._container

    @property
    def dialect(self) -> SQLDialect:
        return self._dialect

    @property
    def executor(self) -> Executor | None:
        return self._executor

    @property
    def parameters(self) -> tuple[BoundParameter, ...]:
        return self._container.parameters

    # ------------------------------------------------------------------
    # Lifecycle and rendering
    # ------------------------------------------------------------------

    def reset(self, sql: str = "", suffix: str = "") -> QueryAssembler:
        """Start a new statement: clear all state, then set statement and suffix.

        Args:
            sql: Statement skeleton, optionally containing ``{where}``.
            suffix: Text appended verbatim after ORDER BY.
        """
        self._container.reset(sql, suffix)
        return self

    def replace(self, token_id: str, value: str) -> QueryAssembler:
        """Substitute ``{token_id}`` in the statement with literal ``value``."""
        self._container.replace_statement(
            sqltext.replace_token(self._container.statement, token_id, value)
        )
        return self

    def set_suffix(self, suffix: str) -> QueryAssembler:
        """Replace the text appended after ORDER BY, e.g. ``"; SELECT last_insert_rowid()"``."""
        self._container.set_suffix(suffix)
        return self

    def get_sql(self) -> str:
        """Render the final SQL text from the current state."""
        sql = render(self._container)
        if self._log_sql:
            logger.debug("Rendered SQL: %s", sql)
        return sql

    def compile(self) -> CompiledSQL:
        """Render the SQL and snapshot the parameters in one value."""
        return CompiledSQL(
            sql=self.get_sql(),
            parameters=self._container.parameters,
            dialect=self._dialect.dialect_name,
        )

    # ------------------------------------------------------------------
    # Statement skeletons
    # ------------------------------------------------------------------

    def select(self, table: str, fields: Sequence[str] | None = None) -> QueryAssembler:
        """Set the statement to ``SELECT <fields> FROM <table>`` (``*`` by default)."""
        columns = ", ".join(fields) if fields else "*"
        self._container.replace_statement(f"SELECT {columns} FROM {table}")
        return self

    def update(self, table: str, values: Mapping[str, Any] | None = None) -> QueryAssembler:
        """Set the statement to an UPDATE over every registered parameter.

        ``values`` are registered first with :meth:`add_param`.  Call this
        after :meth:`reset` and before adding predicates, otherwise the
        predicate parameters end up in the SET list too.
        """
        for name, value in (values or {}).items():
            self.add_param(name, value)
        assignments = ", ".join(
            f"{p.name} = {self._dialect.param_placeholder(p.name)}"
            for p in self._container.parameters
        )
        self._container.replace_statement(f"UPDATE {table} SET {assignments}")
        return self

    def insert(self, table: str) -> QueryAssembler:
        """Set the statement to an INSERT of every registered parameter."""
        params = self._container.parameters
        columns = ", ".join(p.name for p in params)
        placeholders = ", ".join(self._dialect.param_placeholder(p.name) for p in params)
        self._container.replace_statement(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        )
        return self

    def delete(self, table: str) -> QueryAssembler:
        """Set the statement to ``DELETE FROM <table>``; predicates narrow it."""
        self._container.replace_statement(f"DELETE FROM {table}")
        return self

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def add_param(
        self, name: str, value: Any, db_type: DbType | None = None
    ) -> QueryAssembler:
        """Register a parameter under ``name`` exactly, without a predicate."""
        self._container.add_parameter(
            BoundParameter(name, db_type or DbType.infer(value), value)
        )
        return self

    # ------------------------------------------------------------------
    # Grouping and raw fragments
    # ------------------------------------------------------------------

    def paren_left(self) -> QueryAssembler:
        self._container.append_condition(" (")
        return self

    def paren_right(self) -> QueryAssembler:
        self._container.append_condition(" )")
        return self

    def and_(self) -> QueryAssembler:
        """Append a bare ``AND``, e.g. before :meth:`paren_left`."""
        self._container.append_condition(f" {_AND}")
        return self

    def or_(self) -> QueryAssembler:
        self._container.append_condition(f" {_OR}")
        return self

    def append(self, fragment: str) -> QueryAssembler:
        """Append a trusted SQL fragment verbatim, including its connective."""
        self._container.append_condition(f" {fragment}")
        return self

    def or_equal_true(self, name: str) -> QueryAssembler:
        self._append(_OR, name, "=", "1")
        return self

    def and_not_removed(self, name: str = "Removed") -> QueryAssembler:
        """Append ``AND ( <name> IS NULL OR <name> = 0 )`` for soft-delete flags."""
        self.and_().paren_left()
        self._append(_NONE, name, "IS NULL")
        self._append(_OR, name, "=", "0")
        return self.paren_right()

    # ------------------------------------------------------------------
    # Comparison predicates
    # ------------------------------------------------------------------

    def equal(self, name: str, value: Any, db_type: DbType | None = None) -> QueryAssembler:
        self._predicate(_NONE, name, "=", value, db_type)
        return self

    def and_equal(
        self, name: str, value: Any, db_type: DbType | None = None
    ) -> QueryAssembler:
        self._predicate(_AND, name, "=", value, db_type)
        return self

    def or_equal(self, name: str, value: Any, db_type: DbType | None = None) -> QueryAssembler:
        self._predicate(_OR, name, "=", value, db_type)
        return self

    def equal_int(self, name: str, value: int) -> QueryAssembler:
        self._predicate(_NONE, name, "=", int(value), DbType.INT32)
        return self

    def and_equal_int(self, name: str, value: int) -> QueryAssembler:
        self._predicate(_AND, name, "=", int(value), DbType.INT32)
        return self

    def and_not_equal(
        self, name: str, value: Any, db_type: DbType | None = None
    ) -> QueryAssembler:
        self._predicate(_AND, name, "<>", value, db_type)
        return self

    def and_not_equal_int(self, name: str, value: int) -> QueryAssembler:
        self._predicate(_AND, name, "<>", int(value), DbType.INT32)
        return self

    def and_greater_or_equal(
        self, name: str, value: Any, db_type: DbType | None = None
    ) -> QueryAssembler:
        self._predicate(_AND, name, ">=", value, db_type)
        return self

    def and_less_or_equal(
        self, name: str, value: Any, db_type: DbType | None = None
    ) -> QueryAssembler:
        self._predicate(_AND, name, "<=", value, db_type)
        return self

    def and_less(self, name: str, value: Any, db_type: DbType | None = None) -> QueryAssembler:
        self._predicate(_AND, name, "<", value, db_type)
        return self

    def or_less_or_equal(
        self, name: str, value: Any, db_type: DbType | None = None
    ) -> QueryAssembler:
        self._predicate(_OR, name, "<=", value, db_type)
        return self

    def and_between(
        self,
        name: str,
        start: Any,
        end: Any,
        db_type: DbType = DbType.DATETIME,
    ) -> QueryAssembler:
        """Inclusive range as two predicates; the upper bound binds as ``<name>_other``."""
        self.and_greater_or_equal(name, start, db_type)
        return self.and_less_or_equal(name, end, db_type)

    # ------------------------------------------------------------------
    # NULL checks
    # ------------------------------------------------------------------

    def is_null(self, name: str) -> QueryAssembler:
        self._append(_NONE, name, "IS NULL")
        return self

    def and_is_null(self, name: str) -> QueryAssembler:
        self._append(_AND, name, "IS NULL")
        return self

    def or_is_null(self, name: str) -> QueryAssembler:
        self._append(_OR, name, "IS NULL")
        return self

    def is_not_null(self, name: str) -> QueryAssembler:
        self._append(_NONE, name, "IS NOT NULL")
        return self

    def and_is_not_null(self, name: str) -> QueryAssembler:
        self._append(_AND, name, "IS NOT NULL")
        return self

    def or_is_not_null(self, name: str) -> QueryAssembler:
        self._append(_OR, name, "IS NOT NULL")
        return self

    # ------------------------------------------------------------------
    # LIKE predicates
    # ------------------------------------------------------------------

    def like(self, name: str, value: str) -> QueryAssembler:
        """Substring match: ``name LIKE '%' || :name || '%'``."""
        self._like(_NONE, name, value, leading=True, trailing=True)
        return self

    def and_like(self, name: str, value: Any, db_type: DbType = DbType.STRING) -> QueryAssembler:
        self._like(_AND, name, value, leading=True, trailing=True, db_type=db_type)
        return self

    def or_like(self, name: str, value: Any, db_type: DbType = DbType.STRING) -> QueryAssembler:
        self._like(_OR, name, value, leading=True, trailing=True, db_type=db_type)
        return self

    def left_like(self, name: str, value: str) -> QueryAssembler:
        """Suffix match: the value must end the column (``'%' || :name``)."""
        self._like(_NONE, name, value, leading=True, trailing=False)
        return self

    def right_like(self, name: str, value: str) -> QueryAssembler:
        """Prefix match: the value must start the column (``:name || '%'``)."""
        self._like(_NONE, name, value, leading=False, trailing=True)
        return self

    def and_right_like(self, name: str, value: Any) -> QueryAssembler:
        self._like(_AND, name, value, leading=False, trailing=True)
        return self

    def or_right_like(self, name: str, value: Any) -> QueryAssembler:
        self._like(_OR, name, value, leading=False, trailing=True)
        return self

    def quick_search(self, name: str, letter: str = QUICK_SEARCH_ALL) -> QueryAssembler:
        """Filter ``name`` to values starting with ``letter``.

        ``"All"`` adds nothing; ``"0-9"`` becomes the ``[0-9]`` character
        class (T-SQL LIKE syntax).  Commas are stripped from ``name`` so a
        field list can be passed through.
        """
        return self._quick_search(_NONE, name, letter)

    def and_quick_search(self, name: str, letter: str = QUICK_SEARCH_ALL) -> QueryAssembler:
        return self._quick_search(_AND, name, letter)

    def or_quick_search(self, name: str, letter: str = QUICK_SEARCH_ALL) -> QueryAssembler:
        return self._quick_search(_OR, name, letter)

    # ------------------------------------------------------------------
    # Set membership (inlined, integers only)
    # ------------------------------------------------------------------

    def and_in(self, name: str, values: str | Sequence[int]) -> QueryAssembler:
        """Append ``AND name IN (...)`` with the integers rendered inline.

        Args:
            name: Column reference.
            values: ``"1,2,3"`` text or a sequence of ``int``.

        Raises:
            MalformedInputError: If any token is not an integer.
        """
        self._membership(_AND, name, "IN", values)
        return self

    def and_not_in(self, name: str, values: str | Sequence[int]) -> QueryAssembler:
        self._membership(_AND, name, "NOT IN", values)
        return self

    def or_in(self, name: str, values: str | Sequence[int]) -> QueryAssembler:
        self._membership(_OR, name, "IN", values)
        return self

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def order_by(self, name: str, order: SortOrder | str = SortOrder.ASC) -> QueryAssembler:
        """Append an ORDER BY key; later keys extend the same clause."""
        direction = SortOrder.coerce(order).value
        if self._container.order:
            self._container.append_order(f", {name} {direction}")
        else:
            self._container.append_order(f" ORDER BY {name} {direction}")
        return self

    def order_by_asc(self, name: str) -> QueryAssembler:
        return self.order_by(name, SortOrder.ASC)

    def order_by_desc(self, name: str) -> QueryAssembler:
        return self.order_by(name, SortOrder.DESC)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self) -> list[dict[str, Any]]:
        """Render and run the statement, returning every row."""
        executor = self._require_executor()
        sql = self._prepared("rowset")
        return executor.execute_rowset(sql, self._container.parameters)

    def execute_as(self, mapper: RowMapper[T]) -> list[T]:
        """Render and run the statement, mapping rows through ``mapper``."""
        executor = self._require_executor()
        sql = self._prepared("query")
        return executor.query(sql, self._container.parameters, mapper)

    def execute_reader(self, action: ReaderAction) -> None:
        """Render and run the statement, streaming rows to ``action``."""
        executor = self._require_executor()
        sql = self._prepared("reader")
        executor.execute_reader(sql, self._container.parameters, action)

    def execute_scalar_text(self) -> str:
        """Render and run the statement; return the scalar as text (``""`` for NULL)."""
        executor = self._require_executor()
        sql = self._prepared("scalar")
        return _as_text(executor.execute_scalar(sql, self._container.parameters))

    def execute_non_query(self) -> int:
        """Render and run the statement; return the affected row count."""
        executor = self._require_executor()
        sql = self._prepared("non-query")
        return executor.execute_non_query(sql, self._container.parameters)

    def execute_insert(self, table: str) -> int:
        return self.insert(table).execute_non_query()

    def execute_update(self, table: str, values: Mapping[str, Any] | None = None) -> int:
        return self.update(table, values).execute_non_query()

    def execute_delete(self, table: str) -> int:
        return self.delete(table).execute_non_query()

    # Literal statements bypass the container entirely.

    def scalar_text(self, sql: str) -> str:
        return _as_text(self._require_executor().execute_scalar(sql, ()))

    def scalar_text_by_id(self, sql: str, name: str, value: int | str) -> str:
        param = BoundParameter(name, DbType.INT32, int(value))
        return _as_text(self._require_executor().execute_scalar(sql, (param,)))

    def scalar_text_by_string(self, sql: str, name: str, value: str) -> str:
        param = BoundParameter(name, DbType.STRING, value)
        return _as_text(self._require_executor().execute_scalar(sql, (param,)))

    def non_query(self, sql: str, name: str, value: str) -> int:
        param = BoundParameter(name, DbType.STRING, value)
        return self._require_executor().execute_non_query(sql, (param,))

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def page_data(
        self,
        page_index: int,
        page_size: int,
        key: str,
        fields: str,
        tables: str,
        sort: str = "",
        order: SortOrder | str = SortOrder.ASC,
    ) -> Page[dict[str, Any]]:
        """Fetch one page of the filtered rows and the total match count.

        The accumulated condition filters ``SELECT <fields> FROM <tables>``;
        rows are ranked by ``sort`` (``key`` when empty) and the page at
        ``page_index`` (zero-based) of size ``page_size`` is returned.  The
        count query only runs when the page has rows; an empty page reports
        a total of ``0``.
        """
        request = PageRequest(
            page_index, page_size, key, fields, tables, sort, SortOrder.coerce(order)
        )
        return self._page(request, self.execute)

    def page_data_as(
        self,
        mapper: RowMapper[T],
        page_index: int,
        page_size: int,
        key: str,
        fields: str,
        tables: str,
        sort: str = "",
        order: SortOrder | str = SortOrder.ASC,
    ) -> Page[T]:
        """Like :meth:`page_data`, mapping each row through ``mapper``."""
        request = PageRequest(
            page_index, page_size, key, fields, tables, sort, SortOrder.coerce(order)
        )
        return self._page(request, lambda: self.execute_as(mapper))

    def _page(self, request: PageRequest, fetch: Callable[[], list[T]]) -> Page[T]:
        where = absorb_condition(self._container.condition)
        self._container.clear_condition()
        filter_params = self._container.parameters

        placeholder = self._dialect.param_placeholder
        self._container.add_parameter(
            BoundParameter(START_ROW_PARAM, DbType.INT32, request.offset)
        )
        self._container.add_parameter(
            BoundParameter(MAX_ROWS_PARAM, DbType.INT32, request.page_size)
        )
        self._container.replace_statement(
            build_page_statement(
                request, where, placeholder(START_ROW_PARAM), placeholder(MAX_ROWS_PARAM)
            )
        )

        rows = fetch()
        total = self._count_rows(request, where, filter_params, len(rows))
        return Page(
            rows=rows, total=total, page_index=request.page_index, page_size=request.page_size
        )

    def _count_rows(
        self,
        request: PageRequest,
        where: str,
        filter_params: tuple[BoundParameter, ...],
        row_count: int,
    ) -> int:
        if row_count == 0:
            logger.debug("Page %d is empty; reporting total 0 without counting", request.page_index)
            return 0
        count_sql = build_count_statement(request, where)
        self._container.replace_statement(count_sql)
        if self._log_sql:
            logger.debug("Rendered SQL: %s", count_sql)
        value = self._require_executor().execute_scalar(count_sql, filter_params)
        return int(value) if value not in (None, "") else 0

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the executor's connection."""
        if self._executor is not None:
            self._executor.close()

    def __enter__(self) -> QueryAssembler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _append(self, connective: str, *parts: str) -> None:
        # " <connective> <column> <operator> <operand>", empty parts dropped
        self._container.append_condition(" " + " ".join(p for p in (connective, *parts) if p))

    def _predicate(
        self,
        connective: str,
        name: str,
        operator: str,
        value: Any,
        db_type: DbType | None,
        operand: Callable[[str], str] | None = None,
    ) -> None:
        param_name = self._parameter_name(name)
        placeholder = self._dialect.param_placeholder(param_name)
        self._append(connective, name, operator, operand(placeholder) if operand else placeholder)
        self._container.add_parameter(
            BoundParameter(param_name, db_type or DbType.infer(value), value)
        )

    def _parameter_name(self, name: str) -> str:
        base = name.strip().replace(".", _DOT_TOKEN)
        taken = self._container.parameter_names()
        if base not in taken and not sqltext.references_name(self._container.condition, base):
            return base
        candidate = base + _OTHER_SUFFIX
        counter = 2
        while candidate in taken:
            candidate = f"{base}{_OTHER_SUFFIX}{counter}"
            counter += 1
        return candidate

    def _like(
        self,
        connective: str,
        name: str,
        value: Any,
        *,
        leading: bool,
        trailing: bool,
        db_type: DbType = DbType.STRING,
    ) -> None:
        self._predicate(
            connective,
            name,
            "LIKE",
            value,
            db_type,
            lambda p: self._dialect.like_pattern(p, leading=leading, trailing=trailing),
        )

    def _quick_search(self, connective: str, name: str, letter: str) -> QueryAssembler:
        if letter == QUICK_SEARCH_ALL:
            return self
        if letter == "0-9":
            letter = "[0-9]"
        self._like(connective, name.strip().replace(",", ""), letter, leading=False, trailing=True)
        return self

    def _membership(
        self, connective: str, name: str, operator: str, values: str | Sequence[int]
    ) -> None:
        self._append(connective, name, operator, f"({_integer_list(values)})")

    def _require_executor(self) -> Executor:
        if self._executor is None:
            raise NoExecutorError()
        return self._executor

    def _prepared(self, kind: str) -> str:
        sql = self.get_sql()
        logger.debug(
            "Executing %s with parameters %s",
            kind,
            [p.name for p in self._container.parameters],
        )
        return sql


def _integer_list(values: str | Sequence[int]) -> str:
    """Validate and render an inline integer list.

    Text input is normalized first: ``,,`` collapses to ``,`` and leading or
    trailing commas are dropped.  Only ASCII digits are accepted, and each
    token is re-rendered from its parsed integer.

    Raises:
        MalformedInputError: On a non-integer token or an empty list.
    """
    if isinstance(values, str):
        text = values.replace(",,", ",").strip(",")
        tokens = text.split(",")
        for token in tokens:
            if _INTEGER_TOKEN_RE.match(token) is None:
                raise MalformedInputError(token, text)
        return ",".join(str(int(token)) for token in tokens)
    items = list(values)
    if not items:
        raise MalformedInputError("", "")
    for item in items:
        if isinstance(item, bool) or not isinstance(item, int):
            raise MalformedInputError(repr(item), repr(items))
    return ",".join(str(item) for item in items)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)
