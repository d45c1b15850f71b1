"""SQLite dialect."""
from __future__ import annotations

from easysql.compile.base import SQLDialect


class SQLiteDialect(SQLDialect):
    """Renders SQLite-flavoured parameterized SQL.

    Parameter style: ``:name`` – compatible with Python's built-in
    ``sqlite3`` named-parameter execution (``cursor.execute(sql, dict)``)
    and with SQLAlchemy ``text()`` constructs on any backend.

    ``ROW_NUMBER()`` requires SQLite 3.25 or newer.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def concat(self, *parts: str) -> str:
        return " || ".join(parts)
