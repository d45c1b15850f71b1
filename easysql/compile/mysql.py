"""MySQL dialect."""

from __future__ import annotations

from easysql.compile.base import SQLDialect


class MySQLDialect(SQLDialect):
    """Renders MySQL-flavoured parameterized SQL.

    Parameter style: ``%(name)s`` – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` named-parameter execution.

    Note: ``||`` is logical OR in MySQL unless ``PIPES_AS_CONCAT`` is set,
    so concatenation always goes through ``CONCAT()``.  Window functions
    require MySQL 8.0.
    """

    default_paramstyle = "pyformat"

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def concat(self, *parts: str) -> str:
        return f"CONCAT({', '.join(parts)})"
