"""Dialect abstractions: CompiledSQL and the SQLDialect ABC.

The Template Method pattern is used:
- ``SQLDialect`` owns the placeholder rendering and LIKE-pattern assembly.
- ``SQLiteDialect``, ``PostgresDialect``, ``MySQLDialect`` and
  ``SQLServerDialect`` override the dialect-specific steps (default
  parameter style and string concatenation).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from easysql.config import ParamStyle
from easysql.errors import ConfigurationError
from easysql.schema.types import BoundParameter

_PARAMSTYLES: frozenset[str] = frozenset({"named", "pyformat", "at"})


@dataclass(frozen=True)
class CompiledSQL:
    """A rendered statement ready to hand to an executor.

    Attributes:
        sql: The rendered SQL text with dialect placeholders.
        parameters: Bound parameters in registration order.
        dialect: The dialect name the placeholders were rendered for.
    """

    sql: str
    parameters: tuple[BoundParameter, ...]
    dialect: str

    @property
    def params(self) -> dict[str, Any]:
        """Return the ``{name: value}`` mapping accepted by DB-API drivers."""
        return {p.name: p.value for p in self.parameters}


class SQLDialect(ABC):
    """Abstract base for dialect-specific rendering rules.

    Args:
        paramstyle: Overrides :attr:`default_paramstyle`.  ``'named'``
            renders ``:name``, ``'pyformat'`` renders ``%(name)s`` and
            ``'at'`` renders ``@name``.

    Raises:
        ConfigurationError: If ``paramstyle`` is not one of the above.
    """

    #: Placeholder style used when none is given at construction.
    default_paramstyle: ClassVar[ParamStyle] = "named"

    def __init__(self, paramstyle: ParamStyle | None = None) -> None:
        style = paramstyle or self.default_paramstyle
        if style not in _PARAMSTYLES:
            raise ConfigurationError(
                f"Unknown paramstyle '{style}'. Expected one of {sorted(_PARAMSTYLES)}.",
                setting="paramstyle",
            )
        self._paramstyle: ParamStyle = style

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'sqlite'``)."""

    @abstractmethod
    def concat(self, *parts: str) -> str:
        """Return a SQL expression concatenating ``parts``.

        Args:
            parts: SQL expressions (literals or placeholders).

        Returns:
            Dialect-specific string concatenation expression.
        """

    @property
    def paramstyle(self) -> ParamStyle:
        return self._paramstyle

    def param_placeholder(self, name: str) -> str:
        """Return the SQL placeholder string for a named parameter."""
        if self._paramstyle == "pyformat":
            return f"%({name})s"
        if self._paramstyle == "at":
            return f"@{name}"
        return f":{name}"

    def wildcard_literal(self) -> str:
        """Return the quoted ``%`` literal used in LIKE patterns.

        ``pyformat`` drivers treat a bare ``%`` as a format directive, so the
        literal is doubled for them.
        """
        return "'%%'" if self._paramstyle == "pyformat" else "'%'"

    def like_pattern(self, placeholder: str, *, leading: bool, trailing: bool) -> str:
        """Wrap ``placeholder`` with wildcards on the requested sides.

        Args:
            placeholder: The rendered parameter placeholder.
            leading: Prepend a ``%`` wildcard (match any prefix).
            trailing: Append a ``%`` wildcard (match any suffix).

        Returns:
            The placeholder itself when no side is requested, otherwise a
            concatenation expression.
        """
        if not leading and not trailing:
            return placeholder
        wildcard = self.wildcard_literal()
        parts: list[str] = []
        if leading:
            parts.append(wildcard)
        parts.append(placeholder)
        if trailing:
            parts.append(wildcard)
        return self.concat(*parts)
