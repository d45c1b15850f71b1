"""Dialect registry (Open/Closed Principle).

``DialectFactory`` maps dialect target names to
:class:`~easysql.compile.base.SQLDialect` implementations.  Register a new
dialect once; ``easysql`` and the session factory look it up by name.

Usage::

    from easysql.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from easysql.compile.base import SQLDialect
from easysql.config import ParamStyle
from easysql.errors import DialectError


class DialectFactory:
    """Registry mapping dialect target names to :class:`SQLDialect` classes.

    Example::

        @DialectFactory.register("oracle")
        class OracleDialect(SQLDialect):
            ...

        dialect = DialectFactory.create("oracle")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect target name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[SQLDialect]) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str, paramstyle: ParamStyle | None = None) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Args:
            name: The dialect target name (case-insensitive).
            paramstyle: Optional placeholder style override.

        Returns:
            A fresh :class:`SQLDialect` instance.

        Raises:
            DialectError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name.strip().lower())
        if dialect_cls is None:
            raise DialectError(name, cls.registered_targets())
        return dialect_cls(paramstyle)

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect target names."""
        return sorted(cls._dialects)
