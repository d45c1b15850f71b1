"""Value types shared by the statement container and the assembler.

``DbType`` tags every bound parameter with the database type the executor
should bind it as; ``SortOrder`` names the two ORDER BY directions.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from easysql.errors import MalformedInputError

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class DbType(str, Enum):
    """Database type of a bound parameter."""

    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    DECIMAL = "decimal"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    BINARY = "binary"
    OBJECT = "object"

    @classmethod
    def infer(cls, value: Any) -> DbType:
        """Pick a ``DbType`` for a plain Python value.

        ``bool`` is checked before ``int`` (it is an ``int`` subclass) and
        ``datetime`` before ``date`` for the same reason.
        """
        if value is None:
            return cls.OBJECT
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INT32 if _INT32_MIN <= value <= _INT32_MAX else cls.INT64
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, Decimal):
            return cls.DECIMAL
        if isinstance(value, dt.datetime):
            return cls.DATETIME
        if isinstance(value, dt.date):
            return cls.DATE
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls.BINARY
        if isinstance(value, str):
            return cls.STRING
        return cls.OBJECT


class SortOrder(str, Enum):
    """ORDER BY direction."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def coerce(cls, value: SortOrder | str) -> SortOrder:
        """Accept a ``SortOrder`` or a case-insensitive ``'asc'``/``'desc'``.

        A blank direction means ascending.

        Raises:
            MalformedInputError: If ``value`` names no direction.
        """
        if isinstance(value, cls):
            return value
        direction = (value or "").strip().upper()
        if not direction:
            return cls.ASC
        try:
            return cls(direction)
        except ValueError as exc:
            raise MalformedInputError(value, value) from exc


# ---------------------------------------------------------------------------
# Bound parameter
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoundParameter:
    """One registered bind parameter.

    Attributes:
        name: Placeholder name, unique within one rendering.
        db_type: Database type the executor binds the value as.
        value: The Python value.
    """

    name: str
    db_type: DbType
    value: Any
