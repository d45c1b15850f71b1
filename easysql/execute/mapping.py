"""Explicit row mappers.

Every typed result needs a mapper chosen by the caller for that type; there
is no reflective default.  Two ready-made mappers cover the common cases::

    class Item(BaseModel):
        id: int
        name: str

    items = assembler.execute_as(ModelRowMapper(Item))
    names = assembler.execute_as(CallableRowMapper(lambda row, i: row["name"]))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from easysql.execute.base import Row

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


class ModelRowMapper(Generic[M]):
    """Validates each row into a pydantic model.

    Args:
        model: The target model class.
        columns: Optional ``{field_name: column_name}`` overrides for
            columns whose names differ from the model fields.  Unmapped
            fields are looked up under their own name.
    """

    def __init__(self, model: type[M], columns: Mapping[str, str] | None = None) -> None:
        self._model = model
        self._columns = dict(columns or {})

    def map_row(self, row: Row, row_index: int) -> M:
        data: dict[str, Any] = dict(row)
        for field_name, column in self._columns.items():
            if column in row:
                data[field_name] = row[column]
        return self._model.model_validate(data)


class CallableRowMapper(Generic[T]):
    """Adapts a plain ``(row, row_index) -> T`` function to the mapper protocol."""

    def __init__(self, fn: Callable[[Row, int], T]) -> None:
        self._fn = fn

    def map_row(self, row: Row, row_index: int) -> T:
        return self._fn(row, row_index)
