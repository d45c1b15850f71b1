"""Mutable holder for the pieces of an in-progress statement.

A ``StatementContainer`` is owned by exactly one
:class:`~easysql.compile.builder.QueryAssembler`.  It only stores text and
parameters; it never validates and never truncates except through the
explicit reset operations.
"""

from __future__ import annotations

from easysql.schema.types import BoundParameter


class StatementContainer:
    """Statement skeleton, accumulated condition/order text, parameters, suffix."""

    def __init__(self) -> None:
        self._statement: list[str] = []
        self._condition: list[str] = []
        self._order: list[str] = []
        self._parameters: list[BoundParameter] = []
        self._suffix: str = ""

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def statement(self) -> str:
        return "".join(self._statement)

    @property
    def condition(self) -> str:
        return "".join(self._condition)

    @property
    def order(self) -> str:
        return "".join(self._order)

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def parameters(self) -> tuple[BoundParameter, ...]:
        """Snapshot of the registered parameters in registration order."""
        return tuple(self._parameters)

    def parameter_names(self) -> set[str]:
        return {p.name for p in self._parameters}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, statement: str = "", suffix: str = "") -> None:
        """Clear every buffer and the parameter list, then seed statement and suffix."""
        self._parameters.clear()
        self._statement.clear()
        self._condition.clear()
        self._order.clear()
        self._statement.append(statement)
        self._suffix = suffix

    def replace_statement(self, statement: str) -> None:
        """Replace only the statement text; condition, order and parameters stay."""
        self._statement.clear()
        self._statement.append(statement)

    def clear_condition(self) -> None:
        self._condition.clear()

    def set_suffix(self, suffix: str) -> None:
        self._suffix = suffix

    # ------------------------------------------------------------------
    # Accumulation
    # ------------------------------------------------------------------

    def append_condition(self, fragment: str) -> None:
        self._condition.append(fragment)

    def append_order(self, fragment: str) -> None:
        self._order.append(fragment)

    def add_parameter(self, parameter: BoundParameter) -> None:
        self._parameters.append(parameter)
