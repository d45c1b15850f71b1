"""Final SQL rendering: merge statement, condition, order and suffix.

The WHERE placement is decided in a fixed priority order; the first rule
that applies wins:

1. ``PLACEHOLDER`` – the statement contains ``{where}``; it is replaced by
   the condition, or by ``1=1`` when there is none.
2. ``CONTINUE`` – the statement already mentions ``where``; the condition
   is appended as-is and continues the caller's clause with its own
   connective.
3. ``STRIP_AND`` – the condition starts with ``AND``; the connective is
   dropped and ``WHERE`` is inserted.
4. ``APPEND`` – any other non-empty condition gets ``WHERE`` in front.
5. ``NONE`` – no condition; the statement is used unchanged.

Accumulated ORDER BY text is then appended unless the statement already
orders itself, and finally the suffix.
"""

from __future__ import annotations

from enum import Enum

from easysql.compile import sqltext
from easysql.schema.container import StatementContainer


class WherePlacement(str, Enum):
    """How the accumulated condition is merged into the statement."""

    PLACEHOLDER = "placeholder"
    CONTINUE = "continue"
    STRIP_AND = "strip_and"
    APPEND = "append"
    NONE = "none"


def classify(statement: str, condition: str) -> WherePlacement:
    """Return the placement rule that applies to ``statement``/``condition``."""
    if sqltext.has_where_placeholder(statement):
        return WherePlacement.PLACEHOLDER
    if sqltext.mentions_where(statement):
        return WherePlacement.CONTINUE
    if sqltext.strip_leading_and(condition) is not None:
        return WherePlacement.STRIP_AND
    if condition.strip():
        return WherePlacement.APPEND
    return WherePlacement.NONE


def compose_where(statement: str, condition: str) -> str:
    """Merge ``condition`` into ``statement`` following :func:`classify`."""
    placement = classify(statement, condition)
    if placement is WherePlacement.PLACEHOLDER:
        return sqltext.substitute_where_placeholder(statement, condition)
    if placement is WherePlacement.CONTINUE:
        return statement + condition
    if placement is WherePlacement.STRIP_AND:
        return f"{statement} WHERE {sqltext.strip_leading_and(condition)}"
    if placement is WherePlacement.APPEND:
        return f"{statement} WHERE {condition.strip()}"
    return statement


def render(container: StatementContainer) -> str:
    """Render the container's pieces into one SQL string.

    Pure with respect to the container: rendering twice without an
    intervening mutation yields the same text.
    """
    sql = compose_where(container.statement, container.condition)
    order = "" if sqltext.has_order_clause(sql) else container.order
    return sql + order + container.suffix
