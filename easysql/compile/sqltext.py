"""Keyword and placeholder detection over raw SQL text.

Rendering decisions depend on a handful of case-insensitive checks against
the caller's statement and the accumulated condition.  Each check lives
here as one named step so the exact matching rules are easy to audit.

The checks work on raw text, not on a parsed statement: a
``where`` inside an identifier or alias (``somewhere_id``) still counts as
a literal WHERE, and a leading ``AND`` is recognised only as a whole word.
"""

from __future__ import annotations

import re

#: Marker in a statement template where the predicate clause is inserted.
WHERE_PLACEHOLDER = "{where}"

#: Substituted for the placeholder when no predicates were accumulated.
TAUTOLOGY = "1=1"

_PLACEHOLDER_RE = re.compile(re.escape(WHERE_PLACEHOLDER), re.IGNORECASE)
_LEADING_AND_RE = re.compile(r"^and\b", re.IGNORECASE)


def has_where_placeholder(statement: str) -> bool:
    """True if ``statement`` contains ``{where}`` in any letter case."""
    return _PLACEHOLDER_RE.search(statement) is not None


def substitute_where_placeholder(statement: str, condition: str) -> str:
    """Replace every ``{where}`` with the trimmed condition, or ``1=1`` if empty."""
    replacement = condition.strip() or TAUTOLOGY
    return _PLACEHOLDER_RE.sub(lambda _m: replacement, statement)


def mentions_where(statement: str) -> bool:
    """True if ``where`` appears anywhere in ``statement`` (substring match)."""
    return "where" in statement.lower()


def strip_leading_and(condition: str) -> str | None:
    """Return the trimmed condition without its leading ``AND``.

    Returns:
        The remainder (trimmed) when the trimmed condition starts with the
        word ``AND``; ``None`` otherwise.
    """
    trimmed = condition.strip()
    if _LEADING_AND_RE.match(trimmed) is None:
        return None
    return trimmed[3:].strip()


def has_order_clause(sql: str) -> bool:
    """True if ``sql`` contains `` order `` (space-delimited, any case)."""
    return " order " in sql.lower()


def references_name(condition: str, name: str) -> bool:
    """True if ``name`` followed by a word boundary occurs in ``condition``."""
    return re.search(re.escape(name) + r"\b", condition) is not None


def replace_token(statement: str, token_id: str, value: str) -> str:
    """Replace every ``{token_id}`` in ``statement`` with ``value`` verbatim."""
    return statement.replace("{" + token_id + "}", value)
