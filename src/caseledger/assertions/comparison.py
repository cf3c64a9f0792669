"""Ordering comparisons between two values."""

from __future__ import annotations

import operator
from typing import Any, Callable

from caseledger.assertions.base import ComparisonKind, LogEntry, ResultKind

SUCCESS_MESSAGE = "OK"

_PREDICATES: dict[ComparisonKind, Callable[[Any, Any], Any]] = {
    ComparisonKind.EQUAL: operator.eq,
    ComparisonKind.NOT_EQUAL: operator.ne,
    ComparisonKind.GREATER_THAN: operator.gt,
    ComparisonKind.LESS_THAN: operator.lt,
    ComparisonKind.GREATER_OR_EQUAL: operator.ge,
    ComparisonKind.LESS_OR_EQUAL: operator.le,
}

FAILURE_MESSAGES: dict[ComparisonKind, str] = {
    ComparisonKind.EQUAL: "Given values are not equal, expected equal",
    ComparisonKind.NOT_EQUAL: "Given values are equal, expected not equal",
    ComparisonKind.GREATER_THAN: "Given values are not greater, expected greater",
    ComparisonKind.LESS_THAN: "Given values are greater, expected not greater",
    ComparisonKind.GREATER_OR_EQUAL: (
        "Given values are not greater or equal, expected greater or equal"
    ),
    ComparisonKind.LESS_OR_EQUAL: (
        "Given values are greater or equal, expected not greater or equal"
    ),
}


def compare(kind: ComparisonKind, lhs: Any, rhs: Any) -> bool:
    """Evaluate the predicate for ``kind`` as ``lhs <op> rhs``."""
    try:
        predicate = _PREDICATES[kind]
    except KeyError:
        raise ValueError(f"Unknown comparison kind: {kind!r}") from None
    return bool(predicate(lhs, rhs))


def evaluate_comparison(kind: ComparisonKind, lhs: Any, rhs: Any) -> LogEntry | None:
    """Evaluate one comparison and build its ledger entry.

    Returns None for the reserved ``MEM_LEAK`` kind, which records nothing.
    Raises ValueError for anything that is not a ComparisonKind.
    """
    kind = ComparisonKind(kind)
    if kind is ComparisonKind.MEM_LEAK:
        return None

    if compare(kind, lhs, rhs):
        return LogEntry(result=ResultKind.SUCCESS, message=SUCCESS_MESSAGE)
    return LogEntry(result=ResultKind.ERROR, message=FAILURE_MESSAGES[kind])
