"""Assertion system: result model and comparison engine."""

from caseledger.assertions.base import ComparisonKind, Ledger, LogEntry, ResultKind
from caseledger.assertions.comparison import evaluate_comparison

__all__ = [
    "ComparisonKind",
    "Ledger",
    "LogEntry",
    "ResultKind",
    "evaluate_comparison",
]
