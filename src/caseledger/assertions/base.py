"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

from caseledger.location import SourceLocation


class ResultKind(str, Enum):
    ERROR = "error"
    SUCCESS = "success"
    CRITICAL = "critical"

    @property
    def tag(self) -> str:
        """Status tag printed in front of a drawn entry."""
        return _TAGS[self]

    @property
    def counts_as_error(self) -> bool:
        return self is not ResultKind.SUCCESS


_TAGS = {
    ResultKind.ERROR: "[FAILED]",
    ResultKind.SUCCESS: "[SUCCESS]",
    ResultKind.CRITICAL: "[CRITICAL]",
}


class ComparisonKind(str, Enum):
    EQUAL = "eq"
    NOT_EQUAL = "uneq"
    GREATER_THAN = "gt"
    LESS_THAN = "lt"
    GREATER_OR_EQUAL = "geq"
    LESS_OR_EQUAL = "leq"
    # reserved, never evaluated
    MEM_LEAK = "mem_leak"


@dataclass
class LogEntry:
    """A single recorded outcome in a case ledger.

    Attributes:
        result: Outcome kind.
        message: "OK" on success, otherwise a description of the failure.
            For sub-function entries, the qualified name of the function.
        duration_ns: Measured run time. Only sub-function entries are timed;
            assertion entries keep 0.
        function: Sub-function to run for this entry, if any.
        location: Where the entry was issued, when known.
    """

    result: ResultKind
    message: str
    duration_ns: int = 0
    function: Callable[[Any], Any] | None = None
    location: SourceLocation | None = None


class Ledger:
    """Append-only, insertion-ordered sequence of log entries."""

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def append(self, entry: LogEntry) -> LogEntry:
        self._entries.append(entry)
        return entry

    def last(self) -> LogEntry | None:
        return self._entries[-1] if self._entries else None

    def functions(self) -> list[LogEntry]:
        return [entry for entry in self._entries if entry.function is not None]

    @property
    def error_count(self) -> int:
        return sum(1 for entry in self._entries if entry.result.counts_as_error)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> LogEntry:
        return self._entries[index]
