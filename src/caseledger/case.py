from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any, Callable, TextIO

from caseledger.assertions.base import ComparisonKind, Ledger, LogEntry, ResultKind
from caseledger.assertions.comparison import evaluate_comparison
from caseledger.clock import Clock
from caseledger.errors import ResourceViolationError
from caseledger.location import SourceLocation, capture_location
from caseledger.resources import ResourceCounter

CaseFunction = Callable[["TestCase"], Any]

RC_VIOLATION_MESSAGE = "(RC < 0) Deallocating not allocated value"


class CaseState(str, Enum):
    DECLARED = "declared"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class TestCase:
    """One declared test case: its ledger, its resource counter and its output.

    Use it as a context manager. Leaving the ``with`` block checks the
    resource counter one last time and prints the summary, whichever way the
    block exits.
    """

    # keep pytest from collecting this class when imported into test modules
    __test__ = False

    def __init__(
        self,
        name: str,
        body: CaseFunction,
        location: SourceLocation | None = None,
        stream: TextIO | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ):
        self.name = name
        self.body = body
        self.stream = stream if stream is not None else sys.stdout
        self.clock = clock or Clock()
        self.logger = logger or logging.getLogger("caseledger")

        self.location = location or capture_location()
        self.current_location = self.location
        self.resources = ResourceCounter()
        self.errors = 0
        self.infos = Ledger()
        self.rc_infos: list[SourceLocation] = []
        self.body_duration_ns: int | None = None
        self.elapsed_ns: int | None = None
        self.state = CaseState.DECLARED
        self.started_ns = self.clock.wall_ns()

    def __repr__(self) -> str:
        return f"TestCase(name={self.name!r}, state={self.state.value}, errors={self.errors})"

    def __enter__(self) -> TestCase:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if isinstance(exc, ResourceViolationError):
            # summary was flushed when the violation was recorded
            return False
        if exc is None:
            self.check_resources(self.location)
            self.state = CaseState.COMPLETED
        self.summary()
        return False

    # --- timing ---

    def since_time(self) -> int:
        """Nanoseconds elapsed since the case was declared."""
        return self.clock.since(self.started_ns)

    def calculate_time(self, func: CaseFunction) -> int:
        return self.clock.measure(func, self)

    # --- running ---

    def test_function(self, func: CaseFunction) -> CaseFunction:
        """Register a sub-function to run after the body, in registration order."""
        self.infos.append(
            LogEntry(
                result=ResultKind.SUCCESS,
                message=getattr(func, "__qualname__", repr(func)),
                function=func,
            )
        )
        return func

    def run_tests(self) -> None:
        """Run the body, then every registered sub-function, timing each."""
        self.state = CaseState.RUNNING
        self.logger.debug(f"Running case '{self.name}'")

        self.body_duration_ns = self.calculate_time(self.body)

        for entry in self.infos:
            if entry.function is not None:
                entry.duration_ns = self.calculate_time(entry.function)

        self.logger.debug(
            f"Case '{self.name}' body took {self.body_duration_ns}ns, "
            f"{self.errors} error(s) so far"
        )

    # --- output ---

    def summary(self) -> None:
        self.elapsed_ns = self.since_time()
        self.stream.write(
            "\n[SUMMARY]\n"
            f"File: {self.location.file_name}\n"
            f"Error/s: {self.errors}\n"
            f"{self.elapsed_ns}ns\n"
        )
        self.stream.flush()

    def draw_case(self, entry: LogEntry) -> None:
        """Write the status tag, counting failures as they are drawn."""
        if entry.result.counts_as_error:
            self.errors += 1
        self.stream.write(f"{entry.result.tag}: ")

    def put(self, entry: LogEntry) -> None:
        """Draw ``entry`` as one output line."""
        loc = entry.location or self.current_location
        self.draw_case(entry)
        self.stream.write(
            f"({loc.file_name}, {loc.line}:{loc.column}:{entry.duration_ns}ns) "
            f"[{loc.function_name}] -> {entry.message}\n"
        )

    def put_log(self, result: ResultKind, message: str) -> LogEntry:
        return self.infos.append(
            LogEntry(result=result, message=message, location=self.current_location)
        )

    # --- assertions ---

    def assert_that(
        self,
        kind: ComparisonKind,
        lhs: Any,
        rhs: Any,
        location: SourceLocation | None = None,
    ) -> LogEntry | None:
        """Compare ``lhs`` and ``rhs``, record the outcome and print it.

        Failures never raise; they are appended to the ledger and tallied.
        """
        self.current_location = location or capture_location()
        entry = evaluate_comparison(kind, lhs, rhs)
        if entry is None:
            self.logger.debug(f"Ignoring reserved comparison kind {kind!r}")
            return None

        entry.location = self.current_location
        self.infos.append(entry)
        self.put(entry)
        return entry

    def assert_eq(self, lhs: Any, rhs: Any, location: SourceLocation | None = None):
        return self.assert_that(ComparisonKind.EQUAL, lhs, rhs, location)

    def assert_uneq(self, lhs: Any, rhs: Any, location: SourceLocation | None = None):
        return self.assert_that(ComparisonKind.NOT_EQUAL, lhs, rhs, location)

    def assert_gt(self, lhs: Any, rhs: Any, location: SourceLocation | None = None):
        return self.assert_that(ComparisonKind.GREATER_THAN, lhs, rhs, location)

    def assert_lt(self, lhs: Any, rhs: Any, location: SourceLocation | None = None):
        return self.assert_that(ComparisonKind.LESS_THAN, lhs, rhs, location)

    def assert_geq(self, lhs: Any, rhs: Any, location: SourceLocation | None = None):
        return self.assert_that(ComparisonKind.GREATER_OR_EQUAL, lhs, rhs, location)

    def assert_leq(self, lhs: Any, rhs: Any, location: SourceLocation | None = None):
        return self.assert_that(ComparisonKind.LESS_OR_EQUAL, lhs, rhs, location)

    # --- resource tracking ---

    def check_resources(self, location: SourceLocation | None = None) -> None:
        """Abort the case if the resource counter went negative.

        Records a CRITICAL entry, prints the summary and raises
        ResourceViolationError.
        """
        if not self.resources.is_negative:
            return

        self.current_location = location or capture_location()
        self.put(self.put_log(ResultKind.CRITICAL, RC_VIOLATION_MESSAGE))
        self.summary()
        self.state = CaseState.ABORTED
        self.logger.error(
            f"Case '{self.name}' aborted: resource counter is {self.resources.balance}"
        )
        raise ResourceViolationError(self)

    def allocate(self, value_type: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Build ``value_type(*args, **kwargs)`` and count it as acquired."""
        location = capture_location()
        self.check_resources(location)
        self.resources.acquire()
        self.rc_infos.append(location)
        return value_type(*args, **kwargs)

    def deallocate(self, value: Any = None) -> None:
        """Count ``value`` as released; releasing more than was acquired aborts."""
        location = capture_location()
        self.check_resources(location)
        self.resources.release()
        self.check_resources(location)
