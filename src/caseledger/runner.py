from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from caseledger.case import CaseState, TestCase
from caseledger.clock import Clock
from caseledger.config import HarnessConfig
from caseledger.errors import ResourceViolationError
from caseledger.metrics import DurationStats, compute_stats
from caseledger.registry import CaseDescriptor, CaseRegistry, default_registry

EXIT_OK = 0
EXIT_FAILED = 1
# same status a process killed by SIGABRT reports
EXIT_CRITICAL = 134


@dataclass
class CaseOutcome:
    name: str
    state: CaseState
    errors: int
    body_duration_ns: int | None
    elapsed_ns: int


@dataclass
class RunResult:
    outcomes: list[CaseOutcome] = field(default_factory=list)
    aborted: bool = False
    fail_on_error: bool = False

    @property
    def case_count(self) -> int:
        return len(self.outcomes)

    @property
    def error_count(self) -> int:
        return sum(o.errors for o in self.outcomes)

    @property
    def duration_stats(self) -> DurationStats:
        return compute_stats([o.body_duration_ns for o in self.outcomes])

    @property
    def exit_code(self) -> int:
        if self.aborted:
            return EXIT_CRITICAL
        if self.fail_on_error and self.error_count > 0:
            return EXIT_FAILED
        return EXIT_OK


def _select(registry: CaseRegistry, names: list[str]) -> list[CaseDescriptor]:
    if not names:
        return list(registry)
    missing = [n for n in names if n not in registry]
    if missing:
        raise ValueError(f"Unknown test case(s): {', '.join(missing)}")
    return [d for d in registry if d.name in names]


def run_case(
    descriptor: CaseDescriptor,
    stream: TextIO | None = None,
    clock: Clock | None = None,
    logger: logging.Logger | None = None,
) -> TestCase:
    """Run one registered case inside its own scope and return it.

    Raises ResourceViolationError if the case unbalanced its resource counter;
    the case summary has been printed by then.
    """
    case = TestCase(
        name=descriptor.name,
        body=descriptor.body,
        location=descriptor.location,
        stream=stream,
        clock=clock,
        logger=logger,
    )
    with case:
        for func in descriptor.functions:
            case.test_function(func)
        case.run_tests()
    return case


def _outcome(case: TestCase) -> CaseOutcome:
    return CaseOutcome(
        name=case.name,
        state=case.state,
        errors=case.errors,
        body_duration_ns=case.body_duration_ns,
        elapsed_ns=case.elapsed_ns if case.elapsed_ns is not None else case.since_time(),
    )


def run_tests(
    registry: CaseRegistry | None = None,
    stream: TextIO | None = None,
    config: HarnessConfig | None = None,
    clock: Clock | None = None,
    logger: logging.Logger | None = None,
) -> RunResult:
    """Run every registered case in declaration order.

    Assertion failures never stop the run. A resource violation stops it
    immediately: later cases are not executed and the result is marked
    aborted.
    """
    registry = registry if registry is not None else default_registry()
    config = config or HarnessConfig()
    stream = stream if stream is not None else sys.stdout
    logger = logger or logging.getLogger("caseledger")

    descriptors = _select(registry, config.cases)
    result = RunResult(fail_on_error=config.fail_on_error)
    logger.debug(f"Running {len(descriptors)} case(s)")

    for descriptor in descriptors:
        try:
            case = run_case(descriptor, stream=stream, clock=clock, logger=logger)
        except ResourceViolationError as e:
            result.outcomes.append(_outcome(e.case))
            result.aborted = True
            remaining = len(descriptors) - len(result.outcomes)
            logger.error(f"{e}. Skipping {remaining} remaining case(s)")
            break

        result.outcomes.append(_outcome(case))
        logger.debug(f"Case '{case.name}' completed with {case.errors} error(s)")

    stats = result.duration_stats
    logger.debug(
        f"Ran {result.case_count} case(s), {result.error_count} error(s), "
        f"body durations (ns): {stats.to_dict()}"
    )
    return result
