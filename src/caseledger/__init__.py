"""Minimal unit-testing harness: named cases, ordering assertions, timing and
an allocation-balance guard."""

from caseledger.assertions import ComparisonKind, LogEntry, ResultKind
from caseledger.case import CaseState, TestCase
from caseledger.errors import CaseledgerError, DuplicateCaseError, ResourceViolationError
from caseledger.location import SourceLocation
from caseledger.registry import REGISTRY, CaseDescriptor, CaseRegistry, test_case
from caseledger.runner import EXIT_CRITICAL, EXIT_FAILED, EXIT_OK, RunResult, run_tests

__all__ = [
    "CaseDescriptor",
    "CaseRegistry",
    "CaseState",
    "CaseledgerError",
    "ComparisonKind",
    "DuplicateCaseError",
    "EXIT_CRITICAL",
    "EXIT_FAILED",
    "EXIT_OK",
    "LogEntry",
    "REGISTRY",
    "ResourceViolationError",
    "ResultKind",
    "RunResult",
    "SourceLocation",
    "TestCase",
    "run_tests",
    "test_case",
]
