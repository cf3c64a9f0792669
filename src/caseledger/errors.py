from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caseledger.case import TestCase


class CaseledgerError(Exception):
    """Base class for harness errors."""


class DuplicateCaseError(CaseledgerError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Test case '{name}' is already registered")
        self.name = name


class ResourceViolationError(CaseledgerError):
    """Raised when a case releases more resources than it acquired.

    This is the only unrecoverable outcome: the summary has already been
    printed by the time it is raised, and no further cases run.
    """

    def __init__(self, case: TestCase) -> None:
        super().__init__(
            f"Resource counter of case '{case.name}' dropped below zero "
            f"({case.resources.balance})"
        )
        self.case = case
