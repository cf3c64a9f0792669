"""Allocation-balance counter."""

from __future__ import annotations


class ResourceCounter:
    """Signed counter of acquire/release pairs.

    The counter itself never refuses a mutation; callers check
    ``is_negative`` around each one.
    """

    def __init__(self) -> None:
        self.balance = 0

    def acquire(self) -> int:
        self.balance += 1
        return self.balance

    def release(self) -> int:
        self.balance -= 1
        return self.balance

    @property
    def is_negative(self) -> bool:
        return self.balance < 0
