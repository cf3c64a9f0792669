"""Timing primitives used to measure case and sub-function durations."""

from __future__ import annotations

import time
from typing import Any, Callable


class Clock:
    """Wall-clock and high-resolution timer, both in nanoseconds."""

    def wall_ns(self) -> int:
        return time.time_ns()

    def perf_ns(self) -> int:
        return time.perf_counter_ns()

    def since(self, start_ns: int) -> int:
        """Wall time elapsed since ``start_ns``, never negative."""
        return max(self.wall_ns() - start_ns, 0)

    def measure(self, func: Callable[..., Any], *args: Any) -> int:
        """Call ``func(*args)`` and return how long it took."""
        started = self.perf_ns()
        func(*args)
        return max(self.perf_ns() - started, 0)
