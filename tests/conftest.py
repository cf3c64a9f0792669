"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from caseledger.case import TestCase
from caseledger.clock import Clock
from caseledger.location import SourceLocation


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up caseledger loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("caseledger")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


class FakeClock(Clock):
    """Clock that advances by a fixed step on every reading."""

    def __init__(self, step: int = 100):
        self.now = 0
        self.step = step

    def wall_ns(self) -> int:
        self.now += self.step
        return self.now

    def perf_ns(self) -> int:
        self.now += self.step
        return self.now


DECLARED_AT = SourceLocation("test_math.py", "math", 1, 1)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_case(clock):
    """Build a TestCase writing into a StringIO, with a deterministic clock."""

    def _make(body=lambda t: None, name="math"):
        return TestCase(
            name=name,
            body=body,
            location=DECLARED_AT,
            stream=io.StringIO(),
            clock=clock,
        )

    return _make


@pytest.fixture
def case(make_case):
    return make_case()
