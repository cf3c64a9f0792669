"""Process-wide registry of declared test cases."""

from __future__ import annotations

import importlib.util
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from caseledger.case import CaseFunction
from caseledger.errors import DuplicateCaseError
from caseledger.location import SourceLocation, capture_location


@dataclass
class CaseDescriptor:
    """A registered case body plus where it was declared."""

    name: str
    body: CaseFunction
    location: SourceLocation
    functions: list[CaseFunction] = field(default_factory=list)

    def test_function(self, func: CaseFunction) -> CaseFunction:
        """Decorator: run ``func`` after the body of this case."""
        self.functions.append(func)
        return func


class CaseRegistry:
    """Append-only mapping of case name to descriptor, in declaration order."""

    def __init__(self) -> None:
        self._cases: dict[str, CaseDescriptor] = {}

    def register(
        self,
        name: str,
        body: CaseFunction,
        location: SourceLocation | None = None,
    ) -> CaseDescriptor:
        return self.adopt(
            CaseDescriptor(name=name, body=body, location=location or capture_location())
        )

    def adopt(self, descriptor: CaseDescriptor) -> CaseDescriptor:
        """Add an already built descriptor, keeping its sub-functions."""
        if descriptor.name in self._cases:
            raise DuplicateCaseError(descriptor.name)
        self._cases[descriptor.name] = descriptor
        return descriptor

    def get(self, name: str) -> CaseDescriptor:
        try:
            return self._cases[name]
        except KeyError:
            raise KeyError(f"No test case named '{name}'") from None

    def names(self) -> list[str]:
        return list(self._cases)

    def __contains__(self, name: object) -> bool:
        return name in self._cases

    def __iter__(self) -> Iterator[CaseDescriptor]:
        return iter(list(self._cases.values()))

    def __len__(self) -> int:
        return len(self._cases)


REGISTRY = CaseRegistry()


def default_registry() -> CaseRegistry:
    return REGISTRY


@contextmanager
def collecting(registry: CaseRegistry) -> Iterator[CaseRegistry]:
    """Move every case declared inside the block into ``registry``.

    ``REGISTRY`` stays the same object, so both @test_case and direct
    ``REGISTRY.register(...)`` calls are collected. Its earlier cases are
    restored when the block exits.
    """
    if registry is REGISTRY:
        yield registry
        return

    saved = REGISTRY._cases
    REGISTRY._cases = {}
    try:
        yield registry
    finally:
        collected = REGISTRY._cases
        REGISTRY._cases = saved
        for descriptor in collected.values():
            registry.adopt(descriptor)


def load_cases(path: Path) -> CaseRegistry:
    """Import a Python file and return the cases it declares.

    Cases the file declares go into a fresh registry, so loading the same
    file twice does not collide with earlier declarations.
    """
    path = Path(path).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Test file not found: {path}")

    module_name = f"caseledger_cases_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import test file: {path}")
    module = importlib.util.module_from_spec(spec)

    registry = CaseRegistry()
    sys.modules[module_name] = module
    try:
        with collecting(registry):
            spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
    return registry


def test_case(
    name: str | None = None, registry: CaseRegistry | None = None
) -> Callable[[CaseFunction], CaseDescriptor]:
    """Decorator registering a function as a named test case.

    The decorated name is bound to the returned CaseDescriptor, so
    sub-functions can be attached with ``@descriptor.test_function``::

        @test_case("math")
        def math(t):
            t.assert_eq(2 + 2, 4)

        @math.test_function
        def ordering(t):
            t.assert_lt(1, 2)
    """

    def decorator(func: CaseFunction) -> CaseDescriptor:
        target = registry if registry is not None else REGISTRY
        return target.register(name or func.__name__, func, capture_location())

    return decorator


test_case.__test__ = False  # type: ignore[attr-defined]
