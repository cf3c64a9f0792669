"""Call-site capture for case declarations and assertions."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import ClassVar

_PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class SourceLocation:
    """Where something happened in user code.

    Attributes:
        file_name: Path of the source file, as reported by the interpreter.
        function_name: Name of the enclosing function ("<module>" at top level).
        line: 1-based line number, 0 when unknown.
        column: 1-based column number, 0 when the interpreter has no
            position information.
    """

    file_name: str
    function_name: str
    line: int
    column: int

    UNKNOWN: ClassVar[SourceLocation]

    @classmethod
    def from_frame(cls, frame: FrameType) -> SourceLocation:
        info = inspect.getframeinfo(frame, context=0)
        positions = getattr(info, "positions", None)
        column = 0
        if positions is not None and positions.col_offset is not None:
            column = positions.col_offset + 1
        return cls(
            file_name=info.filename,
            function_name=info.function,
            line=info.lineno or 0,
            column=column,
        )


SourceLocation.UNKNOWN = SourceLocation("unknown", "unknown", 0, 0)


def _is_internal(frame: FrameType) -> bool:
    try:
        return Path(frame.f_code.co_filename).resolve().parent.is_relative_to(
            _PACKAGE_DIR
        )
    except (OSError, ValueError):
        return False


def capture_location() -> SourceLocation:
    """Return the location of the nearest caller outside this package."""
    frame = inspect.currentframe()
    try:
        while frame is not None and _is_internal(frame):
            frame = frame.f_back
        if frame is None:
            return SourceLocation.UNKNOWN
        return SourceLocation.from_frame(frame)
    finally:
        # drop the frame reference
        del frame
