"""Linear adjustment of lyric timings: multiply, then add an offset."""

from __future__ import annotations

import re
from dataclasses import dataclass

from karaoke_cdg.timing import mark_to_time, time_to_mark

_INT_RE = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*", re.ASCII
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class TimeAdjustment:
    """Timing transform: ``int(mark * multiply) + add``."""

    add: int = 0
    multiply: float = 1.0

    def apply(self, mark: int) -> int:
        """Return the adjusted mark in milliseconds."""
        return int(mark * self.multiply) + self.add

    def preview(self, time_text: str) -> str:
        """Adjust a ``M:S.F`` time text and return the formatted result."""
        return mark_to_time(self.apply(time_to_mark(time_text)))


def parse_time_adjustment(add_text: str, multiply_text: str) -> TimeAdjustment:
    """Build an adjustment from user text; raises ValueError on invalid input."""
    if not _INT_RE.fullmatch(add_text):
        raise ValueError("Specified Add value is not valid")
    add = int(add_text)
    if not _INT64_MIN <= add <= _INT64_MAX:
        raise ValueError("Specified Add value is not valid")

    if not _FLOAT_RE.fullmatch(multiply_text):
        raise ValueError("Specified Multiply value is not valid")
    return TimeAdjustment(add=add, multiply=float(multiply_text))