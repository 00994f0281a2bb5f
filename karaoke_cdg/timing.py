"""Conversion between millisecond marks and mm:ss.cc time text."""

from __future__ import annotations

import re

_TIME_RE = re.compile(r"(\d+):(\d+)\.(\d+)", re.ASCII)


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def mark_to_time(mark: int | float) -> str:
    """Format a time in milliseconds as ``MM:SS.CC`` (hundredths truncated)."""
    mark = int(mark)
    minutes = _tdiv(mark, 60000)
    seconds = _tdiv(mark - minutes * 60000, 1000)
    msec = mark - (minutes * 60000 + seconds * 1000)
    return f"{minutes:02d}:{seconds:02d}.{_tdiv(msec, 10):02d}"


def time_to_mark(text: str) -> int:
    """Parse ``M:S.F`` into milliseconds; the fraction counts tens of milliseconds.

    Raises ValueError if the text is not in that form.
    """
    match = _TIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid time value: {text!r}")
    minutes, seconds, fraction = (int(g) for g in match.groups())
    return minutes * 60000 + seconds * 1000 + fraction * 10