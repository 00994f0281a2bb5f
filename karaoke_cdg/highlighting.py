"""Syntax highlighting of one line of timed lyrics."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from karaoke_cdg.lyricsvalidation import PLACEHOLDER_VALUE, EventValidator

_MODIFIERS_RE = re.compile(r"(@[<>\$])|(@%[TMB])|(@#[0-9a-f]{6})")
_TIME_RE = re.compile(r"(\d+):(\d+)\.(\d+)", re.ASCII)


class Highlight(enum.Enum):
    """Kinds of highlighted text."""

    VALID_TIMING = "valid_timing"
    VALID_SPECIAL = "valid_special"
    INVALID_TIMING = "invalid_timing"
    PLACEHOLDER = "placeholder"
    COMMENT = "comment"
    MODIFIER = "modifier"
    INVALID_MODIFIER = "invalid_modifier"


@dataclass(frozen=True)
class Span:
    """A run of ``length`` characters starting at ``start`` shown as ``kind``."""

    start: int
    length: int
    kind: Highlight


def _time_kind(time: str) -> Highlight:
    if time == PLACEHOLDER_VALUE:
        return Highlight.PLACEHOLDER
    match = _TIME_RE.fullmatch(time)
    if match is None or int(match.group(2)) >= 60:
        return Highlight.INVALID_TIMING
    return Highlight.VALID_TIMING


def highlight_line(line: str, event_validator: EventValidator | None = None) -> list[Span]:
    """Return the highlight spans of ``line`` in the order they are applied.

    A later span overrides an earlier one where they overlap.
    """
    if not line.strip():
        return []

    if line.strip().startswith("#"):
        return [Span(0, len(line), Highlight.COMMENT)]

    spans: list[Span] = []

    for match in _MODIFIERS_RE.finditer(line):
        length = match.end() - match.start()
        kind = Highlight.INVALID_MODIFIER if length == 1 else Highlight.MODIFIER
        spans.append(Span(match.start(), length, kind))

    time_tag_start = 0
    special_tag_start = 0
    in_time_tag = False
    in_special_tag = False
    errors_in_time_tag = False

    for col, ch in enumerate(line):
        if in_special_tag:
            if ch == "}":
                special = line[special_tag_start:col]
                if special:
                    message = event_validator(special) if event_validator else None
                    kind = Highlight.INVALID_TIMING if message else Highlight.VALID_SPECIAL
                    spans.append(Span(special_tag_start - 1, len(special) + 2, kind))
                else:
                    spans.append(Span(special_tag_start - 1, 2, Highlight.INVALID_TIMING))
                in_special_tag = False
        elif in_time_tag:
            if ch == "]":
                if not errors_in_time_tag:
                    time = line[time_tag_start:col]
                    spans.append(Span(time_tag_start - 1, len(time) + 2, _time_kind(time)))
                in_time_tag = False
                errors_in_time_tag = False
                continue
            # Dashes are accepted because --:-- is the placeholder.
            if not ch.isdecimal() and ch not in ":.-":
                spans.append(Span(col, 1, Highlight.INVALID_TIMING))
                errors_in_time_tag = True
        elif ch == "[":
            in_time_tag = True
            time_tag_start = col + 1
        elif ch == "{":
            in_special_tag = True
            special_tag_start = col + 1
        elif ch in "]}":
            spans.append(Span(col, 1, Highlight.INVALID_TIMING))

    return spans


__all__ = ["Highlight", "Span", "highlight_line"]