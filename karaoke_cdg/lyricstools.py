"""Editing operations on timed lyrics text."""

from __future__ import annotations

import re
from dataclasses import dataclass

from karaoke_cdg.lyricsvalidation import PLACEHOLDER
from karaoke_cdg.timeadjust import TimeAdjustment
from karaoke_cdg.timing import mark_to_time, time_to_mark

_TAG_RE = re.compile(r"\[(\d+:\d+\.\d+)\]", re.ASCII)
_LAST_TAG_RE = re.compile(r".*\[(\d+:\d+\.\d+)\]", re.ASCII)
_END_TAG_RE = re.compile(r"\[(\d+:\d+\.\d+)\]\Z", re.ASCII)
_TAG_WITH_TEXT_RE = re.compile(r"\[(\d+:\d+\.\d+)\]([^\[]*)", re.ASCII)
_LINE_BREAKS = "\n\u2028\u2029"


@dataclass(frozen=True)
class CursorPolicy:
    """How the cursor moves after a time tag is inserted."""

    double_time_mark: bool = False
    skip_empty_lines: bool = True
    stop_at_line_end: bool = False
    stop_next_word: bool = False
    word_chars: int = 2


def _tdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def remove_all_time_tags(text: str) -> str:
    """Remove every time tag and placeholder from the text."""
    return _TAG_RE.sub("", text.replace(PLACEHOLDER, ""))


def remove_extra_whitespace(text: str) -> str:
    """Strip leading and trailing whitespace from every line."""
    return "\n".join(line.strip() for line in text.split("\n"))


def time_for_position(line: str, pos: int) -> int | None:
    """Interpolate the time at ``pos`` between the surrounding time tags.

    Returns None when there is no tag on either side or time does not advance.
    """
    left, right = line[:pos], line[pos:]

    match = _LAST_TAG_RE.search(left)
    if match is None:
        return None
    left_mark = time_to_mark(match.group(1))
    left = _TAG_RE.sub("", left[match.end():])

    match = _TAG_RE.search(right)
    if match is None:
        return None
    right_mark = time_to_mark(match.group(1))
    right = _TAG_RE.sub("", right[: match.start()])

    diff = right_mark - left_mark
    if diff <= 0:
        return None
    total = len(left) + len(right)
    if total == 0:
        return left_mark
    return left_mark + len(left) * diff // total


def split_line(line: str, pos: int) -> str:
    """Break the line at ``pos``, closing and reopening it with interpolated tags.

    The line is returned unchanged when no time can be interpolated there.
    """
    timing = time_for_position(line, pos)
    if timing is None:
        return line
    return (
        line[:pos]
        + f"[{mark_to_time(timing)}]\n[{mark_to_time(timing + 10)}]"
        + line[pos:]
    )


def add_missing_timing_marks(text: str) -> str:
    """Append an estimated closing time tag to every timed line lacking one."""
    lines = text.split("\n")

    for index, line in enumerate(lines):
        if not line.strip() or _END_TAG_RE.search(line):
            continue

        found = [(time_to_mark(m.group(1)), len(m.group(2))) for m in _TAG_WITH_TEXT_RE.finditer(line)]
        if not found:
            continue

        last_time, last_len = found[-1]
        new_time = last_time + last_len * 10

        if len(found) > 1:
            per_char = sorted(
                _tdiv(cur[0] - prev[0], prev[1])
                for prev, cur in zip(found, found[1:])
                if prev[1]
            )
            if per_char:
                new_time = last_time + last_len * per_char[len(per_char) // 2]

        # Do not run past the start of the next line.
        for following in lines[index + 1:]:
            if not following:
                continue
            match = _TAG_RE.match(following)
            if match:
                next_begin = time_to_mark(match.group(1))
                if next_begin < new_time:
                    new_time = next_begin - 1
            break

        lines[index] = line.strip() + f"[{mark_to_time(new_time)}]"

    return "\n".join(lines)


def adjust_timings(text: str, adjustment: TimeAdjustment) -> str:
    """Apply ``adjustment`` to every time tag in the text."""
    return _TAG_RE.sub(
        lambda m: f"[{mark_to_time(adjustment.apply(time_to_mark(m.group(1))))}]", text
    )


def following_tick_position(text: str, tick: int) -> int | None:
    """Position just after the last time tag not later than ``tick``.

    Returns 0 when the first tag is already later, None when no tag is later.
    """
    last_pos = 0
    for match in _TAG_RE.finditer(text):
        if tick < time_to_mark(match.group(1)):
            return last_pos
        last_pos = match.end()
    return None


def related_time_at(line: str, column: int) -> int | None:
    """Time of the tag the cursor at ``column`` belongs to, or None."""
    if not line:
        return None

    start = min(column, len(line) - 1)
    # Editing right before a tag relates to the previous tag.
    if line[start] == "[" and start > 0:
        start -= 1
    while start > 0 and line[start] not in "[]":
        start -= 1

    if line[start] == "[":
        end = line.find("]", start)
    else:
        end = start
        while start > 0 and line[start] != "[":
            start -= 1

    if end == -1 or start >= end:
        return None
    try:
        return time_to_mark(line[start + 1 : end])
    except ValueError:
        return None


def _timing_mark_length(text: str) -> int:
    if text.startswith(PLACEHOLDER):
        return len(PLACEHOLDER)
    match = _TAG_RE.match(text)
    return match.end() if match else 0


def insert_time_tag(
    text: str, pos: int, timing: int, policy: CursorPolicy | None = None
) -> tuple[str, int]:
    """Insert a time tag (a placeholder when ``timing`` is 0) at ``pos``.

    An existing tag at ``pos`` is replaced when ``timing`` is positive.
    Returns the new text and the position the cursor moves to.
    """
    if not 0 <= pos <= len(text):
        raise ValueError(f"position {pos} is outside the text")
    policy = policy or CursorPolicy()

    line_end = text.find("\n", pos)
    rest = text[pos:] if line_end == -1 else text[pos:line_end]

    placeholder_replaced = False
    if timing > 0:
        length = _timing_mark_length(rest)
        if length:
            placeholder_replaced = rest.startswith(PLACEHOLDER)
            text = text[:pos] + text[pos + length:]

    tag = PLACEHOLDER if timing == 0 else f"[{mark_to_time(timing)}]"
    text = text[:pos] + tag + text[pos:]
    cursor = pos + len(tag)

    if policy.double_time_mark and placeholder_replaced:
        return text, cursor

    cur = cursor
    separator_found = False
    tagged_word_ended = False
    word_start = -1

    while cur < len(text):
        ch = text[cur]
        line_end = text.find("\n", cur)
        rest = text[cur:] if line_end == -1 else text[cur:line_end]
        if _timing_mark_length(rest):
            break

        if separator_found:
            if policy.skip_empty_lines and ch in _LINE_BREAKS:
                cur += 1
                continue
            break

        if ch in _LINE_BREAKS:
            if cursor != cur and policy.stop_at_line_end:
                break
            separator_found = True

        if policy.stop_next_word:
            if ch.isspace():
                if word_start != -1:
                    if cur - word_start > policy.word_chars:
                        cur = word_start
                        break
                    word_start = -1
                else:
                    tagged_word_ended = True
            elif tagged_word_ended and word_start == -1:
                word_start = cur

        cur += 1

    return text, cur


__all__ = [
    "CursorPolicy",
    "add_missing_timing_marks",
    "adjust_timings",
    "following_tick_position",
    "insert_time_tag",
    "related_time_at",
    "remove_all_time_tags",
    "remove_extra_whitespace",
    "split_line",
    "time_for_position",
]