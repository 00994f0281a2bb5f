"""Validation of timed lyrics text ([mm:ss.cc] tags, {special} tags, blocks)."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from karaoke_cdg.timing import mark_to_time, time_to_mark

PLACEHOLDER = "[--:--]"
PLACEHOLDER_VALUE = "--:--"

EventValidator = Callable[[str], Optional[str]]

_TIME_RE = re.compile(r"(\d+):(\d+)\.(\d+)", re.ASCII)

MSG_EMPTY_LINE_NO_BLOCKS = (
    "Empty line found.\n"
    "An empty line represents a block boundary, but blocks "
    "are currently disabled in settings"
)
MSG_DOUBLE_EMPTY_LINE = (
    "Double empty line found.\n"
    "A single empty line represents a block boundary; "
    "double lines are not supported."
)
MSG_BLOCK_SIZE = (
    "Block size exceeded. The block contains more than {} lines.\n"
    "Most karaoke players cannot show too large blocks because of "
    "limited screen space.\n\nPlease split the block by adding a "
    "block separator (an empty line).\n"
)
MSG_MISSING_OPENING = (
    "Missing opening time tag. Every line must start with a [mm:ss.ms] time tag"
)
MSG_MISSING_CLOSING = (
    "Missing closing time tag. For this lyrics type every line must end "
    "with a [mm:ss.ms] time tag"
)
MSG_INVALID_SPECIAL = "Invalid special tag. {}"
MSG_PLACEHOLDER = "Placeholders should not be present in the production file."
MSG_SECONDS = "Invalid time, number of seconds cannot exceed 59."
MSG_BACKWARD = (
    "Time goes backward, previous time value {} is greater than current value {}."
)
MSG_INVALID_TIME_TAG = (
    "Invalid time tag. Time tag must be in format [mm:ss.ms] where mm is minutes, "
    "ss is seconds and ms is milliseconds * 10"
)
MSG_INVALID_TIME_CHAR = (
    "Invalid character in the time tag. Time tag must be in format [mm:ss.ms] "
    "where mm is minutes, ss is seconds and ms is milliseconds * 10"
)
MSG_STRAY_TIME_CLOSE = "Invalid closing bracket usage outside the time block"
MSG_STRAY_SPECIAL_CLOSE = "Invalid closing bracket usage outside the special block"
MSG_UNCLOSED_TIME_TAG = "Time tag is not closed properly"


@dataclass(frozen=True)
class ValidatorError:
    """One problem found in the lyrics; ``line`` is 1-based, ``column`` 0-based."""

    line: int
    column: int
    error: str


@dataclass(frozen=True)
class LyricsRules:
    """Settings that affect validation.

    ``require_closing_tag`` is true for every lyric type except plain LRC v1.
    """

    support_blocks: bool = True
    max_block_lines: int = 8
    require_closing_tag: bool = True


def _check_time(
    time: str, line_number: int, column: int, last_time: int, errors: list[ValidatorError]
) -> int:
    """Validate the contents of one time tag; return the new last time."""
    if time == PLACEHOLDER_VALUE:
        errors.append(ValidatorError(line_number, column, MSG_PLACEHOLDER))
        return last_time

    match = _TIME_RE.fullmatch(time)
    if match is None:
        errors.append(ValidatorError(line_number, column, MSG_INVALID_TIME_TAG))
        return last_time

    if int(match.group(2)) >= 60:
        errors.append(ValidatorError(line_number, column, MSG_SECONDS))

    timing = time_to_mark(time)
    if timing < last_time:
        errors.append(
            ValidatorError(
                line_number,
                column,
                MSG_BACKWARD.format(mark_to_time(last_time), mark_to_time(timing)),
            )
        )
    return timing


def validate_lyrics(
    text: str,
    rules: LyricsRules | None = None,
    event_validator: EventValidator | None = None,
) -> list[ValidatorError]:
    """Return every problem found in ``text``, in order of appearance.

    ``event_validator`` receives the text of each non-empty ``{...}`` tag and
    returns an error message, or an empty string / None when it is valid.
    """
    rules = rules or LyricsRules()
    errors: list[ValidatorError] = []
    lines_in_block = 0
    last_time = 0
    paragraph_text = ""

    for line_number, line in enumerate(text.split("\n"), start=1):
        # An empty line separates blocks.
        if not line.strip():
            if not rules.support_blocks:
                errors.append(ValidatorError(line_number, 0, MSG_EMPTY_LINE_NO_BLOCKS))
            elif not paragraph_text:
                errors.append(ValidatorError(line_number, 0, MSG_DOUBLE_EMPTY_LINE))
            lines_in_block = 0
            paragraph_text = ""
            continue

        lines_in_block += 1
        if rules.support_blocks and lines_in_block > rules.max_block_lines:
            errors.append(
                ValidatorError(line_number, 0, MSG_BLOCK_SIZE.format(rules.max_block_lines))
            )

        if line[0] != "[":
            errors.append(ValidatorError(line_number, 0, MSG_MISSING_OPENING))

        if rules.require_closing_tag and not line.strip().endswith("]"):
            errors.append(ValidatorError(line_number, 0, MSG_MISSING_CLOSING))

        time_tag_start = 0
        in_time_tag = False
        special_tag_start = 0
        in_special_tag = False
        line_text = []

        for col, ch in enumerate(line):
            if in_special_tag:
                if ch == "}":
                    special = line[special_tag_start:col]
                    if special and event_validator is not None:
                        message = event_validator(special)
                        if message:
                            # The column reported is that of the last time tag.
                            errors.append(
                                ValidatorError(
                                    line_number,
                                    time_tag_start,
                                    MSG_INVALID_SPECIAL.format(message),
                                )
                            )
                    in_special_tag = False
            elif in_time_tag:
                if ch == "]":
                    last_time = _check_time(
                        line[time_tag_start:col],
                        line_number,
                        time_tag_start,
                        last_time,
                        errors,
                    )
                    in_time_tag = False
                    continue
                if not ch.isdecimal() and ch not in ":.":
                    errors.append(ValidatorError(line_number, col, MSG_INVALID_TIME_CHAR))
                    in_time_tag = False
                    break
            elif ch == "[":
                in_time_tag = True
                time_tag_start = col + 1
            elif ch == "{":
                in_special_tag = True
                special_tag_start = col + 1
            elif ch == "]":
                errors.append(ValidatorError(line_number, col, MSG_STRAY_TIME_CLOSE))
            elif ch == "}":
                errors.append(ValidatorError(line_number, col, MSG_STRAY_SPECIAL_CLOSE))
            else:
                line_text.append(ch)

        paragraph_text += "".join(line_text) + "\n"

        if in_time_tag:
            errors.append(ValidatorError(line_number, len(line) - 1, MSG_UNCLOSED_TIME_TAG))

    return errors


__all__ = [
    "LyricsRules",
    "PLACEHOLDER",
    "PLACEHOLDER_VALUE",
    "ValidatorError",
    "validate_lyrics",
]