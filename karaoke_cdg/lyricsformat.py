"""Conversion between timed lyrics text and a structured lyrics model."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from karaoke_cdg.timing import mark_to_time, time_to_mark


@dataclass(frozen=True)
class Syllable:
    """A piece of lyric text that starts at ``timing`` milliseconds."""

    timing: int
    text: str


@dataclass(frozen=True)
class BackgroundEvent:
    """A ``{...}`` special tag attached to the time tag that precedes it."""

    timing: int
    text: str


Line = list[Syllable]
Block = list[Line]


@dataclass
class ParsedLyrics:
    """Lyrics split into blocks of lines of syllables, plus background events."""

    blocks: list[Block] = field(default_factory=list)
    events: list[BackgroundEvent] = field(default_factory=list)


class _Builder:
    def __init__(self) -> None:
        self.result = ParsedLyrics()
        self._block: Block = []
        self._line: Line = []

    def add(self, timing: int, text: str) -> None:
        self._line.append(Syllable(timing, text))

    def add_event(self, timing: int, text: str) -> None:
        self.result.events.append(BackgroundEvent(timing, text))

    def end_of_line(self) -> None:
        # Ending an empty line closes the current block.
        if self._line:
            self._block.append(self._line)
            self._line = []
        elif self._block:
            self.result.blocks.append(self._block)
            self._block = []

    def finish(self) -> ParsedLyrics:
        if self._line:
            self._block.append(self._line)
            self._line = []
        if self._block:
            self.result.blocks.append(self._block)
            self._block = []
        return self.result


def _mark(timing: str, line_number: int) -> int:
    try:
        return time_to_mark(timing)
    except ValueError:
        raise ValueError(f"line {line_number}: invalid time tag [{timing}]") from None


def parse_lyrics(text: str) -> ParsedLyrics:
    """Parse timed lyrics text into blocks, lines and syllables.

    Empty lines separate blocks and lines starting with ``#`` are comments.
    Raises ValueError on a time tag that is not in ``M:S.F`` form.
    """
    builder = _Builder()

    for line_number, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()
        if not stripped:
            builder.end_of_line()
            continue
        if stripped.startswith("#"):
            continue

        lyric_text: list[str] = []
        timing: list[str] = []
        special: list[str] = []
        in_time_tag = False
        in_special_tag = False
        added = 0

        for ch in line:
            if in_special_tag:
                if ch == "}":
                    in_special_tag = False
                else:
                    special.append(ch)
            elif in_time_tag:
                if ch == "]":
                    in_time_tag = False
                else:
                    timing.append(ch)
            elif ch == "{":
                in_special_tag = True
            elif ch == "[":
                if timing:
                    mark = _mark("".join(timing), line_number)
                    if special:
                        builder.add_event(mark, "".join(special))
                    # The first syllable of a line must not be empty.
                    if added > 0 or lyric_text:
                        builder.add(mark, "".join(lyric_text))
                        added += 1
                    lyric_text.clear()
                    special.clear()
                    timing.clear()
                in_time_tag = True
            else:
                lyric_text.append(ch)

        if timing:
            mark = _mark("".join(timing), line_number)
            if special:
                builder.add_event(mark, "".join(special))
            builder.add(mark, "".join(lyric_text))

        builder.end_of_line()

    return builder.finish()


def format_lyrics(blocks: ParsedLyrics | Iterable[Sequence[Sequence[Syllable]]]) -> str:
    """Render blocks of lines of syllables as timed lyrics text."""
    if isinstance(blocks, ParsedLyrics):
        blocks = blocks.blocks

    parts: list[str] = []
    for block in blocks:
        for line in block:
            parts.extend(f"[{mark_to_time(s.timing)}]{s.text}" for s in line)
            parts.append("\n")
        parts.append("\n")
    return "".join(parts).strip() + "\n"


def _to_long(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def import_from_old_string(text: str) -> str:
    """Convert the legacy ``<ms>text`` storage format into timed lyrics text."""
    result: list[str] = []
    saved: list[str] = []

    for ch in text:
        if ch == "<":
            result.append(_unescape("".join(saved)))
            saved.clear()
        elif ch == ">":
            value = "".join(saved).split("|")[0]
            result.append(f"[{mark_to_time(_to_long(value))}]")
            saved.clear()
        else:
            saved.append(ch)

    result.append(_unescape("".join(saved)))
    return "".join(result)


def _unescape(text: str) -> str:
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


__all__ = [
    "BackgroundEvent",
    "ParsedLyrics",
    "Syllable",
    "format_lyrics",
    "import_from_old_string",
    "parse_lyrics",
]