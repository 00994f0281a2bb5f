# karaoke_cdg

A library for working with timed karaoke lyrics. Lyrics are plain text in
which `[mm:ss.cc]` tags mark when each piece of text is sung, `{...}` tags
carry special events, empty lines separate blocks and lines starting with
`#` are comments.

It has no third-party dependencies.

## Modules

- `karaoke_cdg.timing` – `mark_to_time` and `time_to_mark` convert between
  milliseconds and `MM:SS.CC` text.
- `karaoke_cdg.timeadjust` – `TimeAdjustment` (multiply, then add an offset)
  and `parse_time_adjustment` to build one from user text.
- `karaoke_cdg.encodings` – `supported_encodings`, `encoding_label` and
  `decode_sample` for the text encodings offered when importing lyrics.
- `karaoke_cdg.lyricsvalidation` – `validate_lyrics` returns a list of
  `ValidatorError` (line, column, message), governed by `LyricsRules`.
- `karaoke_cdg.highlighting` – `highlight_line` returns `Span`s tagged with a
  `Highlight` kind for one line of lyrics.
- `karaoke_cdg.lyricsformat` – `parse_lyrics` into `ParsedLyrics`
  (blocks of lines of `Syllable`s, plus `BackgroundEvent`s), `format_lyrics`
  back to text, and `import_from_old_string` for the legacy `<ms>text` format.
- `karaoke_cdg.lyricstools` – editing helpers: `remove_all_time_tags`,
  `remove_extra_whitespace`, `time_for_position`, `split_line`,
  `add_missing_timing_marks`, `adjust_timings`, `following_tick_position`,
  `related_time_at` and `insert_time_tag` (cursor movement set by
  `CursorPolicy`).
- `karaoke_cdg.versioncheck` – `parse_version_file`, `is_newer`,
  `NewVersionChecker` and `check_new_version` for a `Name: value` version
  file fetched over plain HTTP.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Convert between milliseconds and time text:

```python
from karaoke_cdg.timing import mark_to_time, time_to_mark

mark_to_time(83450)        # "01:23.45"
time_to_mark("01:23.45")   # 83450
```

Parse timed lyrics:

```python
from karaoke_cdg.lyricsformat import parse_lyrics

lyrics = parse_lyrics("[00:01.00]Hello [00:02.00]world[00:03.00]\n")
lyrics.blocks[0][0][0]     # Syllable(timing=1000, text='Hello ')
```

Validate lyrics and report problems:

```python
from karaoke_cdg.lyricsvalidation import LyricsRules, validate_lyrics

for err in validate_lyrics(text, LyricsRules(max_block_lines=6)):
    print(err.line, err.column, err.error)
```

`validate_lyrics` accepts an optional `event_validator` callable that is given
the text of each `{...}` tag and returns an error message, or an empty string
or `None` when the tag is valid. `highlight_line` takes the same callable.

Highlight a line:

```python
from karaoke_cdg.highlighting import highlight_line

highlight_line("[00:01.00]Hi")   # [Span(start=0, length=10, kind=Highlight.VALID_TIMING)]
```

Shift every timing by half a second:

```python
from karaoke_cdg.timeadjust import parse_time_adjustment
from karaoke_cdg.lyricstools import adjust_timings

shifted = adjust_timings(text, parse_time_adjustment("500", "1.0"))
```

Decode imported text:

```python
from karaoke_cdg.encodings import decode_sample

decode_sample(b"\xcf\xf0\xe8", "CP1251")   # "При"
```

Check whether a newer release is published:

```python
from karaoke_cdg.versioncheck import VersionCheckError, check_new_version

try:
    info = check_new_version("http://updates.example.com/latest.txt", "1.10")
except VersionCheckError as exc:
    print("check failed:", exc.code.name)
else:
    if info:
        print("New version:", info["Version"])
```

## What it does not do

Despite its name, the package does not encode or render CD+G graphics
streams, and it draws no lyrics onto images or video. It has no editor
window, no media playback and no command-line program: it works on lyrics
text and returns results to the calling code.