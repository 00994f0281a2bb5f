import re

import pytest

from karaoke_cdg.lyricstools import (
    CursorPolicy,
    add_missing_timing_marks,
    adjust_timings,
    following_tick_position,
    insert_time_tag,
    related_time_at,
    remove_all_time_tags,
    remove_extra_whitespace,
    split_line,
    time_for_position,
)
from karaoke_cdg.timeadjust import TimeAdjustment
from karaoke_cdg.timing import time_to_mark

TAG = re.compile(r"\[(\d+:\d+\.\d+)\]")


def test_remove_all_time_tags():
    assert remove_all_time_tags("[00:01.00]Hello [--:--]world[00:02.50]") == "Hello world"


def test_remove_extra_whitespace():
    assert remove_extra_whitespace("  a  \n b\t") == "a\nb"


def test_time_for_position_bounds():
    line = "[00:01.00]abcd[00:02.00]"
    assert time_for_position(line, 10) == time_to_mark("00:01.00")
    assert time_for_position(line, 14) == time_to_mark("00:02.00")
    middle = time_for_position(line, 12)
    assert time_to_mark("00:01.00") < middle < time_to_mark("00:02.00")


def test_time_for_position_without_tags():
    assert time_for_position("abcd[00:02.00]", 2) is None
    assert time_for_position("[00:02.00]abcd", 12) is None
    assert time_for_position("[00:02.00]ab[00:01.00]", 11) is None


def test_split_line_invariants():
    line = "[00:01.00]abcd[00:02.00]"
    result = split_line(line, 12)
    first, second = result.split("\n")
    assert first.startswith("[00:01.00]ab")
    assert second.endswith("cd[00:02.00]")
    closing = time_to_mark(TAG.findall(first)[-1])
    opening = time_to_mark(TAG.findall(second)[0])
    assert closing == time_for_position(line, 12)
    assert opening == closing + 10


def test_split_line_unchanged_without_timing():
    assert split_line("plain text", 3) == "plain text"


def test_add_missing_timing_marks_single_tag():
    result = add_missing_timing_marks("[00:01.00]abc")
    assert result.startswith("[00:01.00]abc[")
    assert time_to_mark(TAG.findall(result)[-1]) > time_to_mark("00:01.00")


def test_add_missing_keeps_closed_lines():
    text = "[00:01.00]abc[00:02.00]\n\n# note"
    assert add_missing_timing_marks(text) == text


def test_add_missing_does_not_cross_next_line():
    text = "[00:01.00]abcdefghij\n[00:01.05]x[00:02.00]"
    first, second = add_missing_timing_marks(text).split("\n")
    assert time_to_mark(TAG.findall(first)[-1]) < time_to_mark("00:01.05")
    assert second == "[00:01.05]x[00:02.00]"


def test_add_missing_uses_median_rate():
    result = add_missing_timing_marks("[00:01.00]ab[00:02.00]cd")
    new = time_to_mark(TAG.findall(result)[-1])
    assert new > time_to_mark("00:02.00")
    assert len(TAG.findall(result)) == 3


def test_adjust_timings():
    adj = TimeAdjustment(add=500)
    result = adjust_timings("[00:01.00]a[00:02.00]", adj)
    assert result == f"[{adj.preview('00:01.00')}]a[{adj.preview('00:02.00')}]"


def test_following_tick_position():
    text = "[00:01.00]ab[00:02.00]cd[00:03.00]"
    assert following_tick_position(text, 500) == 0
    assert following_tick_position(text, 1500) == text.index("ab")
    assert following_tick_position(text, 2500) == text.index("cd")
    assert following_tick_position(text, 5000) is None


def test_related_time_at():
    line = "[00:01.00]hello[00:02.00]"
    assert related_time_at(line, 12) == time_to_mark("00:01.00")
    assert related_time_at(line, 15) == time_to_mark("00:01.00")
    assert related_time_at(line, 17) == time_to_mark("00:02.00")
    assert related_time_at("", 0) is None
    assert related_time_at("no tags", 3) is None


def test_insert_tag_moves_to_next_line():
    text, pos = insert_time_tag("hello\nworld", 0, 1000)
    assert text == "[00:01.00]hello\nworld"
    assert pos == text.index("world")


def test_insert_tag_stop_at_line_end():
    text, pos = insert_time_tag("hello\nworld", 0, 1000, CursorPolicy(stop_at_line_end=True))
    assert pos == text.index("\n")


def test_insert_tag_stops_at_existing_tag():
    text, pos = insert_time_tag("a[00:02.00]b", 0, 1000)
    assert text == "[00:01.00]a[00:02.00]b"
    assert pos == text.index("[00:02.00]")


def test_insert_tag_replaces_existing_tag():
    text, _ = insert_time_tag("[00:01.00]a", 0, 2000)
    assert text == "[00:02.00]a"


def test_insert_placeholder_and_replace_with_double_mark():
    text, pos = insert_time_tag("a", 0, 0)
    assert text == "[--:--]a"
    text, pos = insert_time_tag(text, 0, 1500, CursorPolicy(double_time_mark=True))
    assert text == "[00:01.50]a"
    assert pos == text.index("a")


def test_insert_tag_stop_next_word():
    policy = CursorPolicy(stop_next_word=True, word_chars=2)
    text, pos = insert_time_tag("one two three", 0, 1000, policy)
    assert pos == text.index("two")


def test_insert_tag_invalid_position():
    with pytest.raises(ValueError):
        insert_time_tag("abc", 10, 1000)