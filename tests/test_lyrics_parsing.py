from __future__ import annotations

import pytest

from synclyrics.lrc.model import TimedLine, TitleMode
from synclyrics.lrc.parse import parse_timeline, parse_timeline_with_stats


def _real(text: str) -> list[tuple[int, str]]:
    tl = parse_timeline("Song", None, text, title_mode=TitleMode.SEPARATE)
    return [(ln.timestamp_ms, ln.text) for ln in tl.lines]


def test_parse_multiple_timestamps():
    tl = parse_timeline("Song", None, "[00:05.00][00:15.00]Chorus", title_mode=TitleMode.SEPARATE)
    assert [e.timestamp_ms for e in tl.lines] == [5000, 15000]
    assert [e.text for e in tl.lines] == ["Chorus", "Chorus"]


def test_parse_offset_subtracted():
    tl = parse_timeline("Song", None, "[offset:+500]\n[00:10.00]Hello", title_mode=TitleMode.SEPARATE)
    assert tl.offset_ms == 500
    assert tl.lines == (TimedLine(9500, "Hello"),)


def test_negative_offset_not_clamped():
    assert _real("[offset:-1500]\n[00:01.00]x\n") == [(2500, "x")]
    assert _real("[offset:2000]\n[00:01.00]x\n") == [(-1000, "x")]


def test_offset_last_wins_and_applies_to_earlier_lines():
    assert _real("[00:05.00]x\n[offset:100]\n[offset:-200]\n") == [(5200, "x")]


def test_offset_whitespace_and_case():
    assert _real("[ OFFSET : -250 ]\n[00:01.00]x") == [(1250, "x")]


def test_title_entry_leads_first_line():
    tl = parse_timeline("Song", None, "[00:00.50]First")
    assert tl.has_title
    assert tl.lines[0] == TimedLine(-500, "Song")
    assert tl.lines[1] == TimedLine(500, "First")


def test_title_entry_keeps_sentinel_when_lyrics_start_later():
    tl = parse_timeline("Song", "Artist", "[00:05.00]First")
    assert tl.lines[0] == TimedLine(-1, "Song")


def test_title_entry_precedes_negative_timestamps():
    tl = parse_timeline("Song", None, "[offset:2000]\n[00:01.00]x")
    assert [ln.timestamp_ms for ln in tl.lines] == [-2000, -1000]


def test_untimed_lines_dropped():
    assert _real("plain text\n[00:01.00]a\nmore plain\n") == [(1000, "a")]


def test_stable_sort_keeps_extraction_order_on_ties():
    assert _real("[00:02.00]b\n[00:01.00]a\n[00:02.00]c\n") == [(1000, "a"), (2000, "b"), (2000, "c")]


def test_sorted_with_fan_out():
    tl = parse_timeline("Song", None, "[00:30.00][00:10.00]x\n[00:20.00]y\n[00:05.00]z\n")
    ts = [ln.timestamp_ms for ln in tl.real_lines]
    assert ts == sorted(ts)
    assert tl.lines[0].timestamp_ms < ts[0]


def test_parse_is_idempotent():
    text = "[00:03.00]c\n[00:01.00][00:04.00]a\n[00:02.00]b\n"
    assert parse_timeline("Song", None, text) == parse_timeline("Song", None, text)


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("[00:01]", 1000),
        ("[00:01.5]", 1500),
        ("[00:01.13]", 1130),
        ("[00:01.999]", 1999),
        ("[00:01.9999]", 1999),
        ("[01:02.50]", 62500),
        ("[ 01 : 02.5 ]", 62500),
        ("[75:00.00]", 4_500_000),
    ],
)
def test_timestamp_conversion_truncates(tag, expected):
    assert _real(f"{tag}x") == [(expected, "x")]


def test_text_trimmed_and_crlf():
    assert _real("  [00:01.00]  hi there \r\n[00:02.00]\tnext\r\n") == [(1000, "hi there"), (2000, "next")]


def test_empty_text_kept_for_instrumental_gap():
    assert _real("[00:03.00]\n") == [(3000, "")]


def test_malformed_timestamp_skipped():
    tl, stats = parse_timeline_with_stats("Song", None, "[00:01.2.3]bad\n[00:02.00]ok\n", title_mode=TitleMode.SEPARATE)
    assert [(ln.timestamp_ms, ln.text) for ln in tl.lines] == [(2000, "ok")]
    assert stats.tags_malformed == 1


def test_malformed_tag_does_not_affect_siblings():
    assert _real("[00:01.00][00:1.2.3]x\n") == [(1000, "x")]


def test_malformed_offset_ignored():
    tl, stats = parse_timeline_with_stats("Song", None, "[offset:abc]\n[00:01.00]x\n", title_mode=TitleMode.SEPARATE)
    assert tl.offset_ms == 0
    assert tl.lines == (TimedLine(1000, "x"),)
    assert stats.tags_malformed == 1


def test_empty_input():
    tl = parse_timeline("Song", None, "")
    assert tl.lines == (TimedLine(-1, "Song"),)
    assert not tl.is_synced

    tl = parse_timeline("Song", None, "", title_mode=TitleMode.SEPARATE)
    assert tl.lines == ()
    assert tl.title_line is None


def test_id_tags_recorded_not_timed():
    tl = parse_timeline("Song", None, "[ar:Someone]\n[ti:Song]\n[00:01.00]x\n", title_mode=TitleMode.SEPARATE)
    assert tl.tags == {"ar": "Someone", "ti": "Song"}
    assert tl.lines == (TimedLine(1000, "x"),)


def test_title_mode_accepts_string():
    tl = parse_timeline("Song", None, "[00:01.00]x", title_mode="separate")
    assert not tl.has_title


def test_parse_stats():
    _tl, stats = parse_timeline_with_stats("Song", None, "[ar:x]\n\n[00:01.00][00:02.00]a\nplain\n")
    assert stats.lines_total == 4
    assert stats.lines_with_timestamps == 1
    assert stats.lines_ignored == 3
    assert stats.events_total == 2
    assert stats.tags_malformed == 0


@pytest.mark.parametrize("sep", ["\x0c", "\x0b", "\x85", "\u2028", "\u2029"])
def test_only_newline_splits_lines(sep):
    assert _real(f"[00:01.00]a{sep}b\n[00:02.00]c") == [(1000, f"a{sep}b"), (2000, "c")]


def test_trailing_newline_not_counted_as_line():
    _tl, stats = parse_timeline_with_stats("Song", None, "[00:01.00]a\n")
    assert stats.lines_total == 1
    assert stats.lines_ignored == 0


def test_malformed_tag_after_text_kept_as_text():
    tl, stats = parse_timeline_with_stats("Song", None, "[00:05.00]Hello [1:2.3.4]", title_mode=TitleMode.SEPARATE)
    assert tl.lines == (TimedLine(5000, "Hello [1:2.3.4]"),)
    assert stats.tags_malformed == 1


def test_malformed_tags_before_text_removed():
    assert _real("[00:01.00][00:1.2.3] [02:..]x [00:9.9.9]y\n") == [(1000, "x [00:9.9.9]y")]


def test_timeline_hashable():
    text = "[ar:Someone]\n[00:01.00]a\n"
    assert hash(parse_timeline("Song", None, text)) == hash(parse_timeline("Song", None, text))
