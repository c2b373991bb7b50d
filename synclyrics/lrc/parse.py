from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import regex

from synclyrics.errors import MalformedTagError

from .model import TITLE_LEAD_MS, TITLE_SENTINEL_MS, TimedLine, Timeline, TitleMode

logger = logging.getLogger(__name__)

# Anything shaped like [mm:ss...]; the seconds field is validated separately
# so "[01:2.3.4]" is reported as malformed instead of being kept as text.
_TS_RE = regex.compile(r"\[\s*(\d+)\s*:\s*([\d.]+)\s*\]")
_SECONDS_RE = regex.compile(r"\d+(?:\.\d+)?")
_OFFSET_RE = regex.compile(r"\[\s*offset\s*:\s*([^\]]*?)\s*\]", regex.IGNORECASE)
_OFFSET_VALUE_RE = regex.compile(r"[+-]?\d+")
_TAG_RE = regex.compile(r"^\[([a-zA-Z]{1,8}):(.*)\]$")

_STRIP = " \t\r"


@dataclass(frozen=True, slots=True)
class ParseStats:
    lines_total: int
    lines_with_timestamps: int
    lines_ignored: int
    events_total: int
    tags_malformed: int


def _parse_ts_to_ms(minutes: str, seconds: str) -> int:
    """
    (minutes*60 + seconds) * 1000, truncated toward zero.

    Computed with Decimal so "[00:01.13]" is 1130 and not 1129.
    """
    if not _SECONDS_RE.fullmatch(seconds):
        raise MalformedTagError(f"Invalid seconds: {seconds!r}")
    try:
        total = (Decimal(minutes) * 60 + Decimal(seconds)) * 1000
    except InvalidOperation as e:
        raise MalformedTagError(f"Invalid timestamp: {minutes}:{seconds}") from e
    return int(total)


def _parse_offset(value: str) -> int:
    if not _OFFSET_VALUE_RE.fullmatch(value):
        raise MalformedTagError(f"Invalid offset: {value!r}")
    return int(value)


def _strip_leading_tags(text: str) -> str:
    # Called after the last valid tag, so any tag left in front is malformed.
    text = text.lstrip(" \t")
    m = _TS_RE.match(text)
    while m:
        text = text[m.end() :].lstrip(" \t")
        m = _TS_RE.match(text)
    return text


def parse_timeline_with_stats(
    title: str,
    artist: str | None,
    raw_text: str,
    *,
    title_mode: TitleMode = TitleMode.INJECT,
) -> tuple[Timeline, ParseStats]:
    """
    Supported:
    - [mm:ss], [mm:ss.x...] with optional whitespace inside the brackets
    - multiple timestamps per line, sharing the text after the last one
    - [offset:+/-ms], last one wins; positive values make lines appear sooner
    - ID tags: [ar:], [ti:], [al:], ... (recorded, never timed)

    Lines without a timestamp are dropped. Malformed tags are skipped.

    `artist` belongs to the header contract only and is not part of the
    timeline.
    """
    offset_ms = 0
    tags: dict[str, str] = {}
    events: list[TimedLine] = []

    total = 0
    lines_with_ts = 0
    ignored = 0
    malformed = 0

    # Only "\n" separates lines; form feeds, U+2028 etc. stay in the text.
    raw_lines = raw_text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()

    for raw in raw_lines:
        total += 1
        line = raw.strip(_STRIP)
        if not line:
            ignored += 1
            continue

        off = _OFFSET_RE.search(line)
        if off:
            try:
                offset_ms = _parse_offset(off.group(1))
            except MalformedTagError as e:
                malformed += 1
                logger.debug("Skipping offset directive %r: %s", line, e)
            continue

        ts = list(_TS_RE.finditer(line))
        if not ts:
            tag = _TAG_RE.match(line)
            if tag:
                k = tag.group(1).strip().lower()
                v = tag.group(2).strip()
                if k and v:
                    tags[k] = v
            ignored += 1
            continue

        stamps: list[int] = []
        last_end = 0
        for m in ts:
            try:
                stamps.append(_parse_ts_to_ms(m.group(1), m.group(2)))
            except MalformedTagError as e:
                malformed += 1
                logger.debug("Skipping tag %r: %s", m.group(0), e)
            else:
                last_end = m.end()

        if not stamps:
            ignored += 1
            continue

        lines_with_ts += 1
        payload = _strip_leading_tags(line[last_end:])
        for t_ms in stamps:
            events.append(TimedLine(timestamp_ms=t_ms, text=payload))

    # The final offset applies to every line, including those before the directive.
    if offset_ms:
        events = [TimedLine(timestamp_ms=e.timestamp_ms - offset_ms, text=e.text) for e in events]

    # list.sort is stable: equal timestamps keep extraction order
    events.sort(key=lambda e: e.timestamp_ms)

    has_title = TitleMode(title_mode) is TitleMode.INJECT
    if has_title:
        # The title leads the first real line by at least one second.
        title_ms = TITLE_SENTINEL_MS
        if events and events[0].timestamp_ms - title_ms < TITLE_LEAD_MS:
            title_ms = events[0].timestamp_ms - TITLE_LEAD_MS
        events.insert(0, TimedLine(timestamp_ms=title_ms, text=title))

    timeline = Timeline(lines=tuple(events), has_title=has_title, offset_ms=offset_ms, tags=tags)
    stats = ParseStats(
        lines_total=total,
        lines_with_timestamps=lines_with_ts,
        lines_ignored=ignored,
        events_total=len(timeline.real_lines),
        tags_malformed=malformed,
    )
    return timeline, stats


def parse_timeline(
    title: str,
    artist: str | None,
    raw_text: str,
    *,
    title_mode: TitleMode = TitleMode.INJECT,
) -> Timeline:
    timeline, _stats = parse_timeline_with_stats(title, artist, raw_text, title_mode=title_mode)
    return timeline
