from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

from synclyrics.lrc.model import TimedLine, Timeline

MAX_WINDOW_LINES = 4
CONTEXT_BEFORE = 2


class LineStyle(str, Enum):
    HEADER = "header"
    CURRENT = "current"
    CONTEXT = "context"


@dataclass(frozen=True, slots=True)
class DisplayWindow:
    """
    Up to four consecutive timeline lines plus the positions (within the
    window) that get header or current styling.
    """

    lines: tuple[TimedLine, ...] = ()
    start_index: int = 0
    current_pos: int | None = None
    header_pos: int | None = None

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[TimedLine]:
        return iter(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def current(self) -> TimedLine | None:
        return self.lines[self.current_pos] if self.current_pos is not None else None

    def style_at(self, pos: int) -> LineStyle:
        if pos == self.header_pos:
            return LineStyle.HEADER
        if pos == self.current_pos:
            return LineStyle.CURRENT
        return LineStyle.CONTEXT


EMPTY_WINDOW = DisplayWindow()


def window_for(timeline: Timeline, timestamps: Sequence[int], current_time_ms: int) -> DisplayWindow:
    # first line not yet reached
    i = bisect_left(timestamps, current_time_ms)
    if i >= len(timestamps):
        return EMPTY_WINDOW

    start = max(0, i - CONTEXT_BEFORE)
    end = min(i + 1, len(timestamps) - 1)
    lines = timeline.lines[start : end + 1][:MAX_WINDOW_LINES]

    current_pos: int | None = 1 if i >= CONTEXT_BEFORE else 0
    header_pos: int | None = None
    if timeline.has_title and start == 0:
        header_pos = 0
        if current_pos == 0:
            current_pos = None

    return DisplayWindow(lines=lines, start_index=start, current_pos=current_pos, header_pos=header_pos)


def select_window(timeline: Timeline, current_time_ms: int) -> DisplayWindow:
    """
    Lines to show at `current_time_ms`: up to two lines before the first
    line not yet reached, that line, and the one after it.

    Past the last timestamp the window is empty. Pure; safe to call every tick.
    """
    return window_for(timeline, timeline.timestamps, current_time_ms)
