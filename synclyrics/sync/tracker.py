from __future__ import annotations

from dataclasses import dataclass

from synclyrics.lrc.model import Timeline

from .window import DisplayWindow, window_for


@dataclass(slots=True)
class WindowTracker:
    """
    Per-timeline lookup: timestamps extracted once, O(log n) via bisect,
    and a "changed" query so the driver redraws only on change.
    """

    timeline: Timeline
    t_ms: list[int]
    last_key: tuple[int, int, int | None] | None = None

    @classmethod
    def from_timeline(cls, timeline: Timeline) -> "WindowTracker":
        return cls(timeline=timeline, t_ms=timeline.timestamps)

    def window_at(self, now_ms: int) -> DisplayWindow:
        return window_for(self.timeline, self.t_ms, now_ms)

    def changed_window(self, now_ms: int) -> DisplayWindow | None:
        w = self.window_at(now_ms)
        key = (w.start_index, len(w), w.current_pos)
        if key != self.last_key:
            self.last_key = key
            return w
        return None

    def reset(self) -> None:
        self.last_key = None
