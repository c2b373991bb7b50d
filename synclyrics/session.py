from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading

from synclyrics.lrc.model import Timeline, TitleMode
from synclyrics.lrc.parse import parse_timeline
from synclyrics.status import EmptyStatus, ErrorStatus, LyricsSource, LyricsStatus, status_for
from synclyrics.sync.tracker import WindowTracker
from synclyrics.sync.window import DisplayWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    title: str = ""
    artist: str | None = None
    lyrics: str = ""
    timeline: Timeline = field(default_factory=Timeline)
    status: LyricsStatus = field(default_factory=EmptyStatus)


class LyricsSession:
    """
    Lyrics state owned by one display driver.

    Everything derived from a lyric-available event is published as one
    immutable snapshot, so `tick` never sees a half-built timeline even when
    parsing runs on another thread.
    """

    def __init__(self, *, title_mode: TitleMode = TitleMode.INJECT, sync_enabled: bool = True):
        self.title_mode = TitleMode(title_mode)
        self.sync_enabled = sync_enabled
        self._lock = threading.Lock()
        self._snapshot = SessionSnapshot()
        self._tracker = WindowTracker.from_timeline(self._snapshot.timeline)

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def timeline(self) -> Timeline:
        return self._snapshot.timeline

    @property
    def status(self) -> LyricsStatus:
        return self._snapshot.status

    @property
    def title(self) -> str:
        return self._snapshot.title

    @property
    def artist(self) -> str | None:
        return self._snapshot.artist

    @property
    def lyrics(self) -> str:
        return self._snapshot.lyrics

    def _publish(self, snap: SessionSnapshot) -> None:
        tracker = WindowTracker.from_timeline(snap.timeline)
        with self._lock:
            self._snapshot = snap
            self._tracker = tracker

    def on_lyrics_available(
        self,
        title: str,
        artist: str | None,
        lyrics: str,
        *,
        source: LyricsSource | str = LyricsSource.REMOTE,
        edit_uri: str | None = None,
        provider: str | None = None,
    ) -> Timeline:
        timeline = parse_timeline(title, artist, lyrics, title_mode=self.title_mode)
        status = status_for(lyrics, source, edit_uri=edit_uri, provider=provider)
        logger.debug(
            "Lyrics for %r: %d timed lines, offset=%d, status=%s",
            title,
            len(timeline.real_lines),
            timeline.offset_ms,
            type(status).__name__,
        )
        self._publish(SessionSnapshot(title=title, artist=artist, lyrics=lyrics, timeline=timeline, status=status))
        return timeline

    def on_lyrics_error(self, title: str, artist: str | None, message: str) -> None:
        logger.info("Lyrics unavailable for %r: %s", title, message)
        timeline = parse_timeline(title, artist, "", title_mode=self.title_mode)
        self._publish(SessionSnapshot(title=title, artist=artist, timeline=timeline, status=ErrorStatus(message=message)))

    def clear(self) -> None:
        self._publish(SessionSnapshot())

    def tick(self, position_ms: int) -> DisplayWindow | None:
        """
        Window for the current position, or None when sync is disabled
        (the renderer shows `full_text()` instead).
        """
        if not self.sync_enabled:
            return None
        with self._lock:
            tracker = self._tracker
        return tracker.window_at(position_ms)

    def changed(self, position_ms: int) -> DisplayWindow | None:
        """Like `tick`, but None unless the window differs from the last call."""
        if not self.sync_enabled:
            return None
        with self._lock:
            tracker = self._tracker
        return tracker.changed_window(position_ms)

    def full_text(self) -> list[str]:
        snap = self._snapshot
        out = [snap.title]
        if snap.artist:
            out.append(snap.artist)
        out.append("")
        out.extend(ln.rstrip() for ln in snap.lyrics.splitlines())
        return out
