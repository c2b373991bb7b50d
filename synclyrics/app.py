from __future__ import annotations

import logging
import signal
import time
from typing import Callable

from synclyrics.config import AppConfig
from synclyrics.render.ansi import AnsiRenderer
from synclyrics.session import LyricsSession
from synclyrics.status import LyricsSource

logger = logging.getLogger(__name__)

PositionFn = Callable[[], int]


class PlaybackClock:
    """Stand-in for a player's position query: milliseconds since start()."""

    def __init__(self, start_ms: int = 0, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._origin = clock() - start_ms / 1000.0

    def position_ms(self) -> int:
        return int((self._clock() - self._origin) * 1000)


def play(
    cfg: AppConfig,
    lrc_text: str,
    *,
    title: str,
    artist: str | None = None,
    position: PositionFn | None = None,
    renderer: AnsiRenderer | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Poll loop:
    position -> session.changed -> render on change, every poll interval.

    Ends once the position is past the last line (empty window).
    """
    session = LyricsSession(title_mode=cfg.title_mode, sync_enabled=cfg.sync_enabled)
    session.on_lyrics_available(title, artist, lrc_text, source=LyricsSource.LOCAL)
    position = position or PlaybackClock().position_ms
    renderer = renderer or AnsiRenderer(use_alt_screen=cfg.use_alt_screen)
    tick_s = cfg.poll_interval_ms / 1000.0

    if not session.sync_enabled or not session.timeline.is_synced:
        if session.sync_enabled:
            logger.info("No timestamps in lyrics for %r, showing plain text", title)
        # printed once to the normal screen
        frame = renderer.format_text(session.full_text(), has_artist=bool(session.artist))
        renderer.out.write("\n".join(frame) + "\n")
        renderer.out.flush()
        return 0

    renderer.enter()

    def _on_sigint(signum, frame):
        renderer.exit()
        raise KeyboardInterrupt

    prev_handler = signal.signal(signal.SIGINT, _on_sigint)

    try:
        while True:
            pos_ms = position()
            window = session.changed(pos_ms)
            if window is not None:
                if window.is_empty:
                    logger.debug("Position %d ms is past the last line", pos_ms)
                    return 0
                renderer.render_window(window)
            sleep(tick_s)
    except KeyboardInterrupt:
        return 130
    finally:
        signal.signal(signal.SIGINT, prev_handler)
        renderer.exit()
