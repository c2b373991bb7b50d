from __future__ import annotations

import shutil
import signal
import sys
from dataclasses import dataclass
from typing import Callable, TextIO

from colorama import just_fix_windows_console

from synclyrics.sync.window import DisplayWindow, LineStyle


CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    header: str = _sgr(1)  # bold
    artist: str = _sgr(3)  # italic
    current: str = _sgr(33, 1)  # yellow bold
    context: str = _sgr(37)  # white
    reset: str = _sgr(0)

    def for_style(self, style: LineStyle) -> str:
        if style is LineStyle.HEADER:
            return self.header
        if style is LineStyle.CURRENT:
            return self.current
        return self.context


class AnsiRenderer:
    def __init__(self, use_alt_screen: bool = True, theme: Theme | None = None, out: TextIO | None = None):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self.out = out or sys.stdout
        self._entered = False
        self._resize_handler: Callable[[], None] | None = None
        self._last_frame: list[str] | None = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        # no-op outside legacy Windows consoles
        just_fix_windows_console()
        if self.use_alt_screen:
            self.out.write(CSI + "?1049h")  # alt screen
        self.out.write(CSI + "?25l")  # hide cursor
        self.out.write(CSI + "H" + CSI + "2J")  # home + clear
        self.out.flush()
        self._entered = True

        def _on_resize(signum=None, frame=None):
            if self._last_frame is not None:
                self._draw(self._last_frame)

        self._resize_handler = _on_resize
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        if self._resize_handler and hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        self._resize_handler = None
        self.out.write(self.theme.reset)
        self.out.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            self.out.write(CSI + "?1049l")  # normal screen
        self.out.flush()
        self._entered = False
        self._last_frame = None

    def format_window(self, window: DisplayWindow) -> list[str]:
        out: list[str] = []
        for pos, line in enumerate(window):
            style = self.theme.for_style(window.style_at(pos))
            out.append(f"{style}{line.text}{self.theme.reset}")
        return out

    def format_text(self, full_text: list[str], has_artist: bool = False) -> list[str]:
        """Style the unsynced view: title, optional artist row, then lyrics as-is."""
        if not full_text:
            return []
        out = [f"{self.theme.header}{full_text[0]}{self.theme.reset}"]
        rest = full_text[1:]
        if has_artist and rest:
            out.append(f"{self.theme.artist}{rest[0]}{self.theme.reset}")
            rest = rest[1:]
        out.extend(rest)
        return out

    def render_window(self, window: DisplayWindow) -> None:
        self._draw(self.format_window(window))

    def _draw(self, frame: list[str]) -> None:
        # kept for SIGWINCH redraw
        self._last_frame = frame
        _cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        visible = frame[: max(rows, 1)]

        # move home + clear, then print full frame
        self.out.write(CSI + "H" + CSI + "2J")
        self.out.write("\n".join(visible))
        self.out.write(self.theme.reset)
        self.out.flush()
