from __future__ import annotations

import io
import signal
from unittest.mock import patch

import pytest

from synclyrics.lrc.model import TimedLine
from synclyrics.render.ansi import AnsiRenderer, Theme
from synclyrics.sync.window import DisplayWindow


def _window() -> DisplayWindow:
    return DisplayWindow(
        lines=(TimedLine(-1, "Song"), TimedLine(1000, "a"), TimedLine(2000, "b")),
        start_index=0,
        current_pos=1,
        header_pos=0,
    )


def test_format_window_styles():
    theme = Theme()
    renderer = AnsiRenderer(use_alt_screen=False, out=io.StringIO())
    assert renderer.format_window(_window()) == [
        f"{theme.header}Song{theme.reset}",
        f"{theme.current}a{theme.reset}",
        f"{theme.context}b{theme.reset}",
    ]


def test_format_text():
    theme = Theme()
    renderer = AnsiRenderer(use_alt_screen=False, out=io.StringIO())
    assert renderer.format_text(["Song", "Artist", "", "x"], has_artist=True) == [
        f"{theme.header}Song{theme.reset}",
        f"{theme.artist}Artist{theme.reset}",
        "",
        "x",
    ]
    assert renderer.format_text(["Song", "", "x"]) == [f"{theme.header}Song{theme.reset}", "", "x"]
    assert renderer.format_text([]) == []


def test_render_writes_frame():
    out = io.StringIO()
    renderer = AnsiRenderer(use_alt_screen=False, out=out)
    renderer.render_window(_window())
    assert "Song" in out.getvalue()
    assert "a" in out.getvalue()


@pytest.mark.skipif(not hasattr(signal, "SIGWINCH"), reason="no SIGWINCH")
def test_resize_redraws_last_frame():
    renderer = AnsiRenderer(use_alt_screen=False, out=io.StringIO())
    renderer.enter()
    try:
        renderer.render_window(_window())
        with patch.object(renderer, "_draw") as mock_draw:
            assert renderer._resize_handler is not None
            renderer._resize_handler()
            mock_draw.assert_called_once_with(renderer.format_window(_window()))
    finally:
        renderer.exit()
    assert renderer._last_frame is None
    assert signal.getsignal(signal.SIGWINCH) == signal.SIG_DFL


def test_alt_screen_toggled():
    out = io.StringIO()
    with AnsiRenderer(use_alt_screen=True, out=out):
        pass
    assert "\x1b[?1049h" in out.getvalue()
    assert "\x1b[?1049l" in out.getvalue()
