from __future__ import annotations

import json
from pathlib import Path
import typer

from synclyrics.app import PlaybackClock, play as play_loop
from synclyrics.config import DEFAULTS, load_config, save_config_value
from synclyrics.logging_setup import setup_logging
from synclyrics.lrc.model import TitleMode
from synclyrics.lrc.parse import parse_timeline_with_stats
from synclyrics.session import LyricsSession
from synclyrics.status import LyricsSource


app = typer.Typer(no_args_is_help=True, add_completion=False)

_STYLE_MARKS = {"header": "#", "current": ">", "context": " "}


def _read_lyrics(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e


def _title_mode(value: str | None) -> TitleMode:
    if value is None:
        return load_config().title_mode
    try:
        return TitleMode(value.lower())
    except ValueError as e:
        raise typer.BadParameter("title mode must be one of: inject, separate") from e


@app.command()
def parse(
    lrc_path: Path,
    title: str | None = typer.Option(None, "--title", help="Track title (default: file name)"),
    artist: str | None = typer.Option(None, "--artist", help="Track artist"),
    title_mode: str | None = typer.Option(None, "--title-mode", help="inject|separate"),
):
    """Parse lyrics and print stats."""
    text = _read_lyrics(lrc_path)
    timeline, stats = parse_timeline_with_stats(
        title or lrc_path.stem, artist, text, title_mode=_title_mode(title_mode)
    )
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"lines_with_timestamps={stats.lines_with_timestamps}")
    typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"events_total={stats.events_total}")
    typer.echo(f"tags_malformed={stats.tags_malformed}")
    typer.echo(f"offset_ms={timeline.offset_ms}")
    typer.echo(f"tags={timeline.tags}")


@app.command()
def timeline(
    lrc_path: Path,
    title: str | None = typer.Option(None, "--title", help="Track title (default: file name)"),
    title_mode: str | None = typer.Option(None, "--title-mode", help="inject|separate"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Print the sorted timeline."""
    text = _read_lyrics(lrc_path)
    tl, _stats = parse_timeline_with_stats(title or lrc_path.stem, None, text, title_mode=_title_mode(title_mode))
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "has_title": tl.has_title,
                    "offset_ms": tl.offset_ms,
                    "tags": tl.tags,
                    "lines": [{"timestamp_ms": ln.timestamp_ms, "text": ln.text} for ln in tl.lines],
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return
    for ln in tl.lines:
        typer.echo(f"{ln.timestamp_ms:>9} {ln.text}")


@app.command()
def window(
    lrc_path: Path,
    at: int = typer.Option(..., "--at", help="Playback position (ms)"),
    title: str | None = typer.Option(None, "--title", help="Track title (default: file name)"),
    title_mode: str | None = typer.Option(None, "--title-mode", help="inject|separate"),
):
    """Print the lines displayed at a playback position."""
    text = _read_lyrics(lrc_path)
    session = LyricsSession(title_mode=_title_mode(title_mode))
    session.on_lyrics_available(title or lrc_path.stem, None, text, source=LyricsSource.LOCAL)
    w = session.tick(at)
    if w is None or w.is_empty:
        typer.echo("(nothing to display)")
        return
    for pos, ln in enumerate(w):
        mark = _STYLE_MARKS[w.style_at(pos).value]
        typer.echo(f"{mark} {ln.text}")


@app.command()
def play(
    lrc_path: Path,
    title: str | None = typer.Option(None, "--title", help="Track title (default: file name)"),
    artist: str | None = typer.Option(None, "--artist", help="Track artist"),
    start_ms: int = typer.Option(0, "--start-ms", help="Start playback at this position"),
    no_sync: bool = typer.Option(False, "--no-sync", help="Show the full unsynced text"),
    poll_ms: int | None = typer.Option(None, "--poll-ms", help="Polling interval (ms)"),
    title_mode: str | None = typer.Option(None, "--title-mode", help="inject|separate"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Write logs here instead of stderr"),
):
    """
    Play lyrics against a wall clock, as a player plugin would.
    """
    cfg = load_config()
    if no_sync:
        cfg = cfg.__class__(**{**cfg.__dict__, "sync_enabled": False})
    if poll_ms is not None:
        if poll_ms <= 0:
            raise typer.BadParameter("--poll-ms must be positive")
        cfg = cfg.__class__(**{**cfg.__dict__, "poll_interval_ms": poll_ms})
    if title_mode is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "title_mode": _title_mode(title_mode)})
    if no_alt_screen:
        cfg = cfg.__class__(**{**cfg.__dict__, "use_alt_screen": False})

    setup_logging(debug, log_file)
    text = _read_lyrics(lrc_path)
    clock = PlaybackClock(start_ms=start_ms)
    raise typer.Exit(
        code=play_loop(cfg, text, title=title or lrc_path.stem, artist=artist, position=clock.position_ms)
    )


@app.command()
def config(key: str, value: str):
    """Persist a config value (sync_enabled, title_mode, poll_interval_ms, use_alt_screen)."""
    if key not in DEFAULTS:
        typer.echo(f"Error: unknown key {key!r}; expected one of: {', '.join(DEFAULTS)}", err=True)
        raise typer.Exit(code=1)
    try:
        save_config_value(key, value)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{key}={value}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
