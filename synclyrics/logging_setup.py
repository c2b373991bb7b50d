from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _env_level(default: int) -> int:
    level_name = os.getenv("SYNCLYRICS_LOG_LEVEL")
    if not level_name:
        return default
    level = logging.getLevelName(level_name.upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else default


def setup_logging(debug: bool, log_file: Path | None = None) -> None:
    """
    Configure root logging. `log_file` keeps records off the terminal while
    the ANSI driver owns the screen.
    """
    level = _env_level(logging.DEBUG if debug else logging.INFO)
    kwargs: dict[str, object] = {"level": level, "format": LOG_FORMAT, "force": True}
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        kwargs["filename"] = str(log_file)
        kwargs["encoding"] = "utf-8"
    logging.basicConfig(**kwargs)
