from __future__ import annotations

import json
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

from synclyrics.lrc.model import TitleMode

logger = logging.getLogger(__name__)

_FALSE = ("0", "false", "no", "off")


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "synclyrics"
    return Path.home() / ".config" / "synclyrics"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Sync
    sync_enabled: bool
    title_mode: TitleMode
    poll_interval_ms: int

    # Rendering
    use_alt_screen: bool


DEFAULTS: dict[str, Any] = {
    "sync_enabled": True,
    "title_mode": TitleMode.INJECT.value,
    "poll_interval_ms": 100,
    "use_alt_screen": True,
}

_ENV = {
    "sync_enabled": "SYNCLYRICS_SYNC",
    "title_mode": "SYNCLYRICS_TITLE_MODE",
    "poll_interval_ms": "SYNCLYRICS_POLL_MS",
    "use_alt_screen": "SYNCLYRICS_ALT_SCREEN",
}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in _FALSE


def _coerce(key: str, value: Any) -> Any:
    if key in ("sync_enabled", "use_alt_screen"):
        return _to_bool(value)
    if key == "title_mode":
        return TitleMode(str(value).strip().lower())
    if key == "poll_interval_ms":
        ms = int(value)
        if ms <= 0:
            raise ValueError(f"poll_interval_ms must be positive, got {ms}")
        return ms
    raise KeyError(key)


def _read_file(config_dir: Path) -> dict[str, Any]:
    cfg_path = config_dir / "config.json"
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _resolve(key: str, file_data: dict[str, Any]) -> Any:
    # Priority: config.json -> SYNCLYRICS_* env -> default
    candidates = []
    if key in file_data:
        candidates.append(("config.json", file_data[key]))
    env_val = os.getenv(_ENV[key])
    if env_val is not None:
        candidates.append((_ENV[key], env_val))

    for origin, raw in candidates:
        try:
            return _coerce(key, raw)
        except (ValueError, KeyError) as e:
            logger.warning("Invalid %s in %s (%r): %s", key, origin, raw, e)
    return _coerce(key, DEFAULTS[key])


def load_config() -> AppConfig:
    config_dir = _config_dir()
    file_data = _read_file(config_dir)
    return AppConfig(
        config_dir=config_dir,
        sync_enabled=_resolve("sync_enabled", file_data),
        title_mode=_resolve("title_mode", file_data),
        poll_interval_ms=_resolve("poll_interval_ms", file_data),
        use_alt_screen=_resolve("use_alt_screen", file_data),
    )


def save_config_value(key: str, value: Any) -> None:
    if key not in DEFAULTS:
        raise KeyError(f"Unknown config key: {key}")
    coerced = _coerce(key, value)
    if isinstance(coerced, TitleMode):
        coerced = coerced.value

    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _read_file(cfg_path.parent)
    data[key] = coerced
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
