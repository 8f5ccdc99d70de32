"""Settings file for sessionizer.

``config.json`` under the platform config directory tunes the picker
(prediction count, poll interval, prompt), the log level, and which directory
names the project scan skips. Bad or missing values quietly fall back to the
defaults in :class:`Settings`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .picker.matcher import DEFAULT_MAX_PREDICTIONS, MAX_PREDICTIONS_LIMIT

APP_NAME = "sessionizer"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_POLL_INTERVAL_MS = 10
DEFAULT_PROMPT = "Select repository"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_SKIP_DIRS = ("node_modules",)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Effective settings after defaults and validation."""

    max_predictions: int = DEFAULT_MAX_PREDICTIONS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    prompt: str = DEFAULT_PROMPT
    log_level: str = DEFAULT_LOG_LEVEL
    skip_dirs: tuple[str, ...] = field(default_factory=lambda: DEFAULT_SKIP_DIRS)


def load_config() -> dict[str, object]:
    """Return the raw settings mapping, or ``{}`` if there is nothing usable."""
    try:
        raw = CONFIG_PATH.read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def _bounded_int(value: object, low: int, high: int) -> int | None:
    # bool is an int subclass; "true" in JSON must not read as 1.
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if low <= value <= high else None


def _nonempty_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def load_settings() -> Settings:
    data = load_config()
    defaults = Settings()

    max_predictions = _bounded_int(data.get("max_predictions"), 1, MAX_PREDICTIONS_LIMIT)
    poll_interval_ms = _bounded_int(data.get("poll_interval_ms"), 1, 1000)
    prompt = _nonempty_str(data.get("prompt"))
    log_level = _nonempty_str(data.get("log_level"))
    if log_level is not None:
        log_level = log_level.upper()
        if log_level not in LOG_LEVELS:
            log_level = None

    skip_dirs = defaults.skip_dirs
    raw_skip_dirs = data.get("skip_dirs")
    if isinstance(raw_skip_dirs, list):
        skip_dirs = tuple(name for name in raw_skip_dirs if isinstance(name, str) and name)

    return Settings(
        max_predictions=max_predictions if max_predictions is not None else defaults.max_predictions,
        poll_interval_ms=poll_interval_ms if poll_interval_ms is not None else defaults.poll_interval_ms,
        prompt=prompt if prompt is not None else defaults.prompt,
        log_level=log_level if log_level is not None else defaults.log_level,
        skip_dirs=skip_dirs,
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "Settings",
    "load_config",
    "load_settings",
]
