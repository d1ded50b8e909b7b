"""Persistent JSON config helpers.

Stores the UI theme, rescan/git timing, expansion carry-over preference and
an optional log file. All access is defensive: malformed or missing config
falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "fastgit"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_RESCAN_INTERVAL_SECONDS = 1.0
DEFAULT_GIT_TIMEOUT_SECONDS = 2.0
DEFAULT_COMMIT_LOG_LIMIT = 200


@dataclass(frozen=True)
class FastgitConfig:
    """Resolved settings with defaults applied."""

    theme: str | None = None
    keep_expanded_on_rescan: bool = False
    rescan_interval_seconds: float = DEFAULT_RESCAN_INTERVAL_SECONDS
    git_timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS
    commit_log_limit: int = DEFAULT_COMMIT_LOG_LIMIT
    log_file: Path | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON, ignoring write failures."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError):
        pass


def _positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= 1 else default


def save_keep_expanded_on_rescan(enabled: bool) -> None:
    config = load_config()
    config["keep_expanded_on_rescan"] = bool(enabled)
    save_config(config)


def load_settings() -> FastgitConfig:
    """Read every setting in one pass and apply defaults for invalid values."""
    data = load_config()
    theme = data.get("theme")
    keep_expanded = data.get("keep_expanded_on_rescan")
    log_file = data.get("log_file")
    return FastgitConfig(
        theme=theme.strip() or None if isinstance(theme, str) else None,
        keep_expanded_on_rescan=keep_expanded if isinstance(keep_expanded, bool) else False,
        rescan_interval_seconds=_positive_float(data.get("rescan_interval_seconds"), DEFAULT_RESCAN_INTERVAL_SECONDS),
        git_timeout_seconds=_positive_float(data.get("git_timeout_seconds"), DEFAULT_GIT_TIMEOUT_SECONDS),
        commit_log_limit=_positive_int(data.get("commit_log_limit"), DEFAULT_COMMIT_LOG_LIMIT),
        log_file=Path(log_file).expanduser() if isinstance(log_file, str) and log_file.strip() else None,
    )
