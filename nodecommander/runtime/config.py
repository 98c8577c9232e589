"""Persistent JSON config helpers.

Stores the tree-pane width and the monitored-item sampling interval.
Access is tolerant: a missing or malformed config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "nodecommander"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_SAMPLING_INTERVAL_MS = 1000
MIN_SAMPLING_INTERVAL_MS = 50
MAX_SAMPLING_INTERVAL_MS = 60_000


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are logged."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("cannot write config %s: %s", CONFIG_PATH, exc)


def load_left_pane_percent() -> float | None:
    """Load the tree-pane width percentage, constrained to (0, 100)."""
    value = load_config().get("left_pane_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0 or value >= 100:
        return None
    return float(value)


def save_left_pane_percent(total_width: int, left_width: int) -> None:
    """Store the tree-pane width as a percentage clamped to ``[1.0, 99.0]``."""
    if total_width <= 0:
        return
    percent = max(1.0, min(99.0, (left_width / total_width) * 100.0))
    config = load_config()
    config["left_pane_percent"] = round(percent, 2)
    save_config(config)


def load_sampling_interval_ms() -> int:
    """Return the monitored-item sampling interval in milliseconds.

    Only integers inside ``[50, 60000]`` are accepted; anything else falls back
    to the one-second default.
    """
    value = load_config().get("sampling_interval_ms")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_SAMPLING_INTERVAL_MS
    if not MIN_SAMPLING_INTERVAL_MS <= value <= MAX_SAMPLING_INTERVAL_MS:
        return DEFAULT_SAMPLING_INTERVAL_MS
    return value
