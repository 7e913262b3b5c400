"""Defaults for the ``smartcols`` command, kept in a small JSON file.

Holds the color mode, ASCII-only art, terminal width reduction and the
output column separator. A missing or broken file means built-in defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "smartcols.json"

COLOR_MODES = ("auto", "always", "never")


def load_config() -> dict[str, object]:
    """Read the config file as a dict.

    Anything other than a readable file holding a JSON object yields ``{}``.
    """
    try:
        raw = CONFIG_PATH.read_text(encoding="utf-8")
        loaded = json.loads(raw)
    except (OSError, ValueError) as exc:
        logger.debug("config %s not loaded: %s", CONFIG_PATH, exc)
        return {}
    if not isinstance(loaded, dict):
        logger.debug("config %s is not a JSON object", CONFIG_PATH)
        return {}
    return loaded


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` back to the config file, creating its directory.

    A read-only home must not break the command, so write failures are only
    logged.
    """
    text = json.dumps(data, indent=2, sort_keys=True) + "\n"
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.debug("config %s not saved: %s", CONFIG_PATH, exc)


def load_color_mode() -> str:
    """Return the persisted color mode, ``auto`` unless a known mode is stored."""
    value = load_config().get("colors")
    return value if isinstance(value, str) and value in COLOR_MODES else "auto"


def save_color_mode(mode: str) -> None:
    if mode not in COLOR_MODES:
        raise ValueError(f"unknown color mode: {mode!r}")
    save_config({**load_config(), "colors": mode})


def load_ascii() -> bool:
    """Return persisted ASCII-art preference; only explicit booleans count."""
    return load_config().get("ascii") is True


def load_term_reduce() -> int:
    """Columns to leave unused at the right edge of the terminal; 0 unless a positive int is stored."""
    value = load_config().get("term_reduce")
    if type(value) is not int or value < 0:
        return 0
    return value


def load_column_separator() -> str:
    """Return the persisted output column separator, a single space by default."""
    value = load_config().get("column_separator")
    return value if isinstance(value, str) and value else " "
