"""Terminal detection and metrics for human-format output."""

from __future__ import annotations

import os
import shutil
from typing import TextIO

DEFAULT_TERM_SIZE = (80, 24)


def is_terminal(stream: TextIO | None) -> bool:
    """Return whether ``stream`` is attached to a TTY."""
    if stream is None:
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty()) if callable(isatty) else False
    except (OSError, ValueError):
        return False


def terminal_size(stream: TextIO | None = None) -> os.terminal_size:
    """Resolve terminal columns/lines for ``stream``.

    ``COLUMNS`` and ``LINES`` win over the real size; unsized streams fall
    back to 80x24.
    """
    fileno = getattr(stream, "fileno", None)
    if callable(fileno) and "COLUMNS" not in os.environ and "LINES" not in os.environ:
        try:
            return os.get_terminal_size(fileno())
        except (OSError, ValueError):
            pass
    return shutil.get_terminal_size(DEFAULT_TERM_SIZE)
