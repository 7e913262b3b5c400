"""Color name resolution for cells, lines, columns, and titles.

Names come from the Pygments console palette (``red``, ``brightblue``,
``bold`` ...); raw SGR parameters and ready-made escape sequences also pass.
"""

from __future__ import annotations

import re

from pygments.console import codes as _CONSOLE_CODES

from .ansi import ANSI_ESCAPE_RE
from .errors import SmartcolsError

COLOR_RESET = _CONSOLE_CODES["reset"]

_SGR_PARAMS_RE = re.compile(r"\d+(;\d+)*")


def color_sequence(name: str | None) -> str | None:
    """Translate a color name into an ANSI escape sequence.

    ``None`` and the empty string mean "no color". ``light`` is accepted as a
    synonym of ``bright`` (``lightred``) the way util-linux spells it.
    """
    if not name:
        return None
    if ANSI_ESCAPE_RE.fullmatch(name):
        return name
    key = name.strip().lower().replace("-", "").replace("_", "")
    if key.startswith("light"):
        key = "bright" + key[len("light"):]
    if key in _CONSOLE_CODES and key != "reset":
        return _CONSOLE_CODES[key]
    if _SGR_PARAMS_RE.fullmatch(key):
        return f"\x1b[{key}m"
    raise SmartcolsError(f"unknown color: {name!r}")
