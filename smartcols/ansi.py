"""Multi-byte aware text measurement, truncation, and escaping.

Widths are terminal cells, not code points: combining marks take none and
East Asian wide/fullwidth characters take two.
"""

from __future__ import annotations

import re
import unicodedata

from .errors import EncodingError

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"


def is_malformed(ch: str) -> bool:
    """Return whether ``ch`` is a lone surrogate left over from undecodable input."""
    return 0xD800 <= ord(ch) <= 0xDFFF


def char_width(ch: str, col: int = 0) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks and other control
    characters consume no columns, and East Asian wide/fullwidth characters
    consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if ch < " " or "\x7f" <= ch <= "\x9f" or is_malformed(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str | None) -> int:
    """Return the number of terminal cells ``text`` occupies."""
    if not text:
        return 0
    col = 0
    for ch in text:
        col += char_width(ch, col)
    return col


def truncate_to_width(text: str, width: int) -> tuple[str, int]:
    """Cut ``text`` to at most ``width`` cells.

    Returns the kept prefix and its real width. A wide glyph that would
    straddle the limit is dropped whole, so the result may be narrower than
    requested. Raises ``EncodingError`` when a malformed character is met
    before the limit.
    """
    col = 0
    for idx, ch in enumerate(text):
        if is_malformed(ch):
            raise EncodingError(f"malformed character at offset {idx}")
        w = char_width(ch, col)
        if col + w > width:
            return text[:idx], col
        col += w
    return text, col


def _escape_char(ch: str) -> str:
    """Spell one character as ``\\xNN`` per UTF-8 byte."""
    try:
        raw = ch.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = ch.encode("utf-8", "surrogatepass")
    return "".join(f"\\x{byte:02x}" for byte in raw)


def safe_encode(text: str | None, safechars: str = "") -> str:
    """Escape control bytes and non-printables so they cannot drive the terminal.

    Characters listed in ``safechars`` pass through untouched. A backslash is
    escaped only when followed by ``x`` so the output stays unambiguous.
    """
    if not text:
        return ""
    out: list[str] = []
    last = len(text) - 1
    for idx, ch in enumerate(text):
        if ch in safechars:
            out.append(ch)
        elif ch == "\\" and idx < last and text[idx + 1] == "x":
            out.append(_escape_char(ch))
        elif not ch.isprintable() or is_malformed(ch):
            out.append(_escape_char(ch))
        else:
            out.append(ch)
    return "".join(out)


def nonblank_escape(text: str | None) -> str:
    """Raw-format escaping: blanks, backslash and non-printables become ``\\xNN``."""
    if not text:
        return ""
    out: list[str] = []
    for ch in text:
        if ch in " \t\\" or not ch.isprintable() or is_malformed(ch):
            out.append(_escape_char(ch))
        else:
            out.append(ch)
    return "".join(out)


def shell_ident(name: str | None) -> str:
    """Turn a header into a shell variable name (non-alphanumerics become ``_``)."""
    if not name:
        return ""
    return "".join(ch if ch.isascii() and ch.isalnum() else "_" for ch in name)


def shell_quote(text: str | None) -> str:
    """Double-quote ``text`` for ``eval`` safety, escaping ``" \\ ` $`` as ``\\xNN``."""
    out: list[str] = ['"']
    for ch in text or "":
        if ch in '"\\`$' or not ch.isprintable() or is_malformed(ch):
            out.append(_escape_char(ch))
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def align_text(text: str, width: int, align: str = ALIGN_LEFT, pad: str = " ") -> str:
    """Fit ``text`` into exactly ``width`` cells, truncating or padding with ``pad``."""
    if display_width(text) > width:
        text, used = truncate_to_width(text, width)
    else:
        used = display_width(text)
    gap = max(0, width - used)
    if align == ALIGN_RIGHT:
        return pad * gap + text
    if align == ALIGN_CENTER:
        left = gap // 2
        return pad * left + text + pad * (gap - left)
    return text + pad * gap
