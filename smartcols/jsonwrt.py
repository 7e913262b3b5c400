"""Streaming JSON token writer.

Tokens are written in document order; each close/value call is told whether
it is the last sibling so the trailing comma can be left out. Member names
are lower-cased.
"""

from __future__ import annotations

import json
from typing import TextIO

from .ansi import is_malformed


def _quote(text: str) -> str:
    """JSON string literal; undecodable input is kept as \\u escapes."""
    if any(is_malformed(ch) for ch in text):
        return json.dumps(text)
    return json.dumps(text, ensure_ascii=False)


class JsonWriter:
    """Write objects, arrays and scalars to ``out``.

    ``indent`` is the number of spaces per nesting level; ``None`` produces
    compact single-line output.
    """

    def __init__(self, out: TextIO, indent: int | None = 3) -> None:
        self.out = out
        self.indent = indent
        self.level = 0

    def _begin(self, name: str | None) -> None:
        if self.indent:
            self.out.write(" " * (self.indent * self.level))
        if name is not None:
            sep = ": " if self.indent is not None else ":"
            self.out.write(_quote(name.lower()) + sep)

    def _end(self, is_last: bool) -> None:
        if not is_last:
            self.out.write(",")
        if self.indent is not None:
            self.out.write("\n")

    def _open(self, name: str | None, token: str) -> None:
        self._begin(name)
        self.out.write(token)
        if self.indent is not None:
            self.out.write("\n")
        self.level += 1

    def _close(self, token: str, is_last: bool) -> None:
        self.level = max(0, self.level - 1)
        self._begin(None)
        self.out.write(token)
        self._end(is_last)

    def open_object(self, name: str | None = None) -> None:
        self._open(name, "{")

    def close_object(self, is_last: bool) -> None:
        self._close("}", is_last)

    def open_array(self, name: str | None = None) -> None:
        self._open(name, "[")

    def close_array(self, is_last: bool) -> None:
        self._close("]", is_last)

    def value_string(self, name: str | None, value: str | None, is_last: bool) -> None:
        self._begin(name)
        self.out.write(_quote(value or ""))
        self._end(is_last)

    def value_raw(self, name: str | None, value: str | None, is_last: bool) -> None:
        """Write ``value`` unquoted (numbers); an empty value becomes ``null``."""
        self._begin(name)
        self.out.write(value if value else "null")
        self._end(is_last)

    def value_boolean(self, name: str | None, value: bool, is_last: bool) -> None:
        self._begin(name)
        self.out.write("true" if value else "false")
        self._end(is_last)
