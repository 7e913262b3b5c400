"""Scratch buffer shared by every cell of one print session."""

from __future__ import annotations

import logging

from .ansi import display_width, is_malformed, safe_encode

logger = logging.getLogger(__name__)


class CellBuffer:
    """Accumulates one cell: decoration art first, then the cell data.

    ``mark_art()`` records where the art ends so the renderer can leave the
    decoration uncolored. ``safe_data()`` encodes the whole cell and keeps the
    encoded length of the art in ``art_size``. ``size`` is the capacity
    sized by the session; it doubles when a cell outgrows it.
    """

    def __init__(self, size: int) -> None:
        self.size = size
        self._parts: list[str] = []
        self._length = 0
        self._art_index = 0
        self.art_size = 0

    def reset(self) -> None:
        self._parts.clear()
        self._length = 0
        self._art_index = 0
        self.art_size = 0

    def append(self, text: str | None) -> None:
        if not text:
            return
        self._parts.append(text)
        self._length += len(text)
        if self._length > self.size:
            while self._length > self.size:
                self.size = max(1, self.size) * 2
            logger.debug("cell buffer grown to %d", self.size)

    def mark_art(self) -> None:
        self._art_index = self._length

    @property
    def data(self) -> str:
        if len(self._parts) > 1:
            self._parts[:] = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    def safe_data(self, no_encode: bool, safechars: str = "") -> tuple[str, int]:
        """Return the printable cell text and its display width.

        Without encoding, cell data holding undecodable input cannot be
        written to a strict text stream; only the art is kept then.
        """
        raw = self.data
        if no_encode:
            self.art_size = self._art_index
            if any(is_malformed(ch) for ch in raw):
                logger.debug("malformed cell data, printing empty cell")
                raw = raw[: self._art_index]
            return raw, display_width(raw)
        art = safe_encode(raw[: self._art_index], safechars)
        text = art + safe_encode(raw[self._art_index:], safechars)
        self.art_size = len(art)
        return text, display_width(text)
