"""Pending data: the unprinted tail of wrapped cells.

The first output line of a wrapped cell is printed as usual; the rest is
kept here and drained one extra output line at a time until every column of
the row is empty again. Extra lines are not table lines.
"""

from __future__ import annotations

import logging

from .model import Column

logger = logging.getLogger(__name__)


class PendingData:
    """Cursor over one column's unconsumed text (``Empty -> HasPending -> Empty``)."""

    __slots__ = ("_text", "_offset")

    def __init__(self) -> None:
        self._text: str | None = None
        self._offset = 0

    def set(self, text: str | None) -> None:
        """Replace the pending text; ``None`` or ``""`` empties the cursor."""
        self._text = text or None
        self._offset = 0

    def step(self, consumed: int) -> None:
        """Advance past ``consumed`` characters printed on the current output line."""
        if consumed >= self.remaining:
            self.set(None)
            return
        self._offset += consumed

    @property
    def remaining(self) -> int:
        if self._text is None:
            return 0
        return len(self._text) - self._offset

    @property
    def text(self) -> str | None:
        if self._text is None:
            return None
        return self._text[self._offset:]

    def __bool__(self) -> bool:
        return self._text is not None


class RowContext:
    """Render state owned by one line while it is being printed.

    Created by the line walker for each line and dropped afterwards, so no
    pending text outlives its row.
    """

    def __init__(self, columns: list[Column]) -> None:
        self._pending = {cl.seqnum: PendingData() for cl in columns}

    def pending(self, column: Column) -> PendingData:
        return self._pending[column.seqnum]

    def set_pending(self, column: Column, text: str | None) -> None:
        logger.debug("column %s: setting pending data (%d chars)", column.name, len(text or ""))
        self._pending[column.seqnum].set(text)

    def step_pending(self, column: Column, consumed: int) -> None:
        cursor = self._pending[column.seqnum]
        logger.debug("column %s: step pending data %d -= %d", column.name, cursor.remaining, consumed)
        cursor.step(consumed)

    def has_pending(self, columns: list[Column] | None = None) -> bool:
        if columns is None:
            return any(self._pending.values())
        return any(self._pending[cl.seqnum] for cl in columns)
