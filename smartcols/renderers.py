"""Per-format cell renderers.

One renderer is chosen per print session from ``table.format``. Each turns
the scratch buffer of one cell into output; only the human renderer wraps,
so only it produces extra output lines.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .ansi import (
    display_width,
    nonblank_escape,
    safe_encode,
    shell_ident,
    shell_quote,
    truncate_to_width,
)
from .art import continuation_art
from .buffer import CellBuffer
from .colors import COLOR_RESET
from .errors import EncodingError, FormatError
from .model import Cell, Column, JsonType, Line, OutputFormat
from .pending import RowContext

if TYPE_CHECKING:
    from .printer import PrintSession

logger = logging.getLogger(__name__)


class CellRenderer:
    """Common base: emits cells of one line for one output format."""

    def __init__(self, session: PrintSession) -> None:
        self.session = session
        self.table = session.table

    def write(self, text: str) -> None:
        if text:
            self.session.out.write(text)

    def print_data(
        self,
        column: Column,
        line: Line | None,
        cell: Cell | None,
        buf: CellBuffer,
        row: RowContext,
    ) -> None:
        raise NotImplementedError

    def print_continuation(self, column: Column, line: Line, row: RowContext) -> None:
        """Print ``column`` on an extra output line of ``line``."""
        raise NotImplementedError(f"{self.table.format.value} output has no extra lines")


class RawRenderer(CellRenderer):
    def print_data(
        self,
        column: Column,
        line: Line | None,
        cell: Cell | None,
        buf: CellBuffer,
        row: RowContext,
    ) -> None:
        self.write(nonblank_escape(buf.data))
        if not self.session.is_last_column(column):
            self.write(self.table.colsep)


class ExportRenderer(CellRenderer):
    def print_data(
        self,
        column: Column,
        line: Line | None,
        cell: Cell | None,
        buf: CellBuffer,
        row: RowContext,
    ) -> None:
        name = column.name
        self.write(shell_ident(name))
        if name.endswith("%"):
            self.write("PCT")
        self.write("=")
        self.write(shell_quote(buf.data))
        if not self.session.is_last_column(column):
            self.write(self.table.colsep)


def json_boolean(data: str | None) -> bool:
    """Empty, ``0...`` and ``N...``/``n...`` values are false; anything else is true."""
    return bool(data) and data[0] not in "0Nn"


class JsonRenderer(CellRenderer):
    def print_data(
        self,
        column: Column,
        line: Line | None,
        cell: Cell | None,
        buf: CellBuffer,
        row: RowContext,
    ) -> None:
        writer = self.session.json
        data = buf.data
        name = column.name
        is_last = self.session.is_last_column(column)
        if is_last and self.table.is_tree and line is not None and line.has_children:
            # "children": [...] is the real last member.
            is_last = False

        kind = column.json_type
        if kind is JsonType.STRING:
            writer.value_string(name, data, is_last)
        elif kind is JsonType.NUMBER:
            writer.value_raw(name, data, is_last)
        elif kind is JsonType.BOOLEAN:
            writer.value_boolean(name, json_boolean(data), is_last)
        else:
            writer.open_array(name)
            if not column.is_customwrap:
                writer.value_string(None, data, True)
            else:
                chunks = list(column.iter_chunks(data))
                for idx, chunk in enumerate(chunks):
                    more = idx < len(chunks) - 1
                    if kind is JsonType.ARRAY_STRING:
                        writer.value_string(None, chunk, not more)
                    else:
                        writer.value_raw(None, chunk, not more)
            writer.close_array(is_last)


class HumanRenderer(CellRenderer):
    """Aligned columns with truncation, wrapping, colors, and tree art."""

    def cell_color(self, column: Column, line: Line | None, cell: Cell | None) -> str | None:
        if not self.table.colors_wanted:
            return None
        color = cell.color if cell is not None else None
        if line is not None and not color:
            color = line.color
        return color or column.color

    def _truncates(self, column: Column) -> bool:
        return column.is_trunc or self.table.no_wrap

    def _fill(self, column: Column, line: Line | None, used: int, width: int, is_last: bool) -> bool:
        """Pad the cell to ``width``; ``False`` means the fill policy ended the cell."""
        if self.table.minout and self.session.is_next_columns_empty(column, line):
            return False
        if not self.table.maxout and is_last:
            return False
        if used < width:
            self.write(self.session.padding * (width - used))
        return True

    def print_data(
        self,
        column: Column,
        line: Line | None,
        cell: Cell | None,
        buf: CellBuffer,
        row: RowContext,
    ) -> None:
        color = self.cell_color(column, line, cell)
        data, length = buf.safe_data(self.table.no_encode, column.safechars)
        width = column.width
        is_last = self.session.is_last_column(column)
        truncates = self._truncates(column)

        split = column.next_chunk(data) if data else None
        if split is not None:
            data, rest = split
            row.set_pending(column, rest)
            length = display_width(data)

        # Shrink before the fill decision; the order matters for short last cells.
        if is_last and length < width and not self.table.maxout and not column.is_right:
            width = length

        try:
            if length > width and truncates:
                data, length = truncate_to_width(data, width)
            if length > width and column.is_wrap and not column.is_customwrap:
                if width <= 0:
                    raise FormatError(f"column {column.name!r} has no width for wrapped data")
                row.set_pending(column, data)
                full = data
                data, length = truncate_to_width(full, width)
                if not data:
                    # A glyph wider than the column still has to go somewhere.
                    data = full[:1]
                    length = min(display_width(data), width)
                row.step_pending(column, len(data))
        except EncodingError as exc:
            logger.debug("column %s: %s, printing empty cell", column.name, exc)
            row.set_pending(column, None)
            data, length = "", 0

        if data:
            if column.is_right:
                self.write(color)
                if length < width:
                    self.write(self.session.padding * (width - length))
                self.write(data)
                if color:
                    self.write(COLOR_RESET)
                length = width
            elif color:
                art = buf.art_size
                if column.is_tree and art and art < len(data):
                    self.write(data[:art])
                    data = data[art:]
                self.write(color + data + COLOR_RESET)
            else:
                self.write(data)

        if not self._fill(column, line, length, width, is_last):
            return

        if length > width and not truncates:
            logger.debug("column %s: data width %d > column width %d", column.name, length, width)
            self.print_newline_padding(column, line, row)
        elif not is_last:
            self.write(self.table.colsep)

    def print_continuation(self, column: Column, line: Line, row: RowContext) -> None:
        if row.pending(column):
            self.print_pending_data(column, line, row)
        else:
            self.print_empty_cell(column, line, row)

    def print_pending_data(self, column: Column, line: Line, row: RowContext) -> None:
        """Print the next piece of ``column``'s pending text and advance the cursor."""
        cursor = row.pending(column)
        text = cursor.text
        if not text:
            return
        width = column.width
        if not width:
            raise FormatError(f"column {column.name!r} has no width for pending data")

        split = column.next_chunk(text)
        if split is not None:
            data = split[0]
            consumed = len(text) - len(split[1])
            length = display_width(data)
        else:
            try:
                data, length = truncate_to_width(text, width)
            except EncodingError as exc:
                logger.debug("column %s: %s, dropping pending data", column.name, exc)
                data, length = "", 0
                consumed = len(text)
            else:
                if not data:
                    data = text[:1]
                    length = min(display_width(data), width)
                consumed = len(data)
        row.step_pending(column, consumed)

        if data:
            color = self.cell_color(column, line, line.cell(column.seqnum))
            self.write(color + data + COLOR_RESET if color else data)

        is_last = self.session.is_last_column(column)
        if self._fill(column, line, length, width, is_last) and not is_last:
            self.write(self.table.colsep)

    def print_empty_cell(self, column: Column, line: Line | None, row: RowContext) -> None:
        """Print padding, or tree art for tree columns, in place of data."""
        used = 0
        if line is not None and column.is_tree:
            art = continuation_art(line, self.session.symbols, row.has_pending(self.session.visible))
            if art:
                if not self.table.no_encode:
                    art = safe_encode(art)
                self.write(art)
                used = display_width(art)

        is_last = self.session.is_last_column(column)
        if self._fill(column, line, used, column.width, is_last) and not is_last:
            self.write(self.table.colsep)

    def print_newline_padding(self, column: Column, line: Line | None, row: RowContext) -> None:
        """Start a new output line and pad it up to and including ``column``.

        Used after an over-long, non-truncated cell so the next column starts
        on the next line under its own position.
        """
        self.write(self.table.linesep)
        self.session.termlines_used += 1
        for cl in self.session.visible:
            self.print_empty_cell(cl, line, row)
            if cl is column:
                break


_RENDERERS: dict[OutputFormat, type[CellRenderer]] = {
    OutputFormat.HUMAN: HumanRenderer,
    OutputFormat.RAW: RawRenderer,
    OutputFormat.EXPORT: ExportRenderer,
    OutputFormat.JSON: JsonRenderer,
}


def renderer_for(session: PrintSession) -> CellRenderer:
    """Return the cell renderer matching the session table's output format."""
    return _RENDERERS[session.table.format](session)
