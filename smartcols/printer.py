"""Print session lifecycle and the line/range/tree walkers.

A session owns everything one render pass shares: the scratch buffer, the
group lanes, the JSON writer, the output line counter, and the renderer
chosen for ``table.format``. Sessions are single use and one table can have
only one at a time.
"""

from __future__ import annotations

import io
import logging
import sys
import weakref
from typing import TextIO

from .ansi import ALIGN_LEFT, align_text, display_width, is_malformed, safe_encode
from .art import branch_art, group_art
from .buffer import CellBuffer
from .calculate import calculate
from .colors import COLOR_RESET
from .errors import SessionError
from .grouping import GroupLanes, fix_members_order, lanes_size
from .jsonwrt import JsonWriter
from .model import CellAlign, Column, Line, OutputFormat, Table, TermForce
from .pending import RowContext
from .renderers import CellRenderer, renderer_for
from .symbols import ASCII_SYMBOLS, Symbols, default_symbols
from .terminal import is_terminal, terminal_size
from .walk import walk_order

logger = logging.getLogger(__name__)

# Buffer size used when the output is not a terminal.
FALLBACK_BUFSIZ = 8192
# Title width used when the output is not a terminal.
TITLE_FALLBACK_WIDTH = 80

_active_tables: weakref.WeakSet[Table] = weakref.WeakSet()


class PrintSession:
    """State of one render pass over ``table``; create with :func:`initialize_session`."""

    def __init__(self, table: Table) -> None:
        self.table = table
        self.out: TextIO = table.out if table.out is not None else sys.stdout
        self.symbols: Symbols = table.symbols or ASCII_SYMBOLS
        self.priv_symbols = False
        self.is_term = False
        self.termwidth = 0
        self.termheight = 0
        self.header_repeat = False
        self.header_printed = False
        self.header_next = 0
        self.termlines_used = 0
        self.visible: list[Column] = table.visible_columns()
        self.buffer: CellBuffer | None = None
        self.lanes = GroupLanes()
        self.json: JsonWriter | None = None
        self.renderer: CellRenderer | None = None
        self._order: list[Line] | None = None

    def __enter__(self) -> PrintSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        cleanup_session(self)

    @property
    def padding(self) -> str:
        return "." if self.table.padding_debug else self.symbols.cell_padding

    def write(self, text: str) -> None:
        if text:
            self.out.write(text)

    def encode(self, text: str | None, safechars: str = "") -> str:
        if not text:
            return ""
        return text if self.table.no_encode else safe_encode(text, safechars)

    def is_last_column(self, column: Column) -> bool:
        return bool(self.visible) and self.visible[-1] is column

    def is_next_columns_empty(self, column: Column, line: Line | None) -> bool:
        """Return whether nothing but padding would follow ``column`` on ``line``."""
        if self.is_last_column(column):
            return True
        if line is None:
            return False
        following = self.visible[self.visible.index(column) + 1:]
        for cl in following:
            if cl.is_tree or line.data(cl.seqnum):
                return False
        return True

    def print_order(self) -> list[Line]:
        """Lines in the order the walkers will print them."""
        if not self.table.is_tree:
            return list(self.table.lines)
        if self._order is None:
            self._order = walk_order(self.table, group_children=not self.table.is_json)
        return self._order

    def _uses_lanes(self) -> bool:
        return self.table.has_groups and not self.table.is_json

    def prepare_line(self, line: Line) -> None:
        if self._uses_lanes():
            self.lanes.update(line)

    def reset_lanes(self) -> None:
        self.lanes.reset()

    def header_text(self, column: Column) -> str:
        if column.is_groups and column.is_tree and self.table.is_tree:
            return " " * (self.lanes.size + 1) + column.name
        return column.name

    def cell_to_buffer(self, line: Line, column: Column, buf: CellBuffer) -> None:
        """Load ``buf`` with the cell's art and data."""
        buf.reset()
        data = line.data(column.seqnum)
        if not column.is_tree:
            buf.append(data)
            return

        decorated = not self.table.is_json
        if decorated and column.is_groups and self.table.has_groups:
            buf.append(group_art(self.lanes.grpset, self.symbols, self.padding))
        if decorated and line.parent is not None:
            buf.append(branch_art(line, self.symbols))
        if decorated and (line.parent is not None or column.is_groups):
            buf.mark_art()
        buf.append(data)

    def print_line(self, line: Line) -> None:
        """Print one table line plus the extra lines its wrapped cells need."""
        buf = self.buffer
        renderer = self.renderer
        row = RowContext(self.visible)
        for cl in self.visible:
            self.cell_to_buffer(line, cl, buf)
            renderer.print_data(cl, line, line.cell(cl.seqnum), buf, row)

        while row.has_pending():
            logger.debug("printing pending data")
            self.write(self.table.linesep)
            self.termlines_used += 1
            for cl in self.visible:
                renderer.print_continuation(cl, line, row)

    def print_title(self) -> None:
        print_title(self.table, self.termwidth if self.is_term else None)

    def print_header(self) -> None:
        table = self.table
        if (
            (self.header_printed and not self.header_repeat)
            or table.no_headings
            or table.format in (OutputFormat.EXPORT, OutputFormat.JSON)
            or not table.lines
        ):
            return
        logger.debug("printing header")

        buf = self.buffer
        row = RowContext(self.visible)
        for cl in self.visible:
            buf.reset()
            buf.append(self.header_text(cl))
            self.renderer.print_data(cl, None, cl.header, buf, row)
        self.write(table.linesep)
        self.termlines_used += 1

        self.header_printed = True
        self.header_next = self.termlines_used + self.termheight
        if self.header_repeat:
            logger.debug("next header at line %d (current %d)", self.header_next, self.termlines_used)

    def _want_repeat_header(self) -> bool:
        if not self.header_printed:
            return False
        return not self.header_repeat or self.header_next <= self.termlines_used

    def print_range(self, start: Line | int | None = None, end: Line | None = None) -> None:
        """Print table lines from ``start`` (line or index) through ``end``."""
        table = self.table
        if not table.lines:
            return
        if isinstance(start, Line):
            start = table.lines.index(start)
        last_line = table.lines[-1]
        logger.debug("printing range")

        for line in table.lines[start or 0:]:
            last = line is last_line
            self.prepare_line(line)
            if self.json is not None:
                self.json.open_object()
            self.print_line(line)

            if self.json is not None:
                self.json.close_object(last or line is end)
            elif not last and not table.no_linesep:
                self.write(table.linesep)
                self.termlines_used += 1

            if end is not None and line is end:
                break
            if not last and self._want_repeat_header():
                self.print_header()

    def print_tree(self) -> None:
        """Print every line depth-first, parents before their children."""
        table = self.table
        order = self.print_order()
        if not order:
            return
        roots = [ln for ln in order if ln.parent is None]
        last_root = roots[-1] if roots else None
        logger.debug("printing tree")

        for line in order:
            self.prepare_line(line)
            if self.json is not None:
                self.json.open_object()
            self.print_line(line)

            if line.children:
                if self.json is not None:
                    self.json.open_array("children")
                else:
                    self.write(table.linesep)
                    self.termlines_used += 1
            elif self.json is not None:
                self._close_json_branch(line, last_root)
            elif not table.no_linesep and line is not order[-1]:
                self.write(table.linesep)
                self.termlines_used += 1

    def _close_json_branch(self, line: Line, last_root: Line | None) -> None:
        """Close the objects and ``children`` arrays that end with leaf ``line``."""
        node: Line | None = line
        while node is not None:
            if node.parent is not None:
                last = node.is_last_child
            else:
                last = node is last_root
            self.json.close_object(last)
            if not last:
                break
            if node.parent is not None:
                self.json.close_array(True)
            node = node.parent


def _buffer_size(session: PrintSession) -> int:
    """Size the scratch buffer for the longest line plus decoration overhead."""
    table = session.table
    size = session.termwidth if session.is_term else FALLBACK_BUFSIZ
    nlines = len(table.lines)

    extra = 0
    if table.is_tree:
        extra += nlines * len(session.symbols.tree_vert)
    if table.format is OutputFormat.RAW:
        extra += len(table.columns)
    elif table.format in (OutputFormat.JSON, OutputFormat.EXPORT):
        if table.format is OutputFormat.JSON:
            extra += nlines * 3
        extra += sum(len(cl.name) + 2 for cl in session.visible)

    for line in table.lines:
        size = max(size, line.text_length() + extra)
    return size + 1


def initialize_session(table: Table) -> PrintSession:
    """Prepare ``table`` for printing and return the session.

    Installs default symbols when the table has none, resolves terminal
    metrics, sizes the scratch buffer, fixes group order and, for human
    output, negotiates column widths.
    """
    if table in _active_tables:
        raise SessionError("table is already being printed")
    logger.debug("initialize printing")

    session = PrintSession(table)
    _active_tables.add(table)
    try:
        if table.symbols is None:
            encoding = getattr(session.out, "encoding", None) or "utf-8"
            table.symbols = default_symbols(encoding, table.ascii)
            session.priv_symbols = True
        session.symbols = table.symbols

        if table.format is OutputFormat.HUMAN:
            if table.termforce is TermForce.NEVER:
                session.is_term = False
            elif table.termforce is TermForce.ALWAYS:
                session.is_term = True
            else:
                session.is_term = is_terminal(session.out)

        if session.is_term:
            size = terminal_size(session.out)
            width = table.termwidth or size.columns
            if 0 < table.termreduce < width:
                width -= table.termreduce
            session.termwidth = width
            session.termheight = table.termheight or size.lines

        session.header_repeat = (
            table.header_repeat
            and session.is_term
            and table.format is OutputFormat.HUMAN
            and not table.is_tree
        )

        session.buffer = CellBuffer(_buffer_size(session))

        if table.has_groups and table.is_tree:
            fix_members_order(table)
        if session._uses_lanes():
            session.lanes = GroupLanes(lanes_size(table, session.print_order()))

        if table.format is OutputFormat.HUMAN:
            calculate(session)
        elif table.format is OutputFormat.JSON:
            session.json = JsonWriter(session.out)

        session.renderer = renderer_for(session)
    except BaseException:
        cleanup_session(session)
        raise
    return session


def cleanup_session(session: PrintSession | None) -> None:
    """Release the session's buffer and any symbols it installed."""
    if session is None:
        return
    session.buffer = None
    if session.priv_symbols:
        session.table.symbols = None
        session.priv_symbols = False
    session.reset_lanes()
    _active_tables.discard(session.table)


def print_title(table: Table, termwidth: int | None = None) -> None:
    """Print the table title aligned within ``termwidth`` (80 when unknown)."""
    title = table.title
    if not title.data:
        return
    text = title.data if table.no_encode else safe_encode(title.data)
    if table.no_encode and any(is_malformed(ch) for ch in text):
        logger.debug("title holds undecodable data -- ignore")
        return
    if not text:
        logger.debug("title is empty string -- ignore")
        return
    logger.debug("printing title")

    symbols = table.symbols or ASCII_SYMBOLS
    pad = symbols.title_padding
    width = termwidth or TITLE_FALLBACK_WIDTH
    align = title.alignment.value if isinstance(title.alignment, CellAlign) else ALIGN_LEFT
    length = display_width(text)
    if align == ALIGN_LEFT and length < width and not table.maxout and pad[:1].isspace():
        # No trailing blanks after a left title, as for the last column.
        width = length

    out = table.out if table.out is not None else sys.stdout
    line = align_text(text, width, align, pad)
    color = title.color if table.colors_wanted else None
    out.write(color + line + COLOR_RESET if color else line)
    out.write("\n")


def print_table(table: Table) -> None:
    """Print the title, header, and every line of ``table`` to ``table.out``."""
    with initialize_session(table) as session:
        if session.json is None:
            session.print_title()
        else:
            session.json.open_object()
            session.json.open_array(table.name or "")

        session.print_header()
        if table.is_tree:
            session.print_tree()
        else:
            session.print_range()

        if session.json is not None:
            session.json.close_array(True)
            session.json.close_object(True)
        elif table.lines:
            session.write("\n")


def table_to_string(table: Table) -> str:
    """Render ``table`` into a string instead of its output stream."""
    saved = table.out
    out = io.StringIO()
    table.out = out
    try:
        print_table(table)
        return out.getvalue()
    finally:
        table.out = saved
