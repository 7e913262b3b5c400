"""Table model: columns, lines, cells, and groups.

The model only records data and configuration. Everything that depends on a
render pass (final widths, pending data, group states) is filled in by
``printer`` and its collaborators.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TextIO

from .ansi import ALIGN_CENTER, ALIGN_LEFT, ALIGN_RIGHT
from .colors import color_sequence
from .errors import FormatError
from .symbols import Symbols


class OutputFormat(enum.Enum):
    HUMAN = "human"
    RAW = "raw"
    EXPORT = "export"
    JSON = "json"


class TermForce(enum.Enum):
    AUTO = "auto"
    NEVER = "never"
    ALWAYS = "always"


class JsonType(enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY_STRING = "array-string"
    ARRAY_NUMBER = "array-number"


class CellAlign(enum.Enum):
    LEFT = ALIGN_LEFT
    CENTER = ALIGN_CENTER
    RIGHT = ALIGN_RIGHT


class ColumnFlags(enum.IntFlag):
    NONE = 0
    TRUNC = enum.auto()
    TREE = enum.auto()
    RIGHT = enum.auto()
    STRICT_WIDTH = enum.auto()
    NOEXTREMES = enum.auto()
    HIDDEN = enum.auto()
    WRAP = enum.auto()


class GroupState(enum.Enum):
    """Position of the line being printed relative to one group."""

    NONE = "none"
    FIRST_MEMBER = "first-member"
    MIDDLE_MEMBER = "middle-member"
    LAST_MEMBER = "last-member"
    CONT_MEMBERS = "cont-members"
    MIDDLE_CHILD = "middle-child"
    LAST_CHILD = "last-child"
    CONT_CHILDREN = "cont-children"


def _to_text(value: object) -> str | None:
    """Normalize cell input; undecodable bytes survive as lone surrogates."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="surrogateescape")
    return str(value)


@dataclass(eq=False)
class Cell:
    data: str | None = None
    color: str | None = None
    alignment: CellAlign = CellAlign.LEFT

    def set_data(self, value: object) -> None:
        self.data = _to_text(value)

    def set_color(self, name: str | None) -> None:
        self.color = color_sequence(name)


# A chunker returns ``(chunk, rest)`` or ``None`` when ``text`` is the last chunk.
WrapFunc = Callable[["Column", str], "tuple[str, str] | None"]


def wrapnl_nextchunk(column: Column, text: str) -> tuple[str, str] | None:
    """Chunk cell text at newlines (multi-line cells, one line per chunk)."""
    idx = text.find("\n")
    if idx < 0:
        return None
    return text[:idx], text[idx + 1:]


def wrapzero_nextchunk(column: Column, text: str) -> tuple[str, str] | None:
    """Chunk cell text at NUL characters."""
    idx = text.find("\0")
    if idx < 0:
        return None
    return text[:idx], text[idx + 1:]


@dataclass(eq=False)
class Column:
    """One table column plus its render-time width.

    ``width`` is the final display width in terminal cells; it is assigned by
    width negotiation for human output and read-only afterwards.
    """

    header: Cell = field(default_factory=Cell)
    seqnum: int = 0
    width_hint: float = 0
    flags: ColumnFlags = ColumnFlags.NONE
    json_type: JsonType = JsonType.STRING
    color: str | None = None
    safechars: str = ""
    wrap_nextchunk: WrapFunc | None = None
    is_groups: bool = False
    width: int = 0

    @property
    def name(self) -> str:
        return self.header.data or ""

    @property
    def is_tree(self) -> bool:
        return bool(self.flags & ColumnFlags.TREE)

    @property
    def is_right(self) -> bool:
        return bool(self.flags & ColumnFlags.RIGHT)

    @property
    def is_trunc(self) -> bool:
        return bool(self.flags & ColumnFlags.TRUNC)

    @property
    def is_wrap(self) -> bool:
        return bool(self.flags & ColumnFlags.WRAP)

    @property
    def is_hidden(self) -> bool:
        return bool(self.flags & ColumnFlags.HIDDEN)

    @property
    def is_strict_width(self) -> bool:
        return bool(self.flags & ColumnFlags.STRICT_WIDTH)

    @property
    def is_noextremes(self) -> bool:
        return bool(self.flags & ColumnFlags.NOEXTREMES)

    @property
    def is_customwrap(self) -> bool:
        return self.is_wrap and self.wrap_nextchunk is not None

    def set_color(self, name: str | None) -> None:
        self.color = color_sequence(name)

    def set_wrapfunc(self, func: WrapFunc | None, safechars: str | None = None) -> None:
        """Install a chunker; implies the WRAP flag."""
        self.wrap_nextchunk = func
        if func is not None:
            self.flags |= ColumnFlags.WRAP
        if safechars is not None:
            self.safechars = safechars

    def next_chunk(self, text: str) -> tuple[str, str] | None:
        if not self.is_customwrap or not text:
            return None
        return self.wrap_nextchunk(self, text)

    def iter_chunks(self, text: str) -> Iterator[str]:
        """Yield every chunk of ``text``; a column without a chunker yields it whole."""
        while True:
            split = self.next_chunk(text)
            if split is None:
                yield text
                return
            chunk, text = split
            yield chunk


@dataclass(eq=False)
class Line:
    """One table row. ``parent`` is a relation only; the table owns every line."""

    cells: list[Cell | None] = field(default_factory=list)
    parent: Line | None = None
    children: list[Line] = field(default_factory=list)
    color: str | None = None
    group: Group | None = None
    parent_group: Group | None = None

    def cell(self, seqnum: int) -> Cell | None:
        if 0 <= seqnum < len(self.cells):
            return self.cells[seqnum]
        return None

    def data(self, seqnum: int) -> str | None:
        ce = self.cell(seqnum)
        return ce.data if ce is not None else None

    def set_data(self, column: Column | int, value: object) -> Cell:
        seqnum = column.seqnum if isinstance(column, Column) else column
        if seqnum < 0 or seqnum >= len(self.cells):
            raise FormatError(f"no column #{seqnum}")
        ce = self.cells[seqnum]
        if ce is None:
            ce = self.cells[seqnum] = Cell()
        ce.set_data(value)
        return ce

    def set_color(self, name: str | None) -> None:
        self.color = color_sequence(name)

    def add_child(self, child: Line) -> None:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_tree_root(self) -> bool:
        return self.parent is None and self.parent_group is None

    @property
    def is_last_child(self) -> bool:
        if self.parent is not None:
            return self.parent.children[-1] is self
        if self.parent_group is not None:
            return self.parent_group.children[-1] is self
        return False

    def text_length(self) -> int:
        return sum(len(ce.data) for ce in self.cells if ce is not None and ce.data)


@dataclass(eq=False)
class Group:
    """Lines printed together, optionally with child lines hanging off the group."""

    members: list[Line] = field(default_factory=list)
    children: list[Line] = field(default_factory=list)
    state: GroupState = GroupState.NONE

    def add_member(self, line: Line) -> None:
        if line.group is not None and line.group is not self:
            raise FormatError("line is already a member of another group")
        if line.group is None:
            line.group = self
            self.members.append(line)

    def add_child(self, line: Line) -> None:
        if line.parent is not None:
            raise FormatError("a group child cannot have a tree parent")
        line.parent_group = self
        self.children.append(line)


@dataclass(eq=False)
class Table:
    """Columns, lines, groups, and the configuration of one print pass."""

    columns: list[Column] = field(default_factory=list)
    lines: list[Line] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    format: OutputFormat = OutputFormat.HUMAN
    colors_wanted: bool = False
    no_wrap: bool = False
    maxout: bool = False
    minout: bool = False
    no_headings: bool = False
    no_encode: bool = False
    no_linesep: bool = False
    ascii: bool = False
    padding_debug: bool = False
    header_repeat: bool = False
    termforce: TermForce = TermForce.AUTO
    termwidth: int = 0
    termheight: int = 0
    termreduce: int = 0
    colsep: str = " "
    linesep: str = "\n"
    symbols: Symbols | None = None
    title: Cell = field(default_factory=Cell)
    name: str | None = None
    out: TextIO | None = None

    def new_column(
        self,
        name: str,
        width_hint: float = 0,
        flags: ColumnFlags = ColumnFlags.NONE,
        json_type: JsonType = JsonType.STRING,
    ) -> Column:
        if self.lines:
            raise FormatError("cannot add columns to a table that already has lines")
        column = Column(
            header=Cell(data=name),
            seqnum=len(self.columns),
            width_hint=width_hint,
            flags=flags,
            json_type=json_type,
        )
        self.columns.append(column)
        return column

    def new_line(self, parent: Line | None = None) -> Line:
        line = Line(cells=[None] * len(self.columns))
        if parent is not None:
            parent.add_child(line)
        self.lines.append(line)
        return line

    def new_group(self, members: list[Line] | None = None) -> Group:
        group = Group()
        for line in members or ():
            group.add_member(line)
        self.groups.append(group)
        return group

    def set_title(
        self,
        text: str | None,
        color: str | None = None,
        alignment: CellAlign = CellAlign.LEFT,
    ) -> None:
        self.title = Cell(data=_to_text(text), color=color_sequence(color), alignment=alignment)

    def visible_columns(self) -> list[Column]:
        return [cl for cl in self.columns if not cl.is_hidden]

    @property
    def is_tree(self) -> bool:
        return any(cl.is_tree for cl in self.columns)

    @property
    def has_groups(self) -> bool:
        return bool(self.groups)

    @property
    def is_json(self) -> bool:
        return self.format is OutputFormat.JSON
