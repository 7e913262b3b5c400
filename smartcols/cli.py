"""Command-line front door for smartcols.

Reads delimited text (files or stdin), builds a table from it, and prints it
as aligned columns, a tree, raw, ``NAME="value"`` export, or JSON.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import config
from .errors import SmartcolsError
from .model import CellAlign, Column, ColumnFlags, JsonType, Line, OutputFormat, Table, TermForce
from .printer import print_table

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _name_list(value: str) -> list[str]:
    """argparse type for comma-separated column names."""
    return [name.strip() for name in value.split(",") if name.strip()]


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def _split_row(text: str, separator: str | None, ncols: int | None) -> list[str]:
    """Split one input row; the last column keeps any surplus fields."""
    if ncols is None:
        return text.split(separator)
    fields = text.split(separator, ncols - 1) if ncols > 0 else []
    if separator is None and len(fields) == ncols:
        fields[-1] = fields[-1].strip()
    return fields


def _resolve(table: Table, names: list[str], option: str) -> list[Column]:
    by_name = {cl.name.lower(): cl for cl in table.columns}
    columns: list[Column] = []
    for name in names:
        column = by_name.get(name.lower())
        if column is None:
            if name.isdigit() and 0 < int(name) <= len(table.columns):
                column = table.columns[int(name) - 1]
            else:
                raise SmartcolsError(f"{option}: undefined column name {name!r}")
        columns.append(column)
    return columns


def _parse_json_types(table: Table, specs: list[str]) -> None:
    for spec in specs:
        name, sep, kind = spec.partition("=")
        if not sep:
            raise SmartcolsError(f"--json-type: expected NAME=TYPE, got {spec!r}")
        try:
            json_type = JsonType(kind.strip().lower())
        except ValueError as exc:
            raise SmartcolsError(f"--json-type: unknown type {kind!r}") from exc
        for column in _resolve(table, [name], "--json-type"):
            column.json_type = json_type


def _link_tree(table: Table, tree: str, tree_id: str, tree_parent: str) -> None:
    """Attach lines to their parents using id/parent columns."""
    (tree_column,) = _resolve(table, [tree], "--tree")
    (id_column,) = _resolve(table, [tree_id], "--tree-id")
    (parent_column,) = _resolve(table, [tree_parent], "--tree-parent")
    tree_column.flags |= ColumnFlags.TREE

    by_id: dict[str, Line] = {}
    for line in table.lines:
        key = line.data(id_column.seqnum)
        if key:
            by_id.setdefault(key, line)
    for line in table.lines:
        parent = by_id.get(line.data(parent_column.seqnum) or "")
        if parent is not None and parent is not line:
            parent.add_child(line)


def build_table(text: str, args: argparse.Namespace) -> Table:
    """Build a table from delimited ``text`` according to parsed CLI options."""
    table = Table()
    rows = [row for row in text.splitlines() if row.strip()]
    names = args.table_columns
    if names is None:
        if not rows:
            return table
        names = _split_row(rows.pop(0), args.separator, None)
    for name in names:
        table.new_column(name)

    for row in rows:
        line = table.new_line()
        for seqnum, value in enumerate(_split_row(row, args.separator, len(names))):
            line.set_data(seqnum, value)

    for column in _resolve(table, args.table_truncate, "--table-truncate"):
        column.flags |= ColumnFlags.TRUNC
    for column in _resolve(table, args.table_wrap, "--table-wrap"):
        column.flags |= ColumnFlags.WRAP
    for column in _resolve(table, args.table_right, "--table-right"):
        column.flags |= ColumnFlags.RIGHT
    for column in _resolve(table, args.table_hide, "--table-hide"):
        column.flags |= ColumnFlags.HIDDEN
    _parse_json_types(table, args.json_type)
    for spec in args.column_color:
        name, _sep, color = spec.partition("=")
        for column in _resolve(table, [name], "--column-color"):
            column.set_color(color)

    if args.tree:
        if not (args.tree_id and args.tree_parent):
            raise SmartcolsError("--tree requires --tree-id and --tree-parent")
        _link_tree(table, args.tree, args.tree_id, args.tree_parent)
    return table


def _configure(table: Table, args: argparse.Namespace) -> None:
    if args.json:
        table.format = OutputFormat.JSON
    elif args.raw:
        table.format = OutputFormat.RAW
    elif args.export:
        table.format = OutputFormat.EXPORT
    table.name = args.table_name
    table.colsep = args.output_separator if args.output_separator is not None else config.load_column_separator()
    table.maxout = args.maxout
    table.minout = args.minout
    table.no_headings = args.table_noheadings
    table.ascii = args.ascii or config.load_ascii()
    table.termreduce = config.load_term_reduce()
    if args.output_width is not None:
        table.termforce = TermForce.ALWAYS
        table.termwidth = args.output_width

    color_mode = args.color or config.load_color_mode()
    if color_mode == "always":
        table.colors_wanted = True
    elif color_mode == "auto":
        table.colors_wanted = sys.stdout.isatty() and "NO_COLOR" not in os.environ

    if args.title:
        table.set_title(args.title, alignment=CellAlign(args.title_position))


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartcols",
        description="Format delimited input as a table, tree, raw, export, or JSON output.",
    )
    parser.add_argument("files", nargs="*", type=Path, help="Input files. Defaults to stdin.")
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("-J", "--json", action="store_true", help="Use JSON output format.")
    fmt.add_argument("-r", "--raw", action="store_true", help="Use raw output format.")
    fmt.add_argument("-E", "--export", action="store_true", help='Use NAME="value" output format.')
    parser.add_argument("-N", "--table-columns", type=_name_list, default=None, help="Comma-separated column names. Defaults to the first input line.")
    parser.add_argument("-s", "--separator", default=None, help="Input field separator. Defaults to whitespace.")
    parser.add_argument("-o", "--output-separator", default=None, help="Output column separator.")
    parser.add_argument("-n", "--table-name", default=None, help="Table name used as the JSON root key.")
    parser.add_argument("-T", "--table-truncate", type=_name_list, default=[], help="Columns to truncate when necessary.")
    parser.add_argument("-W", "--table-wrap", type=_name_list, default=[], help="Columns to wrap onto extra lines.")
    parser.add_argument("-R", "--table-right", type=_name_list, default=[], help="Columns to right-align.")
    parser.add_argument("-H", "--table-hide", type=_name_list, default=[], help="Columns not to print.")
    parser.add_argument("-d", "--table-noheadings", action="store_true", help="Do not print the header.")
    parser.add_argument("--json-type", action="append", default=[], metavar="NAME=TYPE", help="JSON type of a column (string, number, boolean, array-string, array-number).")
    parser.add_argument("--column-color", action="append", default=[], metavar="NAME=COLOR", help="Color of a column.")
    parser.add_argument("--tree", metavar="NAME", help="Column to draw the tree in.")
    parser.add_argument("--tree-id", metavar="NAME", help="Column holding the line id.")
    parser.add_argument("--tree-parent", metavar="NAME", help="Column holding the parent line id.")
    parser.add_argument("--title", default=None, help="Table title.")
    parser.add_argument("--title-position", choices=[a.value for a in CellAlign], default=CellAlign.LEFT.value)
    parser.add_argument("--maxout", action="store_true", help="Fill all available terminal width.")
    parser.add_argument("--minout", action="store_true", help="Do not pad trailing empty columns.")
    parser.add_argument("-c", "--output-width", type=_positive_int, default=None, help="Output width; treats output as a terminal.")
    parser.add_argument("--color", choices=config.COLOR_MODES, default=None, help="When to colorize output.")
    parser.add_argument("--save-color", choices=config.COLOR_MODES, default=None, help="Persist the default color mode and exit.")
    parser.add_argument("--ascii", action="store_true", help="Use ASCII characters for tree art.")
    parser.add_argument("--debug", action="store_true", help="Log rendering decisions to stderr.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, build the table, and print it to stdout."""
    args = _parser().parse_args(argv)
    if args.debug or os.environ.get("SMARTCOLS_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.save_color is not None:
        config.save_color_mode(args.save_color)
        return

    try:
        if args.files:
            missing = [path for path in args.files if not path.exists()]
            if missing:
                raise SystemExit(f"Path not found: {missing[0]}")
            text = "".join(read_text(path) for path in args.files)
        else:
            text = sys.stdin.read()

        table = build_table(text, args)
        _configure(table, args)
        table.out = sys.stdout
        print_table(table)
    except SmartcolsError as exc:
        logger.debug("render failed", exc_info=True)
        print(f"smartcols: {exc}", file=sys.stderr)
        raise SystemExit(exc.exit_code) from exc
