"""Public package surface for smartcols.

Table model, print session API, and whole-table helpers. Most
implementation lives in submodules under ``smartcols``.
"""

from __future__ import annotations

import logging

from .errors import EncodingError, FormatError, SessionError, SmartcolsError
from .model import (
    Cell,
    CellAlign,
    Column,
    ColumnFlags,
    Group,
    GroupState,
    JsonType,
    Line,
    OutputFormat,
    Table,
    TermForce,
    wrapnl_nextchunk,
    wrapzero_nextchunk,
)
from .printer import (
    PrintSession,
    cleanup_session,
    initialize_session,
    print_table,
    print_title,
    table_to_string,
)
from .symbols import ASCII_SYMBOLS, UTF8_SYMBOLS, Symbols

logging.getLogger(__name__).addHandler(logging.NullHandler())


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "ASCII_SYMBOLS",
    "UTF8_SYMBOLS",
    "Cell",
    "CellAlign",
    "Column",
    "ColumnFlags",
    "EncodingError",
    "FormatError",
    "Group",
    "GroupState",
    "JsonType",
    "Line",
    "OutputFormat",
    "PrintSession",
    "SessionError",
    "SmartcolsError",
    "Symbols",
    "Table",
    "TermForce",
    "cleanup_session",
    "initialize_session",
    "main",
    "print_table",
    "print_title",
    "table_to_string",
    "wrapnl_nextchunk",
    "wrapzero_nextchunk",
]
