"""Decoration symbol sets for tree and group charts.

Symbols are plain strings; a table either carries its own set or gets one of
the defaults below for the duration of a print session.
"""

from __future__ import annotations

from dataclasses import dataclass

# Box-drawing code points.
UTF_V = "│"
UTF_VR = "├"
UTF_H = "─"
UTF_UR = "└"
UTF_V3 = "┆"
UTF_H3 = "┄"
UTF_DR = "┌"
UTF_DH = "┬"
UTF_TR = "▶"


@dataclass(frozen=True)
class Symbols:
    """Glyphs used by tree art, group charts, cell padding, and titles."""

    name: str
    tree_branch: str
    tree_vert: str
    tree_right: str
    group_vert: str
    group_horz: str
    group_first_member: str
    group_last_member: str
    group_middle_member: str
    group_last_child: str
    group_middle_child: str
    title_padding: str = " "
    cell_padding: str = " "


ASCII_SYMBOLS = Symbols(
    name="ascii",
    tree_branch="|-",
    tree_vert="| ",
    tree_right="`-",
    group_vert="|",
    group_horz="-",
    group_first_member=",->",
    group_last_member="\\->",
    group_middle_member="|->",
    group_last_child="`-",
    group_middle_child="|-",
)

UTF8_SYMBOLS = Symbols(
    name="utf8",
    tree_branch=UTF_VR + UTF_H,
    tree_vert=UTF_V + " ",
    tree_right=UTF_UR + UTF_H,
    group_vert=UTF_V3,
    group_horz=UTF_H3,
    group_first_member=UTF_DR + UTF_H3 + UTF_TR,
    group_last_member=UTF_UR + UTF_DH + UTF_TR,
    group_middle_member=UTF_VR + UTF_H3 + UTF_TR,
    group_last_child=UTF_UR + UTF_H3,
    group_middle_child=UTF_VR + UTF_H3,
)


def default_symbols(encoding: str | None, ascii_only: bool = False) -> Symbols:
    """Pick box-drawing glyphs when the output encoding can carry them."""
    if ascii_only or not encoding:
        return ASCII_SYMBOLS
    normalized = encoding.lower().replace("-", "").replace("_", "")
    return UTF8_SYMBOLS if normalized == "utf8" else ASCII_SYMBOLS
