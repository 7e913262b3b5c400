"""Tree and group decoration ("art") prepended to tree-column cells."""

from __future__ import annotations

import logging

from .model import Group, GroupState, Line
from .symbols import Symbols

logger = logging.getLogger(__name__)

# Lane slots per group in the chart.
GRPSET_CHUNKSIZ = 3

# state -> (lead, glyph, trail); "f" is the running filler, "p" the cell padding.
_GROUP_CHART: dict[GroupState, tuple[str, str, str]] = {
    GroupState.FIRST_MEMBER: ("", "group_first_member", ""),
    GroupState.MIDDLE_MEMBER: ("", "group_middle_member", ""),
    GroupState.LAST_MEMBER: ("", "group_last_member", ""),
    GroupState.CONT_MEMBERS: ("", "group_vert", "ff"),
    GroupState.MIDDLE_CHILD: ("f", "group_middle_child", ""),
    GroupState.LAST_CHILD: ("p", "group_last_child", ""),
    GroupState.CONT_CHILDREN: ("f", "group_vert", "f"),
}
_CHILD_STATES = frozenset({GroupState.MIDDLE_CHILD, GroupState.LAST_CHILD})


def tree_art(line: Line, symbols: Symbols) -> str:
    """Return the vertical-bar decoration of ``line`` and its ancestors.

    Ancestors come first. Every line in the chain that has a parent adds one
    glyph: blanks when it is the last child, a vertical bar otherwise. Roots
    add nothing.
    """
    glyphs: list[str] = []
    node: Line | None = line
    while node is not None and node.parent is not None:
        glyphs.append("  " if node.is_last_child else symbols.tree_vert)
        node = node.parent
    glyphs.reverse()
    return "".join(glyphs)


def branch_art(line: Line, symbols: Symbols) -> str:
    """Return the full tree prefix of a child line, ending in a branch or corner."""
    if line.parent is None:
        return ""
    corner = symbols.tree_right if line.is_last_child else symbols.tree_branch
    return tree_art(line.parent, symbols) + corner


def continuation_art(line: Line, symbols: Symbols, pending: bool) -> str:
    """Tree art for an empty tree cell on an extra output line of ``line``.

    The vertical bar below ``line`` is drawn only when children follow it.
    """
    if line.parent is None:
        return symbols.tree_vert if line.children else ""
    art = tree_art(line, symbols)
    if line.children and pending:
        art += symbols.tree_vert
    return art


def _lanes_empty_after(grpset: list[Group | None], idx: int) -> int | None:
    """Count free slots from ``idx`` on, or ``None`` if a group still follows."""
    rest = grpset[idx:]
    if any(gr is not None for gr in rest):
        return None
    return len(rest)


def group_art(grpset: list[Group | None], symbols: Symbols, padding: str) -> str:
    """Render the group chart for the current line from the lane array.

    Free chunks left of the rightmost group are padding runs. A child
    connector with no group to its right is extended with horizontal glyphs
    to the edge of the chart, which ends the chart.
    """
    out: list[str] = []
    filler = padding
    filled = False
    occupied = [i for i in range(0, len(grpset), GRPSET_CHUNKSIZ) if grpset[i] is not None]
    last_used = occupied[-1] if occupied else -1

    for i in range(0, len(grpset), GRPSET_CHUNKSIZ):
        gr = grpset[i]
        if gr is None or gr.state not in _GROUP_CHART:
            if i < last_used:
                out.append(padding * GRPSET_CHUNKSIZ)
            continue

        lead, glyph, trail = _GROUP_CHART[gr.state]
        fills = {"f": filler, "p": padding}
        out.extend(fills[c] for c in lead)
        out.append(getattr(symbols, glyph))
        out.extend(fills[c] for c in trail)

        if gr.state in _CHILD_STATES:
            rest = _lanes_empty_after(grpset, i + GRPSET_CHUNKSIZ)
            if rest is not None:
                out.append(symbols.group_horz * (rest + 1))
                filled = True
            filler = symbols.group_horz
        if filled:
            break

    if not filled:
        out.append(filler)
    chart = "".join(out)
    logger.debug("group chart %r", chart)
    return chart
