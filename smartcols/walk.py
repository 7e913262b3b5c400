"""Tree traversal order for hierarchical tables.

Lines are visited depth-first, parents before children. Lines hanging off
a group are visited right after the subtree of the group's last member.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import chain

from .model import Group, Line, Table


def _roots(table: Table, group_children: bool) -> list[Line]:
    if group_children:
        return [ln for ln in table.lines if ln.is_tree_root]
    return [ln for ln in table.lines if ln.parent is None]


def iter_tree(table: Table, group_children: bool = True) -> Iterator[Line]:
    """Yield lines in print order without recursion.

    With ``group_children`` false, lines hanging off groups are treated as
    plain roots (JSON output nests by tree parent only).
    """
    visited_members: dict[int, int] = {}
    stack: list[Iterator[Line]] = [iter(_roots(table, group_children))]
    while stack:
        line = next(stack[-1], None)
        if line is None:
            stack.pop()
            continue
        yield line

        extra: list[Line] = []
        group: Group | None = line.group
        if group_children and group is not None:
            seen = visited_members.get(id(group), 0) + 1
            visited_members[id(group)] = seen
            if seen == len(group.members):
                extra = group.children
        if line.children or extra:
            stack.append(chain(line.children, extra))


def walk_order(table: Table, group_children: bool = True) -> list[Line]:
    return list(iter_tree(table, group_children))
