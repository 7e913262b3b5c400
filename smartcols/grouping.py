"""Group lane bookkeeping for the group chart.

Each active group owns one chunk of ``GRPSET_CHUNKSIZ`` slots in the lane
array while its members or children are still being printed. ``update()`` is
called once per printed line, before the line's cells are built, and sets
every active group's ``state`` for that line.
"""

from __future__ import annotations

import logging

from .art import GRPSET_CHUNKSIZ
from .model import Group, GroupState, Line, Table
from .walk import walk_order

logger = logging.getLogger(__name__)


class GroupLanes:
    def __init__(self, size: int = 0) -> None:
        self.grpset: list[Group | None] = [None] * size
        self._members_seen: dict[int, int] = {}
        self._children_seen: dict[int, int] = {}

    @property
    def size(self) -> int:
        return len(self.grpset)

    def _active(self) -> list[Group]:
        return [
            gr
            for gr in (self.grpset[i] for i in range(0, len(self.grpset), GRPSET_CHUNKSIZ))
            if gr is not None
        ]

    def _allocate(self, group: Group) -> None:
        for i in range(0, len(self.grpset), GRPSET_CHUNKSIZ):
            if self.grpset[i] is None:
                break
        else:
            i = len(self.grpset)
            self.grpset.extend([None] * GRPSET_CHUNKSIZ)
        self.grpset[i:i + GRPSET_CHUNKSIZ] = [group] * GRPSET_CHUNKSIZ
        logger.debug("group allocated lanes %d-%d", i, i + GRPSET_CHUNKSIZ - 1)

    def _release(self, group: Group) -> None:
        self.grpset = [None if gr is group else gr for gr in self.grpset]
        self._members_seen.pop(id(group), None)
        self._children_seen.pop(id(group), None)

    def _next_state(self, group: Group, line: Line) -> GroupState:
        members = self._members_seen.get(id(group), 0)
        children = self._children_seen.get(id(group), 0)

        if line.group is group:
            members += 1
            self._members_seen[id(group)] = members
            if members == len(group.members) and (members > 1 or group.children):
                return GroupState.LAST_MEMBER
            if members == 1:
                return GroupState.FIRST_MEMBER
            return GroupState.MIDDLE_MEMBER

        if line.parent_group is group:
            children += 1
            self._children_seen[id(group)] = children
            if children == len(group.children):
                return GroupState.LAST_CHILD
            return GroupState.MIDDLE_CHILD

        if members < len(group.members):
            return GroupState.CONT_MEMBERS
        if children < len(group.children):
            return GroupState.CONT_CHILDREN
        return GroupState.NONE

    def update(self, line: Line) -> None:
        for group in self._active():
            group.state = self._next_state(group, line)
            if group.state is GroupState.NONE:
                self._release(group)

        group = line.group
        if group is not None and group not in self._active():
            self._allocate(group)
            group.state = self._next_state(group, line)

    def reset(self) -> None:
        for group in self._active():
            group.state = GroupState.NONE
        self.grpset = [None] * len(self.grpset)
        self._members_seen.clear()
        self._children_seen.clear()


def fix_members_order(table: Table) -> None:
    """Reorder group members and group children to match the tree print order."""
    position = {id(ln): idx for idx, ln in enumerate(walk_order(table))}
    for group in table.groups:
        group.members.sort(key=lambda ln: position.get(id(ln), len(position)))
        group.children.sort(key=lambda ln: position.get(id(ln), len(position)))


def lanes_size(table: Table, order: list[Line]) -> int:
    """Dry-run the lane state machine over ``order`` and return the widest chart."""
    if not table.has_groups:
        return 0
    lanes = GroupLanes()
    widest = 0
    for line in order:
        lanes.update(line)
        widest = max(widest, lanes.size)
    lanes.reset()
    for group in table.groups:
        group.state = GroupState.NONE
    return widest
