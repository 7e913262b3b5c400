from __future__ import annotations

import unittest

from smartcols.art import group_art
from smartcols.grouping import GroupLanes, fix_members_order, lanes_size
from smartcols.model import ColumnFlags, GroupState, Table
from smartcols.symbols import ASCII_SYMBOLS
from smartcols.walk import walk_order


def _grouped_table():
    table = Table()
    table.new_column("NAME", flags=ColumnFlags.TREE)
    first = table.new_line()
    second = table.new_line()
    child = table.new_line()
    group = table.new_group([first, second])
    group.add_child(child)
    return table, group, (first, second, child)


class WalkOrderTests(unittest.TestCase):
    def test_group_children_follow_last_member(self) -> None:
        table, _group, (first, second, child) = _grouped_table()
        self.assertEqual(walk_order(table), [first, second, child])

    def test_group_children_are_roots_when_not_chained(self) -> None:
        table = Table()
        table.new_column("NAME", flags=ColumnFlags.TREE)
        child = table.new_line()
        member = table.new_line()
        group = table.new_group([member])
        group.add_child(child)
        self.assertEqual(walk_order(table), [member, child])
        self.assertEqual(walk_order(table, group_children=False), [child, member])

    def test_deep_tree_does_not_recurse(self) -> None:
        table = Table()
        table.new_column("NAME", flags=ColumnFlags.TREE)
        node = table.new_line()
        for _ in range(5000):
            node = table.new_line(node)
        self.assertEqual(len(walk_order(table)), 5001)


class GroupLanesTests(unittest.TestCase):
    def test_state_sequence_and_chart(self) -> None:
        table, group, lines = _grouped_table()
        lanes = GroupLanes(lanes_size(table, walk_order(table)))
        states = []
        charts = []
        for line in lines:
            lanes.update(line)
            states.append(group.state)
            charts.append(group_art(lanes.grpset, ASCII_SYMBOLS, " "))

        self.assertEqual(
            states,
            [GroupState.FIRST_MEMBER, GroupState.LAST_MEMBER, GroupState.LAST_CHILD],
        )
        self.assertEqual(charts, [",-> ", "\\-> ", " `--"])

    def test_unrelated_line_between_members_continues_the_lane(self) -> None:
        table = Table()
        table.new_column("NAME", flags=ColumnFlags.TREE)
        first = table.new_line()
        other = table.new_line()
        last = table.new_line()
        group = table.new_group([first, last])

        lanes = GroupLanes()
        lanes.update(first)
        lanes.update(other)
        self.assertIs(group.state, GroupState.CONT_MEMBERS)
        self.assertEqual(group_art(lanes.grpset, ASCII_SYMBOLS, " "), "|   ")
        lanes.update(last)
        self.assertIs(group.state, GroupState.LAST_MEMBER)

    def test_finished_group_releases_its_lanes(self) -> None:
        table = Table()
        table.new_column("NAME", flags=ColumnFlags.TREE)
        a1, a2, b1, b2 = (table.new_line() for _ in range(4))
        table.new_group([a1, a2])
        second = table.new_group([b1, b2])

        lanes = GroupLanes()
        for line in (a1, a2, b1):
            lanes.update(line)
        self.assertEqual(lanes.size, 3)
        self.assertIs(lanes.grpset[0], second)

    def test_lanes_size_counts_overlapping_groups(self) -> None:
        table = Table()
        table.new_column("NAME", flags=ColumnFlags.TREE)
        a1, b1, a2, b2 = (table.new_line() for _ in range(4))
        table.new_group([a1, a2])
        table.new_group([b1, b2])
        self.assertEqual(lanes_size(table, walk_order(table)), 6)
        for group in table.groups:
            self.assertIs(group.state, GroupState.NONE)

    def test_reset_clears_states(self) -> None:
        table, group, (first, _second, _child) = _grouped_table()
        lanes = GroupLanes(3)
        lanes.update(first)
        lanes.reset()
        self.assertIs(group.state, GroupState.NONE)
        self.assertEqual(lanes.grpset, [None, None, None])


class FixMembersOrderTests(unittest.TestCase):
    def test_members_follow_print_order(self) -> None:
        table = Table()
        table.new_column("NAME", flags=ColumnFlags.TREE)
        first = table.new_line()
        second = table.new_line()
        group = table.new_group()
        group.add_member(second)
        group.add_member(first)

        fix_members_order(table)
        self.assertEqual(group.members, [first, second])


if __name__ == "__main__":
    unittest.main()
