from __future__ import annotations

import unittest

from smartcols.errors import FormatError
from smartcols.model import ColumnFlags, Table, wrapnl_nextchunk, wrapzero_nextchunk


class TableModelTests(unittest.TestCase):
    def test_columns_are_numbered_in_order(self) -> None:
        table = Table()
        names = [table.new_column(name).seqnum for name in ("A", "B", "C")]
        self.assertEqual(names, [0, 1, 2])

    def test_columns_cannot_be_added_after_lines(self) -> None:
        table = Table()
        table.new_column("A")
        table.new_line()
        with self.assertRaises(FormatError):
            table.new_column("B")

    def test_set_data_out_of_range_raises(self) -> None:
        table = Table()
        table.new_column("A")
        line = table.new_line()
        with self.assertRaises(FormatError):
            line.set_data(3, "x")

    def test_bytes_keep_undecodable_sequences(self) -> None:
        table = Table()
        column = table.new_column("A")
        line = table.new_line()
        line.set_data(column, b"ok\xff")
        self.assertEqual(line.data(0), "ok\udcff")

    def test_hidden_columns_are_not_visible(self) -> None:
        table = Table()
        table.new_column("A")
        hidden = table.new_column("B", flags=ColumnFlags.HIDDEN)
        self.assertNotIn(hidden, table.visible_columns())

    def test_tree_flag_makes_a_tree_table(self) -> None:
        table = Table()
        table.new_column("A")
        self.assertFalse(table.is_tree)
        table.new_column("B", flags=ColumnFlags.TREE)
        self.assertTrue(table.is_tree)

    def test_reparenting_moves_child(self) -> None:
        table = Table()
        table.new_column("A")
        first = table.new_line()
        second = table.new_line()
        child = table.new_line(first)
        second.add_child(child)
        self.assertEqual(first.children, [])
        self.assertIs(child.parent, second)
        self.assertTrue(child.is_last_child)

    def test_group_children_know_their_position(self) -> None:
        table = Table()
        table.new_column("A")
        member, c1, c2 = (table.new_line() for _ in range(3))
        group = table.new_group([member])
        group.add_child(c1)
        group.add_child(c2)
        self.assertFalse(c1.is_last_child)
        self.assertTrue(c2.is_last_child)
        self.assertFalse(c1.is_tree_root)

    def test_line_cannot_join_two_groups(self) -> None:
        table = Table()
        table.new_column("A")
        line = table.new_line()
        table.new_group([line])
        with self.assertRaises(FormatError):
            table.new_group([line])


class ChunkerTests(unittest.TestCase):
    def test_wrapnl_splits_on_newlines(self) -> None:
        table = Table()
        column = table.new_column("A")
        column.set_wrapfunc(wrapnl_nextchunk, safechars="\n")
        self.assertTrue(column.is_wrap)
        self.assertTrue(column.is_customwrap)
        self.assertEqual(column.next_chunk("one\ntwo\nthree"), ("one", "two\nthree"))
        self.assertEqual(list(column.iter_chunks("one\ntwo\nthree")), ["one", "two", "three"])

    def test_wrapzero_splits_on_nul(self) -> None:
        table = Table()
        column = table.new_column("A")
        column.set_wrapfunc(wrapzero_nextchunk)
        self.assertEqual(list(column.iter_chunks("a\0b")), ["a", "b"])

    def test_column_without_chunker_yields_whole_text(self) -> None:
        table = Table()
        column = table.new_column("A")
        self.assertIsNone(column.next_chunk("a\nb"))
        self.assertEqual(list(column.iter_chunks("a\nb")), ["a\nb"])


if __name__ == "__main__":
    unittest.main()
