from __future__ import annotations

import io
import json
import unittest

from smartcols.jsonwrt import JsonWriter
from smartcols.model import ColumnFlags, JsonType, OutputFormat, Table, TermForce, wrapnl_nextchunk
from smartcols.printer import cleanup_session, initialize_session, table_to_string
from smartcols.renderers import json_boolean


def make_table(fmt: OutputFormat, *names: str) -> Table:
    table = Table(format=fmt, termforce=TermForce.NEVER)
    for name in names:
        table.new_column(name)
    return table


def add_row(table: Table, *values, parent=None):
    line = table.new_line(parent)
    for idx, value in enumerate(values):
        if value is not None:
            line.set_data(idx, value)
    return line


class RawFormatTests(unittest.TestCase):
    def test_blanks_are_escaped(self) -> None:
        table = make_table(OutputFormat.RAW, "NAME", "DESC")
        add_row(table, "sda", "a b")
        self.assertEqual(table_to_string(table), "NAME DESC\nsda a\\x20b\n")

    def test_no_padding_and_custom_separator(self) -> None:
        table = make_table(OutputFormat.RAW, "NAME", "SIZE")
        table.colsep = ","
        add_row(table, "sda", "512")
        add_row(table, "sdb10", "8")
        self.assertEqual(table_to_string(table), "NAME,SIZE\nsda,512\nsdb10,8\n")


class ExportFormatTests(unittest.TestCase):
    def test_name_value_pairs(self) -> None:
        table = make_table(OutputFormat.EXPORT, "NAME", "SIZE")
        add_row(table, "sda", "512")
        self.assertEqual(table_to_string(table), 'NAME="sda" SIZE="512"\n')

    def test_percent_headers_and_quoting(self) -> None:
        table = make_table(OutputFormat.EXPORT, "USE%", "MOUNT POINT")
        add_row(table, "10%", '/mnt/"x"')
        self.assertEqual(
            table_to_string(table),
            'USE_PCT="10%" MOUNT_POINT="/mnt/\\x22x\\x22"\n',
        )

    def test_missing_cell_is_empty_string(self) -> None:
        table = make_table(OutputFormat.EXPORT, "NAME", "LABEL")
        add_row(table, "sda", None)
        self.assertEqual(table_to_string(table), 'NAME="sda" LABEL=""\n')


class JsonFormatTests(unittest.TestCase):
    def test_compact_line(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME", "SIZE")
        table.columns[1].json_type = JsonType.NUMBER
        add_row(table, "sda", "512")
        out = io.StringIO()
        table.out = out
        session = initialize_session(table)
        try:
            session.json = JsonWriter(out, indent=None)
            session.print_range()
        finally:
            cleanup_session(session)
        self.assertEqual(out.getvalue(), '{"name":"sda","size":512}')

    def test_document_layout(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME")
        table.name = "disks"
        add_row(table, "sda")
        self.assertEqual(
            table_to_string(table),
            "{\n"
            '   "disks": [\n'
            "      {\n"
            '         "name": "sda"\n'
            "      }\n"
            "   ]\n"
            "}\n",
        )

    def test_types(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME", "RO", "TAGS", "NUMS", "PLAIN", "SIZE")
        name, ro, tags, nums, plain, size = table.columns
        ro.json_type = JsonType.BOOLEAN
        tags.json_type = JsonType.ARRAY_STRING
        tags.set_wrapfunc(wrapnl_nextchunk)
        nums.json_type = JsonType.ARRAY_NUMBER
        nums.set_wrapfunc(wrapnl_nextchunk)
        plain.json_type = JsonType.ARRAY_STRING
        size.json_type = JsonType.NUMBER
        add_row(table, "sda", "yes", "a\nb", "1\n2", "x\ny", "")

        data = json.loads(table_to_string(table))
        self.assertEqual(
            data,
            {
                "": [
                    {
                        "name": "sda",
                        "ro": True,
                        "tags": ["a", "b"],
                        "nums": [1, 2],
                        "plain": ["x\ny"],
                        "size": None,
                    }
                ]
            },
        )

    def test_boolean_rules(self) -> None:
        for value in (None, "", "0", "0x1", "no", "No", "N"):
            self.assertFalse(json_boolean(value), value)
        for value in ("1", "yes", "true", "y"):
            self.assertTrue(json_boolean(value), value)

    def test_tree_nests_children(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME", "SIZE")
        table.name = "blockdevices"
        table.columns[0].flags |= ColumnFlags.TREE
        sda = add_row(table, "sda", "100")
        sda1 = add_row(table, "sda1", "60", parent=sda)
        add_row(table, "p1", "10", parent=sda1)
        add_row(table, "sda2", "40", parent=sda)
        add_row(table, "sdb", "8")

        data = json.loads(table_to_string(table))
        self.assertEqual(
            data,
            {
                "blockdevices": [
                    {
                        "name": "sda",
                        "size": "100",
                        "children": [
                            {
                                "name": "sda1",
                                "size": "60",
                                "children": [{"name": "p1", "size": "10"}],
                            },
                            {"name": "sda2", "size": "40"},
                        ],
                    },
                    {"name": "sdb", "size": "8"},
                ]
            },
        )

    def test_group_children_are_top_level_objects(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME")
        table.columns[0].flags |= ColumnFlags.TREE
        member = add_row(table, "m")
        child = add_row(table, "c")
        table.new_group([member]).add_child(child)
        data = json.loads(table_to_string(table))
        self.assertEqual(data, {"": [{"name": "m"}, {"name": "c"}]})

    def test_title_is_not_printed(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME")
        table.set_title("Disks")
        add_row(table, "sda")
        self.assertEqual(json.loads(table_to_string(table)), {"": [{"name": "sda"}]})

    def test_empty_table_is_valid_json(self) -> None:
        table = make_table(OutputFormat.JSON, "NAME")
        self.assertEqual(json.loads(table_to_string(table)), {"": []})


if __name__ == "__main__":
    unittest.main()
