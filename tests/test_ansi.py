"""Regression tests for width measurement, truncation, and escaping.

Widths are terminal cells; these cases pin down wide glyphs, combining
marks, and the escape rules used by the human, raw, and export formats.
"""

import unittest

from smartcols import ansi
from smartcols.errors import EncodingError


def _undecodable(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


class DisplayWidthTests(unittest.TestCase):
    def test_ascii_and_wide_glyphs(self) -> None:
        self.assertEqual(ansi.display_width("abc"), 3)
        self.assertEqual(ansi.display_width("日本"), 4)

    def test_combining_mark_takes_no_cell(self) -> None:
        self.assertEqual(ansi.display_width("é"), 1)

    def test_empty_and_none(self) -> None:
        self.assertEqual(ansi.display_width(""), 0)
        self.assertEqual(ansi.display_width(None), 0)

    def test_tab_expands_to_next_stop(self) -> None:
        self.assertEqual(ansi.char_width("\t", 3), 5)


class TruncateTests(unittest.TestCase):
    def test_wide_glyph_straddling_limit_is_dropped(self) -> None:
        self.assertEqual(ansi.truncate_to_width("日本語", 5), ("日本", 4))

    def test_short_text_is_returned_whole(self) -> None:
        self.assertEqual(ansi.truncate_to_width("abc", 10), ("abc", 3))

    def test_truncation_is_idempotent(self) -> None:
        for text in ("abcdefgh", "日本語テキスト", "aéioux", "a\tbc"):
            for width in range(0, 9):
                once, _ = ansi.truncate_to_width(text, width)
                twice, _ = ansi.truncate_to_width(once, width)
                self.assertEqual(once, twice)
                self.assertLessEqual(ansi.display_width(once), width)

    def test_malformed_character_raises(self) -> None:
        with self.assertRaises(EncodingError):
            ansi.truncate_to_width(_undecodable(b"ab\xffcd"), 3)


class EscapeTests(unittest.TestCase):
    def test_safe_encode_escapes_control_characters(self) -> None:
        self.assertEqual(ansi.safe_encode("a\tb"), "a\\x09b")
        self.assertEqual(ansi.safe_encode("a\x1b[31m"), "a\\x1b[31m")

    def test_safe_encode_respects_safechars(self) -> None:
        self.assertEqual(ansi.safe_encode("a\nb", "\n"), "a\nb")

    def test_safe_encode_escapes_backslash_before_x(self) -> None:
        self.assertEqual(ansi.safe_encode("\\x"), "\\x5cx")
        self.assertEqual(ansi.safe_encode("a\\b"), "a\\b")

    def test_safe_encode_keeps_undecodable_bytes_visible(self) -> None:
        self.assertEqual(ansi.safe_encode(_undecodable(b"a\xff")), "a\\xff")

    def test_safe_encode_keeps_printable_unicode(self) -> None:
        self.assertEqual(ansi.safe_encode("żółw"), "żółw")

    def test_nonblank_escape(self) -> None:
        self.assertEqual(ansi.nonblank_escape("a b\\"), "a\\x20b\\x5c")

    def test_shell_quote(self) -> None:
        self.assertEqual(ansi.shell_quote('say "$x"'), '"say \\x22\\x24x\\x22"')
        self.assertEqual(ansi.shell_quote(None), '""')

    def test_shell_ident(self) -> None:
        self.assertEqual(ansi.shell_ident("USE%"), "USE_")
        self.assertEqual(ansi.shell_ident("MAJ:MIN"), "MAJ_MIN")


class AlignTextTests(unittest.TestCase):
    def test_alignments(self) -> None:
        self.assertEqual(ansi.align_text("ab", 5, ansi.ALIGN_LEFT), "ab   ")
        self.assertEqual(ansi.align_text("ab", 5, ansi.ALIGN_RIGHT), "   ab")
        self.assertEqual(ansi.align_text("ab", 5, ansi.ALIGN_CENTER), " ab  ")

    def test_custom_pad_and_truncation(self) -> None:
        self.assertEqual(ansi.align_text("ab", 4, ansi.ALIGN_RIGHT, "-"), "--ab")
        self.assertEqual(ansi.align_text("abcdef", 3), "abc")


if __name__ == "__main__":
    unittest.main()
