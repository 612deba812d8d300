"""Tests for line extents and the lazy source cache."""

import os
import tempfile
import unittest

from rubymap.parser import parse_source
from rubymap.source import Extent, SourceCache, split_source_lines


class TestSplitSourceLines(unittest.TestCase):
    def test_trailing_newline_is_not_a_line(self):
        self.assertEqual(split_source_lines("a\nb\n"), ["a", "b"])

    def test_no_trailing_newline(self):
        self.assertEqual(split_source_lines("a\nb"), ["a", "b"])

    def test_crlf_is_stripped(self):
        self.assertEqual(split_source_lines("a\r\nb\r\n"), ["a", "b"])

    def test_blank_lines_are_kept(self):
        self.assertEqual(split_source_lines("a\n\n\nb\n"), ["a", "", "", "b"])


class TestExtent(unittest.TestCase):
    def test_from_class_node(self):
        parsed = parse_source("\n\nclass Foo\n  x = 1\nend\n")
        class_node = parsed.root_node.named_children[0]

        extent = Extent.from_syntax_node(class_node, "foo.rb")

        self.assertEqual(extent, Extent("foo.rb", 3, 5))

    def test_node_ending_at_column_zero_excludes_that_line(self):
        parsed = parse_source("class Foo\nend\n")

        extent = Extent.from_syntax_node(parsed.root_node, "foo.rb")

        self.assertEqual(extent.first_line, 1)
        self.assertEqual(extent.last_line, 2)

    def test_contains(self):
        outer = Extent("a.rb", 1, 10)
        self.assertTrue(outer.contains(Extent("a.rb", 2, 10)))
        self.assertTrue(outer.contains(outer))
        self.assertFalse(outer.contains(Extent("a.rb", 5, 11)))
        self.assertFalse(outer.contains(Extent("b.rb", 2, 3)))


class TestSourceCache(unittest.TestCase):
    def setUp(self):
        self.cache = SourceCache()
        self.cache.register("mem.rb", "one\ntwo\nthree\nfour\n")

    def test_slice_is_inclusive(self):
        self.assertEqual(self.cache.slice(Extent("mem.rb", 2, 3)), ["two", "three"])

    def test_slice_never_includes_lines_past_the_extent(self):
        self.assertEqual(self.cache.slice(Extent("mem.rb", 1, 1)), ["one"])

    def test_slice_up_to_last_line_of_file(self):
        self.assertEqual(
            self.cache.slice(Extent("mem.rb", 3, 4)), ["three", "four"]
        )

    def test_numbered_slice(self):
        self.assertEqual(
            self.cache.numbered_slice(Extent("mem.rb", 2, 4)),
            [(2, "two"), (3, "three"), (4, "four")],
        )

    def test_loads_files_lazily(self):
        with tempfile.NamedTemporaryFile("w", suffix=".rb", delete=False) as f:
            f.write("class A\nend\n")
            temp_path = f.name

        try:
            cache = SourceCache()
            self.assertNotIn(temp_path, cache)
            self.assertEqual(cache.lines(temp_path), ["class A", "end"])
            self.assertIn(temp_path, cache)
        finally:
            os.unlink(temp_path)

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            SourceCache().lines("/nonexistent/file.rb")


if __name__ == "__main__":
    unittest.main()
