"""
Unit tests for nodes.py

Tests the declaration node model, its source accessors and the predicate
query.
"""

import unittest

from rubymap.nodes import DeclarationNode, MissingExtentError, NodeKind
from rubymap.source import Extent, SourceCache

SOURCE = """module Zoo
  class Lion
    def self.count
      3
    end

    def roar
      'ROAR'
    end
  end
end
"""


def _node(kind, name, first, last, sources):
    return DeclarationNode(
        kind=kind,
        extent=Extent("zoo.rb", first, last),
        sources=sources,
        name=name,
    )


class TestDeclarationNode(unittest.TestCase):
    def setUp(self):
        self.sources = SourceCache()
        self.sources.register("zoo.rb", SOURCE)
        self.root = DeclarationNode.root("zoo.rb", self.sources)
        self.zoo = self.root.add_child(_node(NodeKind.MODULE, "Zoo", 1, 11, self.sources))
        self.lion = self.zoo.add_child(_node(NodeKind.CLASS, "Lion", 2, 10, self.sources))
        self.count = self.lion.add_child(
            _node(NodeKind.CLASS_METHOD, "count", 3, 5, self.sources)
        )
        self.roar = self.lion.add_child(
            _node(NodeKind.INSTANCE_METHOD, "roar", 7, 9, self.sources)
        )

    def test_human_names(self):
        self.assertEqual(self.root.human_name, "root")
        self.assertEqual(self.zoo.human_name, "module")
        self.assertEqual(self.lion.human_name, "class")
        self.assertEqual(self.count.human_name, "class method")
        self.assertEqual(self.roar.human_name, "instance method")

    def test_children_are_ordered_and_read_only(self):
        self.assertEqual(self.lion.children, (self.count, self.roar))
        self.assertIsInstance(self.lion.children, tuple)

    def test_children_cannot_be_passed_to_constructor(self):
        outside = _node(NodeKind.INSTANCE_METHOD, "feed", 20, 22, self.sources)
        with self.assertRaises(TypeError):
            DeclarationNode(
                kind=NodeKind.CLASS,
                extent=Extent("zoo.rb", 2, 10),
                sources=self.sources,
                name="Lion",
                _children=[outside],
            )

    def test_extent_accessors(self):
        self.assertEqual(self.roar.file_path, "zoo.rb")
        self.assertEqual(self.roar.first_line, 7)
        self.assertEqual(self.roar.last_line, 9)

    def test_source(self):
        self.assertEqual(self.roar.source, "    def roar\n      'ROAR'\n    end")

    def test_source_lines_with_numbers(self):
        self.assertEqual(
            self.count.source_lines_with_numbers(),
            [(3, "    def self.count"), (4, "      3"), (5, "    end")],
        )

    def test_root_has_no_extent(self):
        self.assertTrue(self.root.is_root)
        self.assertEqual(self.root.file_path, "zoo.rb")
        self.assertIsNone(self.root.name)
        self.assertIsNone(self.root.first_line)
        self.assertIsNone(self.root.last_line)
        self.assertIsNone(self.root.source)

    def test_root_line_accessors_raise(self):
        with self.assertRaises(MissingExtentError):
            self.root.source_lines()
        with self.assertRaises(MissingExtentError):
            self.root.source_lines_with_numbers()

    def test_child_outside_parent_extent_is_rejected(self):
        with self.assertRaises(ValueError):
            self.count.add_child(_node(NodeKind.INSTANCE_METHOD, "x", 6, 7, self.sources))

    def test_named_kinds_require_a_name(self):
        with self.assertRaises(ValueError):
            _node(NodeKind.CLASS, "", 1, 2, self.sources)

    def test_non_root_requires_extent(self):
        with self.assertRaises(ValueError):
            DeclarationNode(kind=NodeKind.CLASS, extent=None, sources=self.sources, name="A")

    def test_generic_node_has_label_and_no_name(self):
        node = DeclarationNode(
            kind=NodeKind.GENERIC, extent=Extent("zoo.rb", 1, 1), sources=self.sources
        )
        self.assertEqual(node.human_name, "node")
        self.assertIsNone(node.name)
        self.assertEqual(node.source, "module Zoo")

    def test_repr(self):
        self.assertEqual(repr(self.lion), "<DeclarationNode class Lion zoo.rb:2-10>")
        self.assertEqual(repr(self.root), "<DeclarationNode root zoo.rb>")


class TestFindAll(unittest.TestCase):
    def setUp(self):
        sources = SourceCache()
        sources.register("zoo.rb", SOURCE)
        self.root = DeclarationNode.root("zoo.rb", sources)
        zoo = self.root.add_child(_node(NodeKind.MODULE, "Zoo", 1, 11, sources))
        lion = zoo.add_child(_node(NodeKind.CLASS, "Lion", 2, 10, sources))
        lion.add_child(_node(NodeKind.CLASS_METHOD, "count", 3, 5, sources))
        lion.add_child(_node(NodeKind.INSTANCE_METHOD, "roar", 7, 9, sources))

    def test_walk_is_preorder(self):
        names = [node.name for node in self.root.walk()]
        self.assertEqual(names, [None, "Zoo", "Lion", "count", "roar"])

    def test_find_all_by_name(self):
        found = self.root.find_all(lambda node: node.name == "roar")
        self.assertEqual([node.name for node in found], ["roar"])

    def test_find_all_includes_self(self):
        found = self.root.find_all(lambda node: True)
        self.assertIs(found[0], self.root)
        self.assertEqual(len(found), 5)

    def test_find_all_by_kind_preorder(self):
        found = self.root.find_all(
            lambda node: node.kind in (NodeKind.CLASS_METHOD, NodeKind.INSTANCE_METHOD)
        )
        self.assertEqual([node.name for node in found], ["count", "roar"])

    def test_find_all_no_match(self):
        self.assertEqual(self.root.find_all(lambda node: node.name == "missing"), [])

    def test_find_all_from_subtree(self):
        lion = self.root.children[0].children[0]
        found = lion.find_all(lambda node: node.kind is NodeKind.MODULE)
        self.assertEqual(found, [])


if __name__ == "__main__":
    unittest.main()
