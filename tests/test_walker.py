# tests/test_walker.py
"""Tests for the pre-order member traversal."""

from override_jsdoc.syntax import SyntaxKind, SyntaxNode, Span
from override_jsdoc.walker import iter_class_members, iter_nodes, walk
from tests.conftest import SourceBuilder


class TestWalker:

    def test_members_in_document_order(self):
        b = SourceBuilder()
        a = b.cls("A")
        b.member(a, "one")
        b.member(a, "two")
        c = b.cls("C")
        b.member(c, "three")
        names = [m.name.text for m in iter_class_members(b.root)]
        assert names == ["one", "two", "three"]

    def test_member_before_its_nested_class(self):
        b = SourceBuilder()
        outer = b.cls("Outer")
        method = b.member(outer, "build")
        body = method.add_child(SyntaxNode(SyntaxKind.OTHER, Span(0, 0)))
        inner = b.cls("Inner", extends=["Outer"], parent=body, kind=SyntaxKind.CLASS_EXPRESSION)
        b.member(inner, "nested")
        b.member(outer, "after")
        names = [m.name.text for m in iter_class_members(b.root)]
        assert names == ["build", "nested", "after"]

    def test_every_node_once(self):
        b = SourceBuilder()
        a = b.cls("A", extends=["B"])
        b.member(a, "m")
        nodes = list(iter_nodes(b.root))
        assert len(nodes) == len(set(map(id, nodes)))
        assert b.root not in nodes

    def test_walk_counts_and_visits(self):
        b = SourceBuilder()
        a = b.cls("A")
        b.member(a, "x")
        b.member(a, "y")
        seen = []
        assert walk(b.root, seen.append) == 2
        assert [m.name.text for m in seen] == ["x", "y"]

    def test_deep_nesting_is_iterative(self):
        root = SyntaxNode(SyntaxKind.SOURCE_FILE, Span(0, 0))
        node = root
        for _ in range(5000):
            node = node.add_child(SyntaxNode(SyntaxKind.OTHER, Span(0, 0)))
        assert sum(1 for _ in iter_nodes(root)) == 5000
