"""Pre-order, depth-first traversal yielding every class member."""

from __future__ import annotations

from typing import Callable, Iterator

from override_jsdoc.syntax import ClassMemberNode, SyntaxNode


def iter_nodes(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield every descendant of *root* once, pre-order, depth-first."""
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_class_members(root: SyntaxNode) -> Iterator[ClassMemberNode]:
    """Yield class members in traversal order.

    A member is yielded before any node nested inside it, so members of
    a class expression in a method body follow that method.
    """
    for node in iter_nodes(root):
        if isinstance(node, ClassMemberNode):
            yield node


def walk(root: SyntaxNode, visit: Callable[[ClassMemberNode], None]) -> int:
    """Invoke *visit* on every class member; return how many were visited."""
    count = 0
    for member in iter_class_members(root):
        visit(member)
        count += 1
    return count
