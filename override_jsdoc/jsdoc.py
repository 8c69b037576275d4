"""
override_jsdoc/jsdoc.py
═══════════════════════

Parses the text of one ``/** … */`` comment into its block tags.

Tag recognition follows the TypeScript JSDoc scanner closely enough for
this rule:

  * a tag is ``@`` followed by a name, at the start of a line (after
    optional indentation and a ``*`` leader) or after whitespace
  * ``{@link Foo}`` and ``user@example.com`` are plain text
  * a tag's text runs to the end of its line or to the next tag

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from parsimonious.exceptions import ParseError, VisitationError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from override_jsdoc.errors import DocCommentSyntaxError
from override_jsdoc.syntax import DocComment, DocTag, Span

_log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — GRAMMAR (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

JSDOC_GRAMMAR = Grammar(r'''
    comment     = open lines close
    open        = "/**"
    close       = "*/"

    lines       = line (nl line)*
    line        = ws leader? segment*
    leader      = ~r"\*(?!/)[ \t]*"

    segment     = tag / text / stray
    tag         = "@" tag_name tag_text
    tag_name    = ~r"[A-Za-z_$][\w$.\-]*"
    tag_text    = ~r"(?:[^@\r\n*]|\*(?!/)|(?<=\S)@)*"
    text        = ~r"(?:[^@\r\n*]|\*(?!/)|(?<=\S)@)+"
    stray       = "@"

    ws          = ~r"[ \t]*"
    nl          = ~r"\r?\n"
''')


@dataclass(frozen=True)
class RawTag:
    """A tag with offsets relative to the start of the comment text."""
    name: str
    start: int
    end: int
    name_start: int
    name_end: int


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — VISITOR (Parse Tree → tags)
# ═══════════════════════════════════════════════════════════════════

class _TagCollector(NodeVisitor):
    """Collects ``tag`` nodes in document order."""

    def __init__(self) -> None:
        self.tags: List[RawTag] = []

    def visit_tag(self, node: Node, visited_children: list) -> Node:
        _, name, text = node.children
        self.tags.append(RawTag(
            name=name.text,
            start=node.start,
            end=text.start + len(text.text.rstrip()),
            name_start=name.start,
            name_end=name.end,
        ))
        return node

    def generic_visit(self, node: Node, visited_children: list) -> Node:
        return node


def parse_tags(comment_text: str) -> Tuple[RawTag, ...]:
    """
    Parse a complete ``/** … */`` comment and return its tags.

    Raises
    ------
    DocCommentSyntaxError
        If *comment_text* is not a well-formed documentation comment.
    """
    try:
        tree = JSDOC_GRAMMAR.parse(comment_text)
    except ParseError as exc:
        raise DocCommentSyntaxError(
            f"malformed documentation comment: {exc}", offset=exc.pos,
        ) from exc
    collector = _TagCollector()
    try:
        collector.visit(tree)
    except VisitationError as exc:
        raise DocCommentSyntaxError(f"cannot collect tags: {exc}") from exc
    return tuple(collector.tags)


def is_doc_comment(comment_text: str) -> bool:
    """``/** … */`` but not the empty block comment ``/**/``."""
    return comment_text.startswith("/**") and comment_text != "/**/" and comment_text.endswith("*/")


def build_doc_comment(comment_text: str, start: int) -> DocComment:
    """
    Build a :class:`DocComment` for a comment found at offset *start*.

    A comment that fails to parse yields a comment without tags.
    """
    span = Span(start, start + len(comment_text))
    try:
        raw_tags = parse_tags(comment_text)
    except DocCommentSyntaxError as exc:
        _log.warning("ignoring tags of comment at offset %d: %s", start, exc)
        return DocComment(span=span)
    return DocComment(span=span, tags=tuple(
        DocTag(
            name=raw.name,
            name_span=Span(start + raw.name_start, start + raw.name_end),
            span=Span(start + raw.start, start + raw.end),
            comment_span=span,
        )
        for raw in raw_tags
    ))
