# tests/conftest.py
"""
Shared builders for the override-jsdoc tests.

``SourceBuilder`` lays out a syntax model together with matching source
text, so spans, line/column locations and fixes all line up without
going through the TypeScript front-end.  ``FakeOracle`` answers heritage
queries from a plain dict.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from override_jsdoc.context import RuleContext
from override_jsdoc.errors import UnresolvableTypeError
from override_jsdoc.frontend import TypeScriptFrontend
from override_jsdoc.heritage import ResolvedType
from override_jsdoc.index import TypeIndex
from override_jsdoc.jsdoc import build_doc_comment
from override_jsdoc.syntax import (
    ClassMemberNode,
    ClassNode,
    DocComment,
    HeritageClause,
    HeritageToken,
    MemberName,
    Modifier,
    SourceFile,
    Span,
    SyntaxKind,
    SyntaxNode,
    TypeReference,
)


class FakeOracle:
    """Resolves type names from a dict; records every query."""

    def __init__(
        self,
        types: Optional[Dict[str, Iterable[str]]] = None,
        raising: Iterable[str] = (),
    ) -> None:
        self.types = {name: frozenset(members) for name, members in (types or {}).items()}
        self.raising = set(raising)
        self.calls: List[str] = []

    def resolve(self, ref: TypeReference) -> Optional[ResolvedType]:
        self.calls.append(ref.name)
        if ref.name in self.raising:
            raise UnresolvableTypeError(ref.name)
        members = self.types.get(ref.name)
        if members is None:
            return None
        return ResolvedType(ref.name, members)


_MEMBER_SUFFIX = {
    SyntaxKind.METHOD: "() {}",
    SyntaxKind.CONSTRUCTOR: "() {}",
    SyntaxKind.PROPERTY: " = 1;",
    SyntaxKind.GET_ACCESSOR: "() { return 1; }",
    SyntaxKind.SET_ACCESSOR: "(v) {}",
    SyntaxKind.INDEX_SIGNATURE: ": string]: number;",
    SyntaxKind.STATIC_BLOCK: " {}",
}

_MEMBER_PREFIX = {
    SyntaxKind.GET_ACCESSOR: "get ",
    SyntaxKind.SET_ACCESSOR: "set ",
    SyntaxKind.INDEX_SIGNATURE: "[",
}


class SourceBuilder:
    """
    Builds a :class:`SourceFile` piece by piece.

    >>> b = SourceBuilder()
    >>> derived = b.cls("Derived", extends=["Base"])
    >>> m = b.member(derived, "m", docs=["/** @override */"])
    >>> source = b.build()
    """

    def __init__(self, file_name: str = "test.ts") -> None:
        self.file_name = file_name
        self.parts: List[str] = []
        self.pos = 0
        self.root = SyntaxNode(SyntaxKind.SOURCE_FILE, Span(0, 0))

    def write(self, text: str) -> Span:
        start = self.pos
        self.parts.append(text)
        self.pos += len(text)
        return Span(start, self.pos)

    def doc(self, text: str) -> DocComment:
        span = self.write(text)
        return build_doc_comment(text, span.start)

    def cls(
        self,
        name: Optional[str] = "Derived",
        extends: Optional[Sequence[str]] = None,
        implements: Optional[Sequence[str]] = None,
        parent: Optional[SyntaxNode] = None,
        kind: SyntaxKind = SyntaxKind.CLASS_DECLARATION,
    ) -> ClassNode:
        start = self.pos
        self.write(f"class {name}" if name else "class")
        heritage: Optional[List[HeritageClause]] = None
        refs: List[TypeReference] = []
        for token, names in ((HeritageToken.EXTENDS, extends),
                             (HeritageToken.IMPLEMENTS, implements)):
            if names is None:
                continue
            heritage = heritage or []
            clause = HeritageClause(token)
            self.write(f" {token.value} ")
            for i, type_name in enumerate(names):
                if i:
                    self.write(", ")
                ref = TypeReference(SyntaxKind.TYPE_REFERENCE, self.write(type_name), name=type_name)
                clause.types.append(ref)
                refs.append(ref)
            heritage.append(clause)
        self.write(" {\n")
        node = ClassNode(kind, Span(start, self.pos), name=name, heritage=heritage)
        for ref in refs:
            node.add_child(ref)
        (parent or self.root).add_child(node)
        return node

    def member(
        self,
        parent: SyntaxNode,
        name: Optional[str] = "m",
        kind: SyntaxKind = SyntaxKind.METHOD,
        docs: Sequence[str] = (),
        static: bool = False,
        computed: bool = False,
    ) -> ClassMemberNode:
        self.write("  ")
        comments = []
        for text in docs:
            comments.append(self.doc(text))
            self.write(" ")
        start = self.pos
        modifiers = set()
        if static:
            self.write("static ")
            modifiers.add(Modifier.STATIC)
        self.write(_MEMBER_PREFIX.get(kind, ""))
        member_name = None
        if kind is SyntaxKind.CONSTRUCTOR:
            name = "constructor"
        if kind is SyntaxKind.STATIC_BLOCK:
            self.write("static")
            modifiers.add(Modifier.STATIC)
        elif name is not None:
            if computed:
                span = self.write(f"[{name}]")
                member_name = MemberName(f"[{name}]", span, computed=True)
            else:
                member_name = MemberName(name, self.write(name))
        self.write(_MEMBER_SUFFIX[kind])
        member = ClassMemberNode(
            kind,
            Span(start, self.pos),
            name=member_name,
            modifiers=frozenset(modifiers),
            docs=comments,
        )
        self.write("\n")
        parent.add_child(member)
        return member

    def end(self) -> None:
        self.write("}\n")

    def build(self) -> SourceFile:
        text = "".join(self.parts)
        self.root.span = Span(0, len(text))
        return SourceFile(file_name=self.file_name, text=text, root=self.root)


def make_context(source: Optional[SourceFile] = None, oracle=None) -> RuleContext:
    if source is None:
        source = SourceBuilder().build()
    return RuleContext(source=source, oracle=oracle or FakeOracle())


def analyse(text: str, file_name: str = "test.ts", stubs: Optional[dict] = None):
    """Parse *text*, index it, run the rule; returns ``(source, diagnostics)``."""
    from override_jsdoc.rule import check_source

    source = TypeScriptFrontend().parse(text, file_name)
    index = TypeIndex()
    if stubs:
        index.load_stubs(stubs)
    index.add_source_file(source)
    return source, check_source(source, index)


@pytest.fixture
def builder() -> SourceBuilder:
    return SourceBuilder()


@pytest.fixture(scope="session")
def frontend() -> TypeScriptFrontend:
    return TypeScriptFrontend()
