"""
override_jsdoc/frontend.py
══════════════════════════

TypeScript front-end: tree-sitter parse tree → :mod:`override_jsdoc.syntax`.

Only the shapes the rule cares about get a dedicated node type:

  class_declaration / abstract_class_declaration / class  → ClassNode
  interface_declaration                                   → InterfaceNode
  method_definition (constructor, get, set), method_signature,
  abstract_method_signature, public_field_definition,
  index_signature, class_static_block                     → ClassMemberNode

Every other named node becomes a plain ``SyntaxNode(OTHER)`` so that the
walker still reaches classes nested anywhere.  ``/** … */`` comments
preceding a member (possibly interleaved with other comments and
decorators) are attached to it in order.

Depends on:
    - tree-sitter, tree-sitter-typescript
"""

from __future__ import annotations

import logging
import os
from typing import Dict, FrozenSet, List, Optional, Sequence

import tree_sitter as ts
import tree_sitter_typescript as tsts

from override_jsdoc.errors import ErrorCode, SourceReadError
from override_jsdoc.jsdoc import build_doc_comment, is_doc_comment
from override_jsdoc.syntax import (
    ClassMemberNode,
    ClassNode,
    DocComment,
    HeritageClause,
    HeritageToken,
    InterfaceNode,
    MemberName,
    Modifier,
    SourceFile,
    Span,
    SyntaxKind,
    SyntaxNode,
    TypeReference,
)

_log = logging.getLogger(__name__)

TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())

LANGUAGE_MAP: Dict[str, ts.Language] = {
    ".ts": TS_LANGUAGE,
    ".mts": TS_LANGUAGE,
    ".cts": TS_LANGUAGE,
    ".tsx": TSX_LANGUAGE,
}

_CLASS_TYPES = {
    "class_declaration": SyntaxKind.CLASS_DECLARATION,
    "abstract_class_declaration": SyntaxKind.CLASS_DECLARATION,
    "class": SyntaxKind.CLASS_EXPRESSION,
}

_CLASS_BODY_MEMBERS = frozenset({
    "method_definition",
    "method_signature",
    "abstract_method_signature",
    "public_field_definition",
    "index_signature",
    "class_static_block",
})

# Outside a class body only object-literal methods and accessors count.
_OBJECT_MEMBERS = frozenset({"method_definition"})

_PARAMETER_PROPERTY_MARKERS = {"accessibility_modifier", "readonly", "override_modifier"}

_MODIFIER_TOKENS = {
    "static": Modifier.STATIC,
    "abstract": Modifier.ABSTRACT,
    "readonly": Modifier.READONLY,
    "async": Modifier.ASYNC,
    "declare": Modifier.DECLARE,
    "accessor": Modifier.ACCESSOR,
    "override_modifier": Modifier.OVERRIDE,
}

_ACCESSIBILITY = {
    "public": Modifier.PUBLIC,
    "protected": Modifier.PROTECTED,
    "private": Modifier.PRIVATE,
}


class _OffsetMap:
    """Maps tree-sitter byte offsets to character offsets."""

    def __init__(self, text: str, data: bytes) -> None:
        self._identity = len(text) == len(data)
        self._table: List[int] = []
        if not self._identity:
            table = []
            for index, char in enumerate(text):
                table.extend([index] * len(char.encode("utf-8")))
            table.append(len(text))
            self._table = table

    def __call__(self, byte_offset: int) -> int:
        if self._identity:
            return byte_offset
        return self._table[byte_offset]


class TypeScriptFrontend:
    """
    Parses TypeScript / TSX source text into a :class:`SourceFile`.

    Usage
    -----
    >>> frontend = TypeScriptFrontend()
    >>> source = frontend.parse("class A extends B { m() {} }", "a.ts")
    """

    def __init__(self) -> None:
        self._parsers: Dict[int, ts.Parser] = {}

    def _parser_for(self, language: ts.Language) -> ts.Parser:
        key = id(language)
        if key not in self._parsers:
            self._parsers[key] = ts.Parser(language)
        return self._parsers[key]

    @staticmethod
    def supports(file_name: str) -> bool:
        return os.path.splitext(file_name)[1].lower() in LANGUAGE_MAP

    def parse(self, text: str, file_name: str = "<input>.ts") -> SourceFile:
        ext = os.path.splitext(file_name)[1].lower()
        language = LANGUAGE_MAP.get(ext, TS_LANGUAGE)
        data = text.encode("utf-8")
        tree = self._parser_for(language).parse(data)
        if tree.root_node.has_error:
            _log.info("%s: source contains syntax errors; analysing what parsed", file_name)
        builder = _TreeBuilder(text, data, file_name)
        root = builder.build(tree.root_node)
        return SourceFile(file_name=file_name, text=text, root=root)

    def parse_file(self, path: str) -> SourceFile:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            raise SourceReadError(
                f"source file not found: {path}", code=ErrorCode.SOURCE_NOT_FOUND,
            ) from None
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"cannot read {path}: {exc}") from exc
        return self.parse(text, path)


class _TreeBuilder:
    """Converts one tree-sitter tree; holds the text for slicing."""

    def __init__(self, text: str, data: bytes, file_name: str = "") -> None:
        self.text = text
        self.file_name = file_name
        self.offset = _OffsetMap(text, data)

    # ── helpers ──────────────────────────────────────────────────────

    def span(self, node: ts.Node) -> Span:
        return Span(self.offset(node.start_byte), self.offset(node.end_byte))

    def node_text(self, node: Optional[ts.Node]) -> str:
        if node is None:
            return ""
        s = self.span(node)
        return self.text[s.start:s.end]

    # ── generic conversion ───────────────────────────────────────────

    def build(self, root: ts.Node) -> SyntaxNode:
        node = SyntaxNode(SyntaxKind.SOURCE_FILE, self.span(root))
        self.convert_children(root, node)
        return node

    def convert_children(
        self,
        ts_node: ts.Node,
        parent: SyntaxNode,
        member_types: FrozenSet[str] = _OBJECT_MEMBERS,
    ) -> None:
        """Convert the children of *ts_node*, attaching pending doc comments."""
        pending: List[DocComment] = []
        decorator_start: Optional[int] = None
        for child in ts_node.children:
            if child.type == "comment":
                comment_text = self.node_text(child)
                if is_doc_comment(comment_text):
                    pending.append(build_doc_comment(comment_text, self.span(child).start))
                continue
            if child.type == "decorator":
                if decorator_start is None:
                    decorator_start = self.span(child).start
                parent.add_child(self.convert(child))
                continue
            if not child.is_named:
                continue
            if child.type in member_types:
                parent.add_child(self.member(child, pending, decorator_start))
            else:
                parent.add_child(self.convert(child))
            pending = []
            decorator_start = None

    def convert(self, ts_node: ts.Node) -> SyntaxNode:
        if ts_node.type in _CLASS_TYPES:
            return self.class_node(ts_node)
        if ts_node.type == "interface_declaration":
            return self.interface_node(ts_node)
        node = SyntaxNode(SyntaxKind.OTHER, self.span(ts_node))
        self.convert_children(ts_node, node)
        return node

    # ── classes ──────────────────────────────────────────────────────

    def class_node(self, ts_node: ts.Node) -> ClassNode:
        name_node = ts_node.child_by_field_name("name")
        cls = ClassNode(
            _CLASS_TYPES[ts_node.type],
            self.span(ts_node),
            name=self.node_text(name_node) or None,
        )
        for child in ts_node.children:
            if child.type == "class_heritage":
                cls.heritage = self.heritage(child, cls)
            elif child.type == "class_body":
                self.convert_children(child, cls, _CLASS_BODY_MEMBERS)
                cls.parameter_properties = self.parameter_properties(child)
            elif child.type == "decorator":
                cls.add_child(self.convert(child))
        return cls

    def parameter_properties(self, body: ts.Node) -> List[str]:
        """Constructor parameters declared with ``public``/``private``/
        ``protected``/``readonly``; they are instance members."""
        names: List[str] = []
        for child in body.named_children:
            if child.type != "method_definition":
                continue
            if self.node_text(child.child_by_field_name("name")) != "constructor":
                continue
            params = child.child_by_field_name("parameters")
            for param in params.named_children if params is not None else ():
                if not any(c.type in _PARAMETER_PROPERTY_MARKERS for c in param.children):
                    continue
                pattern = param.child_by_field_name("pattern")
                if pattern is not None and pattern.type == "identifier":
                    names.append(self.node_text(pattern))
        return names

    def heritage(self, ts_node: ts.Node, cls: ClassNode) -> List[HeritageClause]:
        clauses: List[HeritageClause] = []
        for child in ts_node.named_children:
            if child.type == "extends_clause":
                clause = HeritageClause(HeritageToken.EXTENDS)
                values = child.children_by_field_name("value") or [
                    c for c in child.named_children if c.type != "type_arguments"
                ]
            elif child.type == "implements_clause":
                clause = HeritageClause(HeritageToken.IMPLEMENTS)
                values = list(child.named_children)
            else:
                continue
            for value in values:
                ref = self.type_reference(value)
                cls.add_child(ref)
                clause.types.append(ref)
            clauses.append(clause)
        return clauses

    def type_reference(self, ts_node: ts.Node) -> TypeReference:
        target = ts_node
        if ts_node.type == "generic_type":
            target = ts_node.child_by_field_name("name") or ts_node
        name = self.node_text(target)
        if "<" in name:
            name = name.split("<", 1)[0]
        ref = TypeReference(
            SyntaxKind.TYPE_REFERENCE, self.span(ts_node),
            name="".join(name.split()), file_name=self.file_name,
        )
        self.convert_children(ts_node, ref)
        return ref

    # ── interfaces ───────────────────────────────────────────────────

    def interface_node(self, ts_node: ts.Node) -> InterfaceNode:
        iface = InterfaceNode(
            SyntaxKind.INTERFACE_DECLARATION,
            self.span(ts_node),
            name=self.node_text(ts_node.child_by_field_name("name")),
        )
        for child in ts_node.named_children:
            if child.type == "extends_type_clause":
                for value in child.named_children:
                    ref = self.type_reference(value)
                    iface.add_child(ref)
                    iface.extends.append(ref)
        body = ts_node.child_by_field_name("body")
        if body is not None:
            for child in body.named_children:
                if child.type in ("property_signature", "method_signature"):
                    name = self.member_name(child.child_by_field_name("name"))
                    if name is not None and not name.computed:
                        iface.member_names.append(name.text)
            self.convert_children(body, iface)
        return iface

    # ── members ──────────────────────────────────────────────────────

    def member(
        self,
        ts_node: ts.Node,
        docs: Sequence[DocComment],
        decorator_start: Optional[int],
    ) -> ClassMemberNode:
        span = self.span(ts_node)
        if decorator_start is not None and decorator_start < span.start:
            span = Span(decorator_start, span.end)
        name = self.member_name(ts_node.child_by_field_name("name"))
        member = ClassMemberNode(
            self.member_kind(ts_node, name),
            span,
            name=name,
            modifiers=self.modifiers(ts_node),
            docs=list(docs),
        )
        for child in ts_node.named_children:
            if child.type in ("accessibility_modifier", "override_modifier", "comment"):
                continue
            if name is not None and self.span(child) == name.span:
                continue
            member.add_child(self.convert(child))
        return member

    def member_kind(self, ts_node: ts.Node, name: Optional[MemberName]) -> SyntaxKind:
        if ts_node.type == "index_signature":
            return SyntaxKind.INDEX_SIGNATURE
        if ts_node.type == "class_static_block":
            return SyntaxKind.STATIC_BLOCK
        if ts_node.type == "public_field_definition":
            return SyntaxKind.PROPERTY
        tokens = {c.type for c in ts_node.children if not c.is_named}
        if "get" in tokens:
            return SyntaxKind.GET_ACCESSOR
        if "set" in tokens:
            return SyntaxKind.SET_ACCESSOR
        if name is not None and not name.computed and name.text == "constructor":
            return SyntaxKind.CONSTRUCTOR
        return SyntaxKind.METHOD

    def member_name(self, ts_node: Optional[ts.Node]) -> Optional[MemberName]:
        if ts_node is None:
            return None
        span = self.span(ts_node)
        text = self.node_text(ts_node)
        if ts_node.type == "computed_property_name":
            return MemberName(text, span, computed=True)
        if ts_node.type == "string" and len(text) >= 2:
            text = text[1:-1]
        return MemberName(text, span)

    def modifiers(self, ts_node: ts.Node) -> FrozenSet[Modifier]:
        found = set()
        for child in ts_node.children:
            if child.type in _MODIFIER_TOKENS:
                found.add(_MODIFIER_TOKENS[child.type])
            elif child.type == "accessibility_modifier":
                found.add(_ACCESSIBILITY.get(self.node_text(child).strip(), Modifier.PUBLIC))
        return frozenset(found)
