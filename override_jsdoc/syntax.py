"""
override_jsdoc/syntax.py
════════════════════════

Read-only syntax model consumed by the override rule.

The rule never parses anything itself: a front-end (see
:mod:`override_jsdoc.frontend`) or a test builds these nodes, and the
rule walks them.  Spans are half-open character offsets into the text
of the owning :class:`SourceFile`.

Node hierarchy
──────────────

  SyntaxNode
  ├── ClassNode         class declaration / class expression
  ├── InterfaceNode     interface declaration (declaration index only)
  ├── ClassMemberNode   constructor, method, property, accessors,
  │                     index signature, static block
  └── TypeReference     one entry of a heritage clause
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, Iterator, List, Optional, Tuple


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — SPANS AND KINDS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, order=True)
class Span:
    """Half-open ``[start, end)`` range of character offsets."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span [{self.start}, {self.end})")

    @property
    def width(self) -> int:
        return self.end - self.start

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end


class SyntaxKind(Enum):
    SOURCE_FILE = auto()
    CLASS_DECLARATION = auto()
    CLASS_EXPRESSION = auto()
    INTERFACE_DECLARATION = auto()
    CONSTRUCTOR = auto()
    METHOD = auto()
    PROPERTY = auto()
    GET_ACCESSOR = auto()
    SET_ACCESSOR = auto()
    INDEX_SIGNATURE = auto()
    STATIC_BLOCK = auto()
    TYPE_REFERENCE = auto()
    OTHER = auto()


CLASS_KINDS: FrozenSet[SyntaxKind] = frozenset({
    SyntaxKind.CLASS_DECLARATION,
    SyntaxKind.CLASS_EXPRESSION,
})

MEMBER_KINDS: FrozenSet[SyntaxKind] = frozenset({
    SyntaxKind.CONSTRUCTOR,
    SyntaxKind.METHOD,
    SyntaxKind.PROPERTY,
    SyntaxKind.GET_ACCESSOR,
    SyntaxKind.SET_ACCESSOR,
    SyntaxKind.INDEX_SIGNATURE,
    SyntaxKind.STATIC_BLOCK,
})

# Members able to shadow a same-named base member.
OVERRIDEABLE_KINDS: FrozenSet[SyntaxKind] = frozenset({
    SyntaxKind.METHOD,
    SyntaxKind.PROPERTY,
    SyntaxKind.GET_ACCESSOR,
    SyntaxKind.SET_ACCESSOR,
})


class Modifier(Enum):
    STATIC = "static"
    ABSTRACT = "abstract"
    READONLY = "readonly"
    ASYNC = "async"
    DECLARE = "declare"
    OVERRIDE = "override"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ACCESSOR = "accessor"


class HeritageToken(Enum):
    EXTENDS = "extends"
    IMPLEMENTS = "implements"


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — DOCUMENTATION COMMENTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DocTag:
    """
    One ``@tag`` occurrence inside a documentation comment.

    Attributes
    ----------
    name         : raw tag-name text, without the ``@``
    name_span    : span of the tag name
    span         : span of the whole occurrence, ``@`` through its text
    comment_span : span of the enclosing ``/** … */`` comment
    """
    name: str
    name_span: Span
    span: Span
    comment_span: Span


@dataclass(frozen=True)
class DocComment:
    """A ``/** … */`` comment attached to a member."""
    span: Span
    tags: Tuple[DocTag, ...] = ()


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — NODES
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class SyntaxNode:
    kind: SyntaxKind
    span: Span
    children: List[SyntaxNode] = field(default_factory=list, repr=False)
    parent: Optional[SyntaxNode] = field(default=None, repr=False)

    def add_child(self, child: SyntaxNode) -> SyntaxNode:
        child.parent = self
        self.children.append(child)
        return child

    def iter_children(self) -> Iterator[SyntaxNode]:
        return iter(self.children)

    @property
    def is_class(self) -> bool:
        return self.kind in CLASS_KINDS

    @property
    def is_class_member(self) -> bool:
        return self.kind in MEMBER_KINDS


@dataclass(frozen=True)
class MemberName:
    """Name of a class member; computed names carry no static text."""
    text: str
    span: Span
    computed: bool = False

    @property
    def static_text(self) -> Optional[str]:
        return None if self.computed else self.text


@dataclass(eq=False)
class ClassMemberNode(SyntaxNode):
    name: Optional[MemberName] = None
    modifiers: FrozenSet[Modifier] = frozenset()
    docs: List[DocComment] = field(default_factory=list)

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers


@dataclass(eq=False)
class TypeReference(SyntaxNode):
    """A base type listed in a heritage clause, without type arguments."""
    name: str = ""
    file_name: str = ""


@dataclass
class HeritageClause:
    token: HeritageToken
    types: List[TypeReference] = field(default_factory=list)


@dataclass(eq=False)
class ClassNode(SyntaxNode):
    name: Optional[str] = None
    # ``None`` when the class has no heritage clause at all.
    heritage: Optional[List[HeritageClause]] = None
    # Constructor parameters that also declare instance properties.
    parameter_properties: List[str] = field(default_factory=list)

    def members(self) -> List[ClassMemberNode]:
        return [c for c in self.children if isinstance(c, ClassMemberNode)]

    def base_references(self, token: Optional[HeritageToken] = None) -> List[TypeReference]:
        refs: List[TypeReference] = []
        for clause in self.heritage or ():
            if token is None or clause.token is token:
                refs.extend(clause.types)
        return refs


@dataclass(eq=False)
class InterfaceNode(SyntaxNode):
    name: str = ""
    extends: List[TypeReference] = field(default_factory=list)
    member_names: List[str] = field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — SOURCE FILE
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class SourceFile:
    """The text of one file together with its syntax tree."""
    file_name: str
    text: str
    root: SyntaxNode
    _line_starts: List[int] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        starts = [0]
        for index, char in enumerate(self.text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts = starts

    def line_col(self, offset: int) -> Tuple[int, int]:
        """Return the 1-based ``(line, column)`` of a character offset."""
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line] + 1

    def slice(self, span: Span) -> str:
        return self.text[span.start:span.end]

    def line_text(self, line: int) -> str:
        if line < 1 or line > len(self._line_starts):
            return ""
        start = self._line_starts[line - 1]
        end = self.text.find("\n", start)
        return self.text[start:] if end < 0 else self.text[start:end]
