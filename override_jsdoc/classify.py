"""
override_jsdoc/classify.py
══════════════════════════

Member classifier: maps a class member to the single category that
decides which check applies.

  constructor                         → CONSTRUCTOR
  method / property / get / set  ─┬─ static            → STATIC
                                  ├─ parent not class  → DETACHED
                                  ├─ computed name     → UNNAMED
                                  └─ otherwise         → OVERRIDEABLE
  anything else (index signature, static block) → NON_OVERRIDEABLE
"""

from __future__ import annotations

from enum import Enum

from override_jsdoc.syntax import (
    OVERRIDEABLE_KINDS,
    ClassMemberNode,
    ClassNode,
    SyntaxKind,
)


class MemberCategory(Enum):
    CONSTRUCTOR = "constructor"
    OVERRIDEABLE = "overrideable"
    STATIC = "static"
    DETACHED = "detached"
    UNNAMED = "unnamed"
    NON_OVERRIDEABLE = "non-overrideable"

    @property
    def needs_heritage(self) -> bool:
        return self is MemberCategory.OVERRIDEABLE


def classify_member(member: ClassMemberNode) -> MemberCategory:
    if member.kind is SyntaxKind.CONSTRUCTOR:
        return MemberCategory.CONSTRUCTOR
    if member.kind not in OVERRIDEABLE_KINDS:
        return MemberCategory.NON_OVERRIDEABLE
    if member.is_static:
        return MemberCategory.STATIC
    if not isinstance(member.parent, ClassNode) or not member.parent.is_class:
        return MemberCategory.DETACHED
    if member.name is None or member.name.static_text is None:
        return MemberCategory.UNNAMED
    return MemberCategory.OVERRIDEABLE
