"""
override_jsdoc/rule.py
══════════════════════

The ``override-jsdoc-tag`` rule.

Uses the ``@override`` JSDoc tag to prevent override mistakes: it
catches members that silently shadow a base member, and members marked
``@override`` although no base member of that name exists.

Pipeline per member
───────────────────

  walker ──► classify_member ──┬──► scan_override_tags   (tag found?)
                               └──► find_base_declaring  (base found?)
                                         │  only for OVERRIDEABLE
                                         ▼
                                  DECISION_TABLE ──► Diagnostic + fix

``DECISION_TABLE`` is the only place that decides whether a member is
reported; ``_FINDINGS`` describes how each outcome is rendered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from itertools import product
from typing import ClassVar, Dict, FrozenSet, List, Optional, Tuple

from override_jsdoc.classify import MemberCategory, classify_member
from override_jsdoc.context import RuleContext
from override_jsdoc.diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
    FindingKind,
    TextEdit,
)
from override_jsdoc.heritage import TypeOracle, find_base_declaring
from override_jsdoc.syntax import ClassMemberNode, ClassNode, DocTag, SourceFile
from override_jsdoc.tags import OVERRIDE_TAG_COMMENT, delete_tag, scan_override_tags
from override_jsdoc.walker import walk

_log = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — DECISION TABLE
# ═════════════════════════════════════════════════════════════════════════

class Outcome(Enum):
    NONE = "none"
    NO_BASE = "no-base"
    MISSING_TAG = "missing-tag"
    EXTRANEOUS_STATIC = "extraneous-static"
    EXTRANEOUS_CONSTRUCTOR = "extraneous-constructor"
    EXTRANEOUS = "extraneous"


def _build_decision_table() -> Dict[Tuple[MemberCategory, bool, bool], Outcome]:
    C = MemberCategory
    table: Dict[Tuple[MemberCategory, bool, bool], Outcome] = {
        key: Outcome.NONE for key in product(C, (False, True), (False, True))
    }
    table[(C.OVERRIDEABLE, True, False)] = Outcome.NO_BASE
    table[(C.OVERRIDEABLE, False, True)] = Outcome.MISSING_TAG
    # Categories below never look up the heritage chain: base is always False.
    table[(C.STATIC, True, False)] = Outcome.EXTRANEOUS_STATIC
    table[(C.CONSTRUCTOR, True, False)] = Outcome.EXTRANEOUS_CONSTRUCTOR
    table[(C.NON_OVERRIDEABLE, True, False)] = Outcome.EXTRANEOUS
    return table


DECISION_TABLE: Dict[Tuple[MemberCategory, bool, bool], Outcome] = _build_decision_table()


@dataclass(frozen=True)
class _Finding:
    kind: FindingKind
    message: str
    anchor_on_name: bool
    insert_tag: bool


_FINDINGS: Dict[Outcome, _Finding] = {
    Outcome.NO_BASE: _Finding(
        FindingKind.NO_BASE,
        "Member with @override keyword does not override any base class member",
        anchor_on_name=True, insert_tag=False,
    ),
    Outcome.MISSING_TAG: _Finding(
        FindingKind.MISSING,
        "Member is overriding a base member. "
        "Use the @override JSDoc tag if the override is intended",
        anchor_on_name=True, insert_tag=True,
    ),
    Outcome.EXTRANEOUS_STATIC: _Finding(
        FindingKind.EXTRANEOUS,
        "Extraneous override tag: static members cannot override",
        anchor_on_name=False, insert_tag=False,
    ),
    Outcome.EXTRANEOUS_CONSTRUCTOR: _Finding(
        FindingKind.EXTRANEOUS,
        "Extraneous override tag: constructors always override the parent",
        anchor_on_name=False, insert_tag=False,
    ),
    Outcome.EXTRANEOUS: _Finding(
        FindingKind.EXTRANEOUS,
        "Extraneous override tag",
        anchor_on_name=False, insert_tag=False,
    ),
}


def decide(category: MemberCategory, tag_found: bool, base_found: bool) -> Outcome:
    return DECISION_TABLE[(category, tag_found, base_found)]


def _render(
    outcome: Outcome,
    member: ClassMemberNode,
    tag: Optional[DocTag],
    ctx: RuleContext,
    base_name: Optional[str],
) -> Optional[Diagnostic]:
    finding = _FINDINGS.get(outcome)
    if finding is None:
        return None
    if finding.anchor_on_name and member.name is not None:
        anchor = member.name.span
    elif tag is not None:
        anchor = tag.span
    else:
        anchor = member.span
    fix: Optional[TextEdit] = None
    if finding.insert_tag:
        fix = TextEdit.insert(member.span.start, OVERRIDE_TAG_COMMENT)
    elif tag is not None:
        fix = delete_tag(tag)
    extra = {"base": base_name} if base_name else None
    return ctx.diagnostic(finding.kind, finding.message, anchor, fix, extra)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — RULE
# ═════════════════════════════════════════════════════════════════════════

class OverrideTagRule:
    """
    Checks ``@override`` JSDoc tags against the heritage of each class.

    Usage
    -----
    >>> rule = OverrideTagRule()
    >>> diagnostics = rule.apply(source_file, oracle)
    """

    name: ClassVar[str] = "override-jsdoc-tag"
    description: ClassVar[str] = "Uses the @override JSDoc tag to prevent override mistakes"
    description_details: ClassVar[str] = (
        "Prevents accidental overriding of a base class's method, "
        "as well as missing base methods for intended overrides."
    )
    rationale: ClassVar[str] = "Catches a class of errors that the type checker can not catch."
    error_ids: ClassVar[FrozenSet[str]] = frozenset(k.value for k in FindingKind)
    default_severity: ClassVar[DiagnosticSeverity] = DiagnosticSeverity.ERROR

    def __init__(self, severity: Optional[DiagnosticSeverity] = None) -> None:
        self.severity = severity or self.default_severity

    def apply(self, source: SourceFile, oracle: TypeOracle) -> List[Diagnostic]:
        """Return the diagnostics of one file, in report order."""
        ctx = RuleContext(
            source=source,
            oracle=oracle,
            severity=self.severity,
            rule_name=self.name,
        )
        visited = walk(source.root, lambda member: self.check_member(member, ctx))
        _log.debug(
            "%s: %d member(s) checked, %d finding(s)",
            source.file_name, visited, len(ctx.diagnostics),
        )
        return ctx.diagnostics

    def check_member(self, member: ClassMemberNode, ctx: RuleContext) -> None:
        category = classify_member(member)
        scan = scan_override_tags(member.docs, ctx)
        ctx.report_all(scan.diagnostics)

        base = None
        cls = member.parent
        if category.needs_heritage and member.name is not None and isinstance(cls, ClassNode):
            base = find_base_declaring(cls, member.name.text, ctx.oracle)

        outcome = decide(category, scan.found is not None, base is not None)
        diagnostic = _render(outcome, member, scan.found, ctx, base.name if base else None)
        if diagnostic is not None:
            ctx.report(diagnostic)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


def check_source(
    source: SourceFile,
    oracle: TypeOracle,
    severity: Optional[DiagnosticSeverity] = None,
) -> List[Diagnostic]:
    """Convenience wrapper: apply the rule to one file."""
    return OverrideTagRule(severity).apply(source, oracle)
