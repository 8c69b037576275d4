"""
override_jsdoc/fixes.py
═══════════════════════

Applies the edits attached to diagnostics.

  1. An edit lying inside a deletion is *subsumed*: the deletion removes
     its target anyway (a misspelled tag that is also extraneous gets a
     rename and a delete).
  2. The remaining edits are applied back-to-front so that earlier
     offsets stay valid.  An edit that overlaps one already applied is
     *skipped*; running the analysis again reports what is left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from override_jsdoc.diagnostics import Diagnostic, EditKind, TextEdit

_log = logging.getLogger(__name__)


@dataclass
class FixResult:
    text: str
    applied: List[TextEdit] = field(default_factory=list)
    skipped: List[TextEdit] = field(default_factory=list)
    subsumed: List[TextEdit] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def _inside_deletion(edit: TextEdit, edits: List[TextEdit]) -> bool:
    for other in edits:
        if other.kind is not EditKind.DELETE or other == edit:
            continue
        if other.span.contains(edit.span):
            # An insertion at either boundary is outside the deleted text.
            if edit.span.width == 0 and edit.span.start in (other.span.start, other.span.end):
                continue
            return True
    return False


def _conflicts(edit: TextEdit, applied: Iterable[TextEdit]) -> bool:
    for other in applied:
        if edit.span.overlaps(other.span) or other.span.overlaps(edit.span):
            return True
        # Two insertions at one offset would be applied in arbitrary order.
        if edit.span == other.span:
            return True
    return False


def apply_edits(text: str, edits: Iterable[TextEdit]) -> FixResult:
    """Apply *edits* to *text*; see the module docstring."""
    pending = list(dict.fromkeys(edits))
    result = FixResult(text=text)
    kept: List[TextEdit] = []
    for edit in pending:
        if _inside_deletion(edit, pending):
            result.subsumed.append(edit)
        else:
            kept.append(edit)

    for edit in sorted(kept, key=lambda e: (e.span.start, e.span.end), reverse=True):
        if edit.span.end > len(text):
            _log.warning("edit %r lies outside the text; skipped", edit)
            result.skipped.append(edit)
            continue
        if _conflicts(edit, result.applied):
            _log.debug("edit %r overlaps an applied edit; skipped", edit)
            result.skipped.append(edit)
            continue
        result.text = edit.apply(result.text)
        result.applied.append(edit)
    return result


def apply_fixes(text: str, diagnostics: Iterable[Diagnostic]) -> FixResult:
    """Apply the fix of every diagnostic that carries one."""
    return apply_edits(text, (d.fix for d in diagnostics if d.fix is not None))
