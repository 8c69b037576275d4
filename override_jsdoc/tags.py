"""
override_jsdoc/tags.py
══════════════════════

Documentation tag scanner.

Finds "the" override tag of one member and validates every tag that
looks like one:

  * a tag *matches* when its name passes ``^overr?ides?$`` ignoring case
    (``@Override``, ``@overide``, ``@overrides`` … are intended overrides)
  * the first match is the member's override tag; if its spelling is
    not exactly ``override`` a correction is reported
  * every later match is a duplicate and is reported on the spot

The scan is a fold over ``(comment, tag)`` pairs in document order with
the accumulator :class:`TagScan`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from override_jsdoc.context import RuleContext
from override_jsdoc.diagnostics import Diagnostic, FindingKind, TextEdit
from override_jsdoc.syntax import DocComment, DocTag

OVERRIDE_TAG_PATTERN = re.compile(r"^overr?ides?$", re.IGNORECASE)
OVERRIDE_TAG_EXACT = "override"
OVERRIDE_TAG_COMMENT = f"/** @{OVERRIDE_TAG_EXACT} */ "


def is_override_tag(name: str) -> bool:
    return OVERRIDE_TAG_PATTERN.match(name) is not None


@dataclass(frozen=True)
class TagScan:
    """Accumulator of the scan: the first match and findings so far."""
    found: Optional[DocTag] = None
    diagnostics: Tuple[Diagnostic, ...] = ()

    def emit(self, diagnostic: Diagnostic) -> TagScan:
        return replace(self, diagnostics=self.diagnostics + (diagnostic,))


def _iter_tags(docs: Iterable[DocComment]) -> Iterator[Tuple[DocComment, DocTag]]:
    for comment in docs:
        for tag in comment.tags:
            yield comment, tag


def delete_tag(tag: DocTag) -> TextEdit:
    return TextEdit.delete(tag.span.start, tag.span.end)


_BARE_COMMENT_RE = re.compile(r"/\*\*[\s*]*\*/")


def _bare_after_removal(text: str, comment: DocComment, tag: DocTag) -> bool:
    """True when removing *tag* leaves only leaders and whitespace."""
    base = comment.span.start
    rest = text[base:tag.span.start] + text[tag.span.end:comment.span.end]
    return _BARE_COMMENT_RE.fullmatch(rest) is not None


def delete_occurrence(ctx: RuleContext, comment: DocComment, tag: DocTag) -> TextEdit:
    """Delete a duplicate tag; a comment holding nothing else goes with it."""
    if len(comment.tags) != 1 or not _bare_after_removal(ctx.source.text, comment, tag):
        return delete_tag(tag)
    end = comment.span.end
    if ctx.source.text[end:end + 1] in (" ", "\t"):
        end += 1
    return TextEdit.delete(comment.span.start, end)


def _step(ctx: RuleContext):
    def step(acc: TagScan, item: Tuple[DocComment, DocTag]) -> TagScan:
        comment, tag = item
        if not is_override_tag(tag.name):
            return acc
        if acc.found is not None:
            return acc.emit(ctx.diagnostic(
                FindingKind.DUPLICATE,
                "@override jsdoc tag already specified",
                tag.name_span,
                delete_occurrence(ctx, comment, tag),
            ))
        acc = replace(acc, found=tag)
        if tag.name != OVERRIDE_TAG_EXACT:
            acc = acc.emit(ctx.diagnostic(
                FindingKind.SPELLING,
                f"Syntax error: '{tag.name}' should be '{OVERRIDE_TAG_EXACT}' (case sensitive)",
                tag.span,
                TextEdit.replace(tag.name_span.start, tag.name_span.end, OVERRIDE_TAG_EXACT),
            ))
        return acc
    return step


def scan_override_tags(docs: Sequence[DocComment], ctx: RuleContext) -> TagScan:
    """Scan a member's documentation comments; see the module docstring."""
    return reduce(_step(ctx), _iter_tags(docs), TagScan())
