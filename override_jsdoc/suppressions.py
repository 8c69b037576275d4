"""
override_jsdoc/suppressions.py
══════════════════════════════

Diagnostic suppressions from three sources:

  1. Inline comments in the analysed file::

         foo() {}  // override-jsdoc-disable-line
         // override-jsdoc-disable-next-line overrideTagMissing
         bar() {}

     Ids are separated by spaces or commas; no ids means every id.
  2. File-level suppressions: ``fnmatch`` patterns on the file name.
  3. Global suppressions from configuration or the command line.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from fnmatch import fnmatch
from typing import Dict, Iterable, List, Set, Tuple

from override_jsdoc.diagnostics import Diagnostic
from override_jsdoc.syntax import SourceFile

_log = logging.getLogger(__name__)

ANY_ID = "*"

_INLINE_RE = re.compile(
    r"//\s*override-jsdoc-disable-(?P<which>next-line|line)\b(?P<ids>[^\r\n]*)"
)


def _parse_ids(raw: str) -> Set[str]:
    ids = {part for part in re.split(r"[\s,]+", raw.strip()) if part}
    return ids or {ANY_ID}


class SuppressionManager:
    """
    Usage
    -----
    >>> sm = SuppressionManager()
    >>> sm.load_inline_suppressions(source)
    >>> sm.add_file_suppression("overrideTagMissing", "legacy/*.ts")
    >>> sm.add_global_suppression("overrideTagSpelling")
    >>> diagnostics = sm.filter_diagnostics(diagnostics)
    """

    def __init__(self) -> None:
        # (file, line) → error ids suppressed on that line
        self._inline: Dict[Tuple[str, int], Set[str]] = defaultdict(set)
        # file pattern → error ids
        self._file_level: Dict[str, Set[str]] = defaultdict(set)
        self._global: Set[str] = set()

    def load_inline_suppressions(self, source: SourceFile) -> int:
        """Record the suppression comments of *source*; returns their count."""
        count = 0
        for match in _INLINE_RE.finditer(source.text):
            line, _ = source.line_col(match.start())
            if match.group("which") == "next-line":
                line += 1
            self._inline[(source.file_name, line)].update(_parse_ids(match.group("ids")))
            count += 1
        if count:
            _log.debug("%s: %d inline suppression(s)", source.file_name, count)
        return count

    def add_file_suppression(self, error_id: str, file_pattern: str) -> None:
        self._file_level[file_pattern].add(error_id)

    def add_global_suppression(self, error_id: str) -> None:
        self._global.add(error_id)

    def is_suppressed(self, diag: Diagnostic) -> bool:
        eid = diag.error_id
        if eid in self._global or ANY_ID in self._global:
            return True

        loc = diag.location
        ids = self._inline.get((loc.file, loc.line), ())
        if eid in ids or ANY_ID in ids:
            return True

        for pattern, ids in self._file_level.items():
            if eid not in ids and ANY_ID not in ids:
                continue
            if pattern == loc.file or loc.file.endswith(pattern) or fnmatch(loc.file, pattern):
                return True
        return False

    def filter_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
        """Return only non-suppressed diagnostics."""
        return [d for d in diagnostics if not self.is_suppressed(d)]
