"""
override_jsdoc/diagnostics.py
═════════════════════════════

Diagnostic model shared by the rule, the fixer and the CLI.

A diagnostic is advisory output: an anchor span, a message and, for
every finding this rule produces, one :class:`TextEdit` that repairs
it.  Applying edits is the host's job (see :mod:`override_jsdoc.fixes`).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from override_jsdoc.syntax import Span


class DiagnosticSeverity(Enum):
    """Severity levels of a finding."""
    ERROR = "error"
    WARNING = "warning"
    STYLE = "style"
    INFORMATION = "information"

    @classmethod
    def parse(cls, value: str) -> DiagnosticSeverity:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown severity '{value}' "
                f"(expected one of: {', '.join(s.value for s in cls)})"
            ) from None


class FindingKind(Enum):
    """Every finding the override rule can report; value is the error id."""
    SPELLING = "overrideTagSpelling"
    DUPLICATE = "overrideTagDuplicate"
    EXTRANEOUS = "overrideTagExtraneous"
    NO_BASE = "overrideTagNoBase"
    MISSING = "overrideTagMissing"


class EditKind(Enum):
    INSERT = "insert"
    DELETE = "delete"
    REPLACE = "replace"


@dataclass(frozen=True)
class TextEdit:
    """
    One source edit.  ``span`` is empty for insertions, ``text`` is empty
    for deletions.  Build edits with :meth:`insert`, :meth:`delete` and
    :meth:`replace`.
    """
    kind: EditKind
    span: Span
    text: str = ""

    @classmethod
    def insert(cls, offset: int, text: str) -> TextEdit:
        return cls(EditKind.INSERT, Span(offset, offset), text)

    @classmethod
    def delete(cls, start: int, end: int) -> TextEdit:
        return cls(EditKind.DELETE, Span(start, end))

    @classmethod
    def replace(cls, start: int, end: int, text: str) -> TextEdit:
        return cls(EditKind.REPLACE, Span(start, end), text)

    def apply(self, text: str) -> str:
        return text[:self.span.start] + self.text + text[self.span.end:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "start": self.span.start,
            "end": self.span.end,
            "text": self.text,
        }


@dataclass(frozen=True)
class SourceLocation:
    """A specific point in source code."""
    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.column:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding.

    Attributes
    ----------
    kind      : FindingKind (its value is the error id)
    message   : human-readable description
    severity  : DiagnosticSeverity
    span      : anchor span in the file text
    location  : line/column of the anchor start
    fix       : edit repairing the finding, if any
    rule_name : name of the rule that produced this
    """
    kind: FindingKind
    message: str
    severity: DiagnosticSeverity
    span: Span
    location: SourceLocation
    fix: Optional[TextEdit] = None
    rule_name: str = "override-jsdoc-tag"
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def error_id(self) -> str:
        return self.kind.value

    @property
    def file(self) -> str:
        return self.location.file

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "file": self.location.file,
            "linenr": self.location.line,
            "column": self.location.column,
            "severity": self.severity.value,
            "message": self.message,
            "errorId": self.error_id,
            "rule": self.rule_name,
            "start": self.span.start,
            "end": self.span.end,
        }
        if self.fix is not None:
            result["fix"] = self.fix.to_dict()
        return result

    def to_json_str(self) -> str:
        return json.dumps(self.to_dict())

    def to_gcc_format(self) -> str:
        """GCC-style diagnostic string: file:line:col: severity: message [id]."""
        return f"{self.location}: {self.severity.value}: {self.message} [{self.error_id}]"

    def __str__(self) -> str:
        return self.to_gcc_format()
