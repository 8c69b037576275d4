"""Per-file state of one rule application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from override_jsdoc.diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
    FindingKind,
    SourceLocation,
    TextEdit,
)
from override_jsdoc.heritage import TypeOracle
from override_jsdoc.syntax import SourceFile, Span


@dataclass
class RuleContext:
    """
    Everything one file's analysis needs, passed explicitly.

    A fresh context is built per file, so independent files never share
    mutable state.

    Attributes
    ----------
    source      : the file under analysis
    oracle      : type-resolution oracle used for heritage lookup
    severity    : severity assigned to every finding
    rule_name   : name recorded on each diagnostic
    diagnostics : findings reported so far, in report order
    """
    source: SourceFile
    oracle: TypeOracle
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    rule_name: str = "override-jsdoc-tag"
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def location(self, offset: int) -> SourceLocation:
        line, column = self.source.line_col(offset)
        return SourceLocation(file=self.source.file_name, line=line, column=column)

    def diagnostic(
        self,
        kind: FindingKind,
        message: str,
        span: Span,
        fix: Optional[TextEdit] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Diagnostic:
        """Build a diagnostic anchored at *span* without recording it."""
        return Diagnostic(
            kind=kind,
            message=message,
            severity=self.severity,
            span=span,
            location=self.location(span.start),
            fix=fix,
            rule_name=self.rule_name,
            extra=extra or {},
        )

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def report_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)
