"""
override_jsdoc — the ``@override`` JSDoc tag rule for TypeScript
================================================================

Checks that an ``@override`` documentation tag on a class member agrees
with the class's actual heritage: members that silently shadow a base
member are reported, and so are ``@override`` tags with no base member
behind them.  Every finding carries a fix.

Core modules
------------
syntax
    Read-only syntax model (spans, nodes, documentation comments).
walker
    Pre-order traversal reaching every class member.
classify
    Member categories (constructor, static, overrideable, …).
tags
    ``@override`` tag scanner.
heritage
    Type-oracle protocol and base-member lookup.
rule
    Decision table and the ``OverrideTagRule`` checker.

Host modules
------------
frontend
    tree-sitter TypeScript parser → syntax model.
jsdoc
    parsimonious grammar for ``/** … */`` comments.
index
    Declaration index used as the type oracle by the CLI.
fixes, suppressions, config
    ``--fix`` support, inline/file/global suppressions, JSON settings.

Quick start
-----------
>>> from override_jsdoc import TypeScriptFrontend, TypeIndex, check_source
>>> source = TypeScriptFrontend().parse(
...     "class A { m() {} }\\nclass B extends A { m() {} }", "b.ts")
>>> index = TypeIndex()
>>> index.add_source_file(source)
2
>>> [d.error_id for d in check_source(source, index)]
['overrideTagMissing']
"""

from __future__ import annotations

__version__: str = "0.3.0"

from override_jsdoc.diagnostics import (  # noqa: E402
    Diagnostic,
    DiagnosticSeverity,
    FindingKind,
    SourceLocation,
    TextEdit,
)
from override_jsdoc.errors import (  # noqa: E402
    ConfigError,
    DocCommentSyntaxError,
    ErrorCode,
    OverrideJsdocError,
    SourceReadError,
    UnresolvableTypeError,
)
from override_jsdoc.fixes import FixResult, apply_fixes  # noqa: E402
from override_jsdoc.frontend import TypeScriptFrontend  # noqa: E402
from override_jsdoc.heritage import ResolvedType, TypeOracle, find_base_declaring  # noqa: E402
from override_jsdoc.index import TypeIndex  # noqa: E402
from override_jsdoc.rule import OverrideTagRule, check_source  # noqa: E402

__all__: list[str] = [
    "__version__",
    "ConfigError",
    "Diagnostic",
    "DiagnosticSeverity",
    "DocCommentSyntaxError",
    "ErrorCode",
    "FindingKind",
    "FixResult",
    "OverrideJsdocError",
    "OverrideTagRule",
    "ResolvedType",
    "SourceLocation",
    "SourceReadError",
    "TextEdit",
    "TypeIndex",
    "TypeOracle",
    "TypeScriptFrontend",
    "UnresolvableTypeError",
    "apply_fixes",
    "check_source",
    "find_base_declaring",
]
