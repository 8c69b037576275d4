# override_jsdoc/errors.py
"""
Error types for the override-jsdoc toolchain.

None of these ever abort the analysis of a file from inside the rule:
the rule itself only produces advisory ``Diagnostic`` objects.  The
exceptions below are raised at the edges (configuration loading,
reading sources, parsing documentation comments, resolving heritage
references) and are either reported by the CLI or degraded by the
caller.

Error Hierarchy:
────────────────
  OverrideJsdocError (base)
  ├── ConfigError            - malformed configuration file / values
  ├── SourceReadError        - a source file cannot be read or parsed
  ├── DocCommentSyntaxError  - a ``/** … */`` comment does not parse
  └── UnresolvableTypeError  - a heritage reference has no resolved type

Error Codes:
────────────
  - 0001-0999: configuration
  - 1000-1999: source input
  - 2000-2999: documentation comments
  - 3000-3999: type resolution
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Dict, Optional


@unique
class ErrorCode(Enum):
    """Structured error codes (``OJT-XXXX``)."""

    CONFIG_NOT_FOUND = 1
    CONFIG_INVALID_JSON = 2
    CONFIG_INVALID_VALUE = 3

    SOURCE_NOT_FOUND = 1000
    SOURCE_UNREADABLE = 1001
    SOURCE_UNSUPPORTED = 1002

    DOC_COMMENT_SYNTAX = 2000

    TYPE_UNRESOLVABLE = 3000

    @property
    def code(self) -> str:
        return f"OJT-{self.value:04d}"


class OverrideJsdocError(Exception):
    """Base class of every error raised by this package."""

    default_code: ErrorCode = ErrorCode.CONFIG_INVALID_VALUE

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.hint = hint

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "code": self.code.code,
            "message": self.message,
        }
        if self.hint:
            result["hint"] = self.hint
        return result

    def __str__(self) -> str:
        text = f"[{self.code.code}] {self.message}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text


class ConfigError(OverrideJsdocError):
    """Raised when a configuration file or value is invalid."""

    default_code = ErrorCode.CONFIG_INVALID_VALUE


class SourceReadError(OverrideJsdocError):
    """Raised when a source file cannot be read or handed to the parser."""

    default_code = ErrorCode.SOURCE_UNREADABLE


class DocCommentSyntaxError(OverrideJsdocError):
    """Raised when a documentation comment cannot be parsed into tags."""

    default_code = ErrorCode.DOC_COMMENT_SYNTAX

    def __init__(self, message: str, offset: int = 0, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.offset = offset


class UnresolvableTypeError(OverrideJsdocError):
    """Raised by a type oracle that cannot resolve a heritage reference.

    The heritage resolver treats it exactly like a ``None`` result: the
    reference contributes no members.
    """

    default_code = ErrorCode.TYPE_UNRESOLVABLE

    def __init__(self, type_name: str, **kwargs: Any) -> None:
        super().__init__(f"cannot resolve type '{type_name}'", **kwargs)
        self.type_name = type_name
