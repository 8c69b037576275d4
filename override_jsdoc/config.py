"""
override_jsdoc/config.py
════════════════════════

Configuration for the command-line host.

A project keeps its settings in ``.override-jsdoc.json``, found by
walking up from the working directory (or given with ``--config``)::

    {
      "severity": "warning",
      "suppress": ["overrideTagSpelling"],
      "exclude": ["**/generated/*.ts"],
      "extensions": [".ts", ".tsx"],
      "index_sources": true,
      "types": {
        "Component": {"members": ["render", "setState"]},
        "PureComponent": {"extends": ["Component"]}
      }
    }

``types`` declares base types that live outside the analysed files
(library classes), see :mod:`override_jsdoc.index`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from override_jsdoc.diagnostics import DiagnosticSeverity, FindingKind
from override_jsdoc.errors import ConfigError, ErrorCode

_log = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".override-jsdoc.json"
DEFAULT_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts")


@dataclass
class LintConfig:
    """Settings of one run."""
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    suppress: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    index_sources: bool = True
    types: Dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        known = {k.value for k in FindingKind} | {"*"}
        for eid in self.suppress:
            if eid not in known:
                warnings.append(f"suppress: unknown error id '{eid}'")
        for ext in self.extensions:
            if not ext.startswith("."):
                warnings.append(f"extensions: '{ext}' does not start with '.'")
        if not self.extensions:
            warnings.append("extensions is empty; no file will be analysed")
        return warnings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], path: Optional[str] = None) -> LintConfig:
        unknown = set(data) - {"severity", "suppress", "exclude", "extensions",
                               "index_sources", "types"}
        if unknown:
            _log.warning("%s: ignoring unknown key(s): %s",
                         path or "config", ", ".join(sorted(unknown)))
        config = cls(path=path)
        if "severity" in data:
            try:
                config.severity = DiagnosticSeverity.parse(_expect(data, "severity", str))
            except ValueError as exc:
                raise ConfigError(str(exc), code=ErrorCode.CONFIG_INVALID_VALUE) from None
        for key in ("suppress", "exclude", "extensions"):
            if key in data:
                value = _expect(data, key, list)
                if not all(isinstance(item, str) for item in value):
                    raise ConfigError(f"'{key}' must be a list of strings")
                setattr(config, key, list(value))
        if "index_sources" in data:
            config.index_sources = _expect(data, "index_sources", bool)
        if "types" in data:
            config.types = dict(_expect(data, "types", dict))
        return config


def _expect(data: Mapping[str, Any], key: str, kind: type) -> Any:
    value = data[key]
    if not isinstance(value, kind):
        raise ConfigError(
            f"'{key}' must be of type {kind.__name__}, got {type(value).__name__}",
            code=ErrorCode.CONFIG_INVALID_VALUE,
        )
    return value


def load_json(path: str) -> Dict[str, Any]:
    """Read a JSON object from *path*, raising :class:`ConfigError`."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(
            f"configuration file not found: {path}", code=ErrorCode.CONFIG_NOT_FOUND,
        ) from None
    except json.JSONDecodeError as exc:
        raise ConfigError(
            f"{path}: invalid JSON at line {exc.lineno}: {exc.msg}",
            code=ErrorCode.CONFIG_INVALID_JSON,
        ) from exc
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}", code=ErrorCode.CONFIG_NOT_FOUND) from exc
    if not isinstance(data, dict):
        raise ConfigError(
            f"{path}: top-level value must be an object",
            code=ErrorCode.CONFIG_INVALID_VALUE,
        )
    return data


def load_config(path: str) -> LintConfig:
    config = LintConfig.from_dict(load_json(path), path=path)
    for warning in config.validate():
        _log.warning("%s: %s", path, warning)
    return config


def discover_config(start: Optional[str] = None) -> Optional[str]:
    """Return the nearest ``.override-jsdoc.json`` at or above *start*."""
    directory = os.path.abspath(start or os.getcwd())
    while True:
        candidate = os.path.join(directory, CONFIG_FILE_NAME)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(directory)
        if parent == directory:
            return None
        directory = parent
