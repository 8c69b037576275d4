#!/usr/bin/env python3
"""override_jsdoc/__main__.py — command-line host of the override rule.

Usage examples
--------------
    # Check a project (directories are searched for TypeScript files)
    override-jsdoc src/

    # Same, with the explicit command name
    override-jsdoc check src/ lib/widget.ts

    # Apply every available fix in place, then report what is left
    override-jsdoc check src/ --fix

    # Machine-readable output, library base classes from a stub file
    override-jsdoc src/ --format json --types types.json

Exit codes
----------
    0   No error-severity findings.
    1   One or more findings with severity ERROR were emitted.
    2   Infrastructure failure (bad configuration, unreadable file, etc.).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import textwrap
from fnmatch import fnmatch
from typing import Dict, Iterator, List, Optional, Sequence, TextIO

from override_jsdoc import __version__
from override_jsdoc.config import LintConfig, discover_config, load_config, load_json
from override_jsdoc.diagnostics import Diagnostic, DiagnosticSeverity
from override_jsdoc.errors import OverrideJsdocError, SourceReadError
from override_jsdoc.fixes import apply_fixes
from override_jsdoc.frontend import TypeScriptFrontend
from override_jsdoc.index import TypeIndex
from override_jsdoc.rule import OverrideTagRule
from override_jsdoc.suppressions import SuppressionManager
from override_jsdoc.syntax import SourceFile

_log = logging.getLogger("override_jsdoc")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2

# Upper bound on fix/re-check rounds for one file.
_MAX_FIX_PASSES = 5


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``override_jsdoc`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("override_jsdoc")
    root.setLevel(level)
    root.handlers[:] = [handler]


class _Colors:
    """ANSI color codes, disabled when not writing to a TTY."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def _code(self, code: str) -> str:
        return code if self.enabled else ""

    @property
    def RESET(self) -> str:
        return self._code("\033[0m")

    @property
    def BOLD(self) -> str:
        return self._code("\033[1m")

    @property
    def RED(self) -> str:
        return self._code("\033[31m")

    @property
    def GREEN(self) -> str:
        return self._code("\033[32m")

    @property
    def MAGENTA(self) -> str:
        return self._code("\033[35m")

    @property
    def CYAN(self) -> str:
        return self._code("\033[36m")


def _get_colors(stream: TextIO) -> _Colors:
    """Get color codes appropriate for the given stream."""
    is_tty = hasattr(stream, "isatty") and stream.isatty()
    return _Colors(enabled=is_tty and os.environ.get("NO_COLOR") is None)


_SEVERITY_COLOR = {
    DiagnosticSeverity.ERROR: "RED",
    DiagnosticSeverity.WARNING: "MAGENTA",
    DiagnosticSeverity.STYLE: "CYAN",
    DiagnosticSeverity.INFORMATION: "CYAN",
}


def _format_gcc(diag: Diagnostic, colors: _Colors, source: Optional[SourceFile]) -> str:
    c = colors
    sev = getattr(c, _SEVERITY_COLOR[diag.severity])
    text = (
        f"{c.BOLD}{diag.location}: {sev}{diag.severity.value}:{c.RESET}"
        f"{c.BOLD} {diag.message}{c.RESET} [{diag.error_id}]\n"
    )
    if source is not None:
        line = source.line_text(diag.location.line)
        width = max(1, min(diag.span.width, len(line) - diag.location.column + 1))
        text += f"  {line}\n  {' ' * (diag.location.column - 1)}{c.GREEN}^{'~' * (width - 1)}{c.RESET}\n"
    return text


def _emit_diagnostics(
    diagnostics: List[Diagnostic],
    fmt: str,
    stream: TextIO,
    sources: Optional[Dict[str, SourceFile]] = None,
) -> int:
    """Write *diagnostics* to *stream* in the chosen format.

    Returns the count of ERROR-severity diagnostics.
    """
    colors = _get_colors(stream) if fmt != "json" else _Colors(enabled=False)
    sources = sources or {}
    error_count = 0
    for diag in diagnostics:
        if diag.severity is DiagnosticSeverity.ERROR:
            error_count += 1

        if fmt == "json":
            stream.write(diag.to_json_str() + "\n")
        elif fmt == "gcc":
            stream.write(_format_gcc(diag, colors, sources.get(diag.file)))
        else:
            # summary — one line per diagnostic
            stream.write(str(diag) + "\n")

    if fmt == "summary":
        files = len({d.file for d in diagnostics})
        stream.write(f"\n--- {len(diagnostics)} diagnostic(s) in {files} file(s), "
                     f"{error_count} error(s) ---\n")
    return error_count


# ===========================================================================
# File discovery
# ===========================================================================

def _excluded(path: str, config: LintConfig) -> bool:
    rel = os.path.relpath(path)
    return any(fnmatch(rel, pat) or fnmatch(path, pat) for pat in config.exclude)


def _iter_source_paths(paths: Sequence[str], config: LintConfig) -> Iterator[str]:
    """Yield files named on the command line and files under directories."""
    extensions = tuple(ext.lower() for ext in config.extensions)
    for raw in paths:
        if os.path.isfile(raw):
            if not _excluded(raw, config):
                yield raw
            continue
        if not os.path.isdir(raw):
            raise SourceReadError(f"no such file or directory: {raw}")
        for dirpath, dirnames, filenames in os.walk(raw):
            dirnames[:] = sorted(d for d in dirnames if d not in ("node_modules", ".git"))
            for name in sorted(filenames):
                if not name.lower().endswith(extensions):
                    continue
                path = os.path.join(dirpath, name)
                if not _excluded(path, config):
                    yield path


# ===========================================================================
# check command
# ===========================================================================

def _load_settings(args: argparse.Namespace) -> LintConfig:
    path = args.config or discover_config()
    if path is None:
        _log.debug("no configuration file found; using defaults")
        return LintConfig()
    _log.info("using configuration %s", path)
    return load_config(path)


def _build_index(args: argparse.Namespace, config: LintConfig, sources: List[SourceFile]) -> TypeIndex:
    index = TypeIndex()
    index.load_stubs(config.types, origin=config.path or "<config>")
    if args.types:
        index.load_stubs(load_json(args.types), origin=args.types)
    if config.index_sources and not args.no_index:
        for source in sources:
            index.add_source_file(source)
    _log.info("declaration index holds %d type(s)", len(index))
    return index


def _check_one(
    source: SourceFile,
    rule: OverrideTagRule,
    index: TypeIndex,
    config: LintConfig,
) -> List[Diagnostic]:
    suppressions = SuppressionManager()
    for eid in config.suppress:
        suppressions.add_global_suppression(eid)
    suppressions.load_inline_suppressions(source)
    return suppressions.filter_diagnostics(rule.apply(source, index))


def _fix_one(
    source: SourceFile,
    frontend: TypeScriptFrontend,
    rule: OverrideTagRule,
    index: TypeIndex,
    config: LintConfig,
) -> SourceFile:
    """Fix *source* in place on disk; returns the re-parsed result."""
    for _ in range(_MAX_FIX_PASSES):
        result = apply_fixes(source.text, _check_one(source, rule, index, config))
        if not result.changed:
            break
        _log.info("%s: applied %d fix(es), %d skipped",
                  source.file_name, len(result.applied), len(result.skipped))
        try:
            with open(source.file_name, "w", encoding="utf-8") as f:
                f.write(result.text)
        except OSError as exc:
            raise SourceReadError(f"cannot write {source.file_name}: {exc}") from exc
        source = frontend.parse(result.text, source.file_name)
    return source


def cmd_check(args: argparse.Namespace) -> int:
    """Analyse the given paths and report findings."""
    try:
        config = _load_settings(args)
    except OverrideJsdocError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    if args.severity:
        config.severity = DiagnosticSeverity.parse(args.severity)

    frontend = TypeScriptFrontend()
    sources: List[SourceFile] = []
    failures = 0
    try:
        for path in _iter_source_paths(args.paths, config):
            try:
                sources.append(frontend.parse_file(path))
            except SourceReadError as exc:
                _log.error("%s", exc)
                failures += 1
    except SourceReadError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    _log.info("parsed %d file(s)", len(sources))

    try:
        index = _build_index(args, config, sources)
    except OverrideJsdocError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA

    rule = OverrideTagRule(config.severity)
    diagnostics: List[Diagnostic] = []
    by_file: Dict[str, SourceFile] = {}
    for source in sources:
        if args.fix:
            try:
                source = _fix_one(source, frontend, rule, index, config)
            except SourceReadError as exc:
                _log.error("%s", exc)
                failures += 1
        by_file[source.file_name] = source
        diagnostics.extend(_check_one(source, rule, index, config))

    error_count = _emit_diagnostics(diagnostics, args.format, sys.stdout, by_file)
    if failures:
        return EXIT_INFRA
    return EXIT_ERROR if error_count > 0 else EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="override-jsdoc",
        description=(
            f"{OverrideTagRule.description}.\n\n"
            f"{OverrideTagRule.description_details}"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              override-jsdoc src/
              override-jsdoc check src/ --fix
              override-jsdoc src/ --format json --types types.json
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "paths",
        metavar="PATH",
        nargs="+",
        help="TypeScript files or directories to check.",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply fixes in place, then report the remaining findings.",
    )
    parser.add_argument(
        "-f", "--format",
        choices=["gcc", "json", "summary"],
        default="gcc",
        help="Output format (default: gcc).",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        default=None,
        help="Configuration file (default: nearest .override-jsdoc.json).",
    )
    parser.add_argument(
        "--types",
        metavar="FILE",
        default=None,
        help="JSON file of type stubs for base classes outside the checked files.",
    )
    parser.add_argument(
        "--no-index",
        action="store_true",
        help="Do not index declarations of the checked files.",
    )
    parser.add_argument(
        "--severity",
        choices=[s.value for s in DiagnosticSeverity],
        default=None,
        help="Severity of every finding (overrides the configuration).",
    )
    parser.set_defaults(func=cmd_check)
    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "check":
        argv = argv[1:]

    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
