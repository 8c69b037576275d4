"""
override_jsdoc/index.py
═══════════════════════

Declaration index: the type oracle used by the command-line host.

The rule only needs ``resolve(reference) → member names``.  A full type
checker is out of reach from Python, so the CLI answers that query from
a lookup table of declared names:

  * classes and interfaces declared in the analysed files
  * stub declarations from configuration (library base classes)

Each entry records the names a type declares itself and the names it
``extends``; ``resolve`` returns the closure over ``extends``.  Names
are matched on their full dotted text first, then on the last segment.
A name that is not in the table is unresolvable.

Entries are kept per name and per origin file.  A reference resolves to
the declaration in its own file when there is one, otherwise to the
first declaration of that name that was indexed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from override_jsdoc.errors import ConfigError
from override_jsdoc.heritage import ResolvedType
from override_jsdoc.syntax import (
    ClassNode,
    HeritageToken,
    InterfaceNode,
    SourceFile,
    SyntaxKind,
    TypeReference,
)
from override_jsdoc.walker import iter_nodes

_log = logging.getLogger(__name__)


@dataclass
class TypeDeclaration:
    name: str
    members: Set[str] = field(default_factory=set)
    extends: List[str] = field(default_factory=list)
    origin: str = ""


class TypeIndex:
    """
    Name-keyed table of type declarations implementing ``TypeOracle``.

    Usage
    -----
    >>> index = TypeIndex()
    >>> index.declare("Base", members=["m"])
    >>> index.add_source_file(source)
    >>> index.resolve(type_reference)
    ResolvedType(name='Base', member_names=frozenset({'m'}))
    """

    def __init__(self) -> None:
        self._decls: Dict[str, Dict[str, TypeDeclaration]] = {}
        self._cache: Dict[Tuple[str, str], Optional[ResolvedType]] = {}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._decls.values())

    def __contains__(self, name: str) -> bool:
        return self._lookup(name) is not None

    # ── population ──────────────────────────────────────────────────

    def declare(
        self,
        name: str,
        members: Iterable[str] = (),
        extends: Iterable[str] = (),
        origin: str = "",
    ) -> TypeDeclaration:
        """Add (or merge into) the declaration of *name* from *origin*.

        Repeated declarations in one origin merge, as TypeScript interface
        merging does.  Declarations from different origins stay apart.
        """
        entries = self._decls.setdefault(name, {})
        decl = entries.get(origin)
        if decl is None:
            decl = entries[origin] = TypeDeclaration(name=name, origin=origin)
        decl.members.update(members)
        for base in extends:
            if base not in decl.extends:
                decl.extends.append(base)
        self._cache.clear()
        return decl

    def add_source_file(self, source: SourceFile) -> int:
        """Index every named class and interface of *source*."""
        count = 0
        for node in iter_nodes(source.root):
            if isinstance(node, ClassNode) and node.name:
                self._declare_class(node, source.file_name)
                count += 1
            elif isinstance(node, InterfaceNode) and node.name:
                self.declare(
                    node.name,
                    members=node.member_names,
                    extends=[ref.name for ref in node.extends],
                    origin=source.file_name,
                )
                count += 1
        _log.debug("%s: indexed %d declaration(s)", source.file_name, count)
        return count

    def _declare_class(self, cls: ClassNode, origin: str) -> None:
        members = [
            m.name.text
            for m in cls.members()
            if m.name is not None
            and not m.name.computed
            and not m.name.text.startswith("#")
            and not m.is_static
            and m.kind is not SyntaxKind.CONSTRUCTOR
        ]
        members.extend(cls.parameter_properties)
        # ``#private`` names are never inherited; neither is ``implements``.
        bases = [ref.name for ref in cls.base_references(HeritageToken.EXTENDS)]
        self.declare(cls.name or "", members=members, extends=bases, origin=origin)

    def load_stubs(self, stubs: Mapping[str, Any], origin: str = "<config>") -> int:
        """
        Load stub declarations of the form
        ``{"Name": {"members": [...], "extends": [...]}}``.
        """
        for name, body in stubs.items():
            if isinstance(body, list):
                body = {"members": body}
            if not isinstance(body, Mapping):
                raise ConfigError(
                    f"type stub '{name}' must be an object or a list of member names",
                )
            members = body.get("members", [])
            extends = body.get("extends", [])
            if not all(isinstance(m, str) for m in members) or not all(
                isinstance(b, str) for b in extends
            ):
                raise ConfigError(f"type stub '{name}' must list member and base names as strings")
            self.declare(name, members=members, extends=extends, origin=origin)
        return len(stubs)

    # ── oracle ──────────────────────────────────────────────────────

    def _lookup(self, name: str, origin: str = "") -> Optional[TypeDeclaration]:
        entries = self._decls.get(name)
        if not entries and "." in name:
            entries = self._decls.get(name.rsplit(".", 1)[1])
        if not entries:
            return None
        if origin in entries:
            return entries[origin]
        if len(entries) > 1:
            _log.debug("'%s' is declared in %d files; using %s",
                       name, len(entries), next(iter(entries)))
        return next(iter(entries.values()))

    def resolve(self, ref: TypeReference) -> Optional[ResolvedType]:
        return self.resolve_name(ref.name, ref.file_name)

    def resolve_name(self, name: str, origin: str = "") -> Optional[ResolvedType]:
        key = (name, origin)
        if key in self._cache:
            return self._cache[key]
        decl = self._lookup(name, origin)
        resolved = None
        if decl is not None:
            resolved = ResolvedType(decl.name, self._closure(decl))
        self._cache[key] = resolved
        return resolved

    def _closure(self, decl: TypeDeclaration) -> FrozenSet[str]:
        members: Set[str] = set()
        seen: Set[Tuple[str, str]] = set()
        stack = [decl]
        while stack:
            current = stack.pop()
            if (current.name, current.origin) in seen:
                continue
            seen.add((current.name, current.origin))
            members.update(current.members)
            for base in current.extends:
                base_decl = self._lookup(base, current.origin)
                if base_decl is None:
                    _log.debug("'%s' extends unknown type '%s'", current.name, base)
                    continue
                stack.append(base_decl)
        return frozenset(members)
