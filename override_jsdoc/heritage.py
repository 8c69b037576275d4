"""
override_jsdoc/heritage.py
══════════════════════════

Heritage-chain lookup: does any base type listed in a class's
``extends`` / ``implements`` clauses declare a member of a given name?

Type resolution is delegated entirely to a :class:`TypeOracle`.  The
oracle's resolved types are already transitively inclusive of their own
ancestry, so one level of lookup over the listed references suffices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Protocol, runtime_checkable

from override_jsdoc.errors import UnresolvableTypeError
from override_jsdoc.syntax import ClassNode, TypeReference

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedType:
    """Member-set view of a base class or interface."""
    name: str
    member_names: FrozenSet[str] = field(default_factory=frozenset)

    def members(self) -> FrozenSet[str]:
        return self.member_names

    def declares(self, member_name: str) -> bool:
        return member_name in self.member_names


@runtime_checkable
class TypeOracle(Protocol):
    """Synchronous, pure query interface over a complete type index."""

    def resolve(self, ref: TypeReference) -> Optional[ResolvedType]:
        """Return the resolved type of *ref*, or ``None`` if unknown.

        Implementations may raise :class:`UnresolvableTypeError` instead
        of returning ``None``.
        """
        ...


def _resolve_or_empty(oracle: TypeOracle, ref: TypeReference) -> Optional[ResolvedType]:
    try:
        resolved = oracle.resolve(ref)
    except UnresolvableTypeError as exc:
        _log.debug("heritage reference '%s' unresolvable: %s", ref.name, exc)
        return None
    if resolved is None:
        _log.debug("heritage reference '%s' unresolvable", ref.name)
    return resolved


def find_base_declaring(
    cls: ClassNode,
    member_name: str,
    oracle: TypeOracle,
) -> Optional[ResolvedType]:
    """
    Return the first base type of *cls* declaring *member_name*.

    Clauses are scanned in order and, within a clause, references in
    order; the first hit wins and later references are not resolved.
    An unresolvable reference contributes no members.
    """
    if cls.heritage is None:
        return None
    for clause in cls.heritage:
        for ref in clause.types:
            resolved = _resolve_or_empty(oracle, ref)
            if resolved is not None and resolved.declares(member_name):
                return resolved
    return None
