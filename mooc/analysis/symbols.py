"""Symbols and the scoped symbol table."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterator

from mooc.analysis.errors import DuplicateSymbolError, EmptySymbolTableError

logger = logging.getLogger(__name__)

INT = "int"
BOOL = "bool"
VOID = "void"
# Type recorded for names whose declaration was illegal (e.g. `void x;`)
ERROR_TYPE = "<error>"


class Symbol:
    """Something a name can be bound to. Every variant exposes `type_name`."""

    type_name: str

    def __str__(self) -> str:
        return self.type_name


@dataclass(frozen=True, eq=False)
class ValueSymbol(Symbol):
    type_name: str


@dataclass(frozen=True, eq=False)
class FunctionSymbol(Symbol):
    return_type: str
    param_types: tuple[str, ...] = ()

    @property
    def type_name(self) -> str:
        return self.return_type

    def __str__(self) -> str:
        return f"{','.join(self.param_types)}->{self.return_type}"


@dataclass(frozen=True, eq=False)
class StructTypeSymbol(Symbol):
    name: str
    members: SymbolTable

    @property
    def type_name(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class StructInstanceSymbol(Symbol):
    type_name: str
    definition: StructTypeSymbol


class SymbolTable:
    """Stack of scopes mapping names to symbols.

    A new table holds one (global) scope. Lookups walk from the innermost
    scope outwards, so inner declarations hide outer ones of the same name.
    """

    def __init__(self):
        self._scopes: list[dict[str, Symbol]] = [{}]

    @property
    def depth(self) -> int:
        return len(self._scopes)

    def add_scope(self) -> None:
        self._scopes.append({})
        logger.debug("push scope (depth %d)", len(self._scopes))

    def remove_scope(self) -> dict[str, Symbol]:
        """Pop the innermost scope and return its bindings."""
        if not self._scopes:
            raise EmptySymbolTableError("Cannot remove a scope from an empty symbol table")
        scope = self._scopes.pop()
        logger.debug("pop scope (depth %d)", len(self._scopes))
        return scope

    def add_decl(self, name: str, sym: Symbol) -> None:
        if not self._scopes:
            raise EmptySymbolTableError(f"Cannot declare '{name}' in an empty symbol table")
        scope = self._scopes[-1]
        if name in scope:
            raise DuplicateSymbolError(name)
        scope[name] = sym

    def lookup_local(self, name: str) -> Symbol | None:
        if not self._scopes:
            return None
        return self._scopes[-1].get(name)

    def lookup_global(self, name: str) -> Symbol | None:
        for scope in reversed(self._scopes):
            if name in scope:
                return scope[name]
        return None

    def local_names(self) -> Iterator[str]:
        if self._scopes:
            yield from self._scopes[-1]

    def dump(self) -> str:
        lines = ["=== Symbol Table ==="]
        for scope in reversed(self._scopes):
            entries = ", ".join(f"{name}: {sym}" for name, sym in scope.items())
            lines.append("{" + entries + "}")
        return "\n".join(lines)
