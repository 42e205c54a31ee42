"""Semantic error kinds, the error reporter and internal failures."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TextIO


class InternalCompilerError(Exception):
    """A broken invariant inside the compiler itself, never a user error."""


class EmptySymbolTableError(InternalCompilerError):
    pass


class DuplicateSymbolError(Exception):
    def __init__(self, name: str):
        super().__init__(f"Symbol already declared in this scope: '{name}'")
        self.name = name


class SemanticErrorKind(Enum):
    UNDECLARED_IDENTIFIER = "Undeclared identifier"
    DUPLICATE_DECLARATION = "Multiply declared identifier"
    VOID_VARIABLE = "Non-function declared void"
    INVALID_STRUCT_TYPE = "Invalid name of struct type"
    NON_STRUCT_DOT_ACCESS = "Dot-access of a non-struct type"
    INVALID_STRUCT_FIELD = "Invalid struct field name"


@dataclass(frozen=True)
class SemanticError:
    line: int
    column: int
    kind: SemanticErrorKind

    @property
    def message(self) -> str:
        return self.kind.value

    def __str__(self) -> str:
        return f"{self.line}:{self.column} ***ERROR*** {self.message}"


class ErrorReporter:
    """Collects semantic errors in report order.

    When a stream is given each error is also written to it as soon as it is
    reported, one per line.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream
        self.errors: list[SemanticError] = []

    def report(self, line: int, column: int, kind: SemanticErrorKind) -> None:
        err = SemanticError(line, column, kind)
        self.errors.append(err)
        if self.stream is not None:
            print(err, file=self.stream)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def kinds(self) -> list[SemanticErrorKind]:
        return [e.kind for e in self.errors]
