"""AST node definitions for Moo."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mooc.analysis.symbols import Symbol


@dataclass
class SourceLocation:
    line: int
    column: int


# --- Program ---

@dataclass
class Program:
    decls: list[Decl] = field(default_factory=list)


# --- Types ---

@dataclass
class PrimitiveType:
    name: str  # "int", "bool" or "void"


@dataclass
class StructType:
    id: Id

    @property
    def name(self) -> str:
        return self.id.name


TypeNode = "PrimitiveType | StructType"


# --- Declarations ---

Decl = "VarDecl | FnDecl | StructDecl"


@dataclass
class VarDecl:
    type: PrimitiveType | StructType
    id: Id


@dataclass
class FormalDecl:
    type: PrimitiveType | StructType
    id: Id


@dataclass
class FnBody:
    decls: list[VarDecl] = field(default_factory=list)
    stmts: list[Stmt] = field(default_factory=list)


@dataclass
class FnDecl:
    return_type: PrimitiveType | StructType
    id: Id
    formals: list[FormalDecl]
    body: FnBody


@dataclass
class StructDecl:
    id: Id
    fields: list[VarDecl]


# --- Statements ---

Stmt = ("AssignStmt | PostIncStmt | PostDecStmt | ReadStmt | WriteStmt | IfStmt"
        " | IfElseStmt | WhileStmt | CallStmt | ReturnStmt")


@dataclass
class AssignStmt:
    assign: AssignExp


@dataclass
class PostIncStmt:
    exp: Expr


@dataclass
class PostDecStmt:
    exp: Expr


@dataclass
class ReadStmt:
    exp: Expr


@dataclass
class WriteStmt:
    exp: Expr


@dataclass
class IfStmt:
    condition: Expr
    decls: list[VarDecl]
    stmts: list[Stmt]


@dataclass
class IfElseStmt:
    condition: Expr
    then_decls: list[VarDecl]
    then_stmts: list[Stmt]
    else_decls: list[VarDecl]
    else_stmts: list[Stmt]


@dataclass
class WhileStmt:
    condition: Expr
    decls: list[VarDecl]
    stmts: list[Stmt]


@dataclass
class CallStmt:
    call: CallExp


@dataclass
class ReturnStmt:
    exp: Optional[Expr] = None


# --- Expressions ---

Expr = "any expression node"


@dataclass
class IntLit:
    value: int
    loc: Optional[SourceLocation] = None


@dataclass
class StrLit:
    value: str  # raw text including the quotes
    loc: Optional[SourceLocation] = None


@dataclass
class BoolLit:
    value: bool
    loc: Optional[SourceLocation] = None


@dataclass
class Id:
    name: str
    loc: Optional[SourceLocation] = None
    # Declaration this occurrence resolves to; filled in by name analysis.
    symbol: Optional[Symbol] = field(default=None, repr=False, compare=False)


@dataclass
class DotAccess:
    object: Expr  # Id or DotAccess
    field: Id
    symbol: Optional[Symbol] = field(default=None, repr=False, compare=False)

    @property
    def loc(self) -> Optional[SourceLocation]:
        return self.field.loc


@dataclass
class AssignExp:
    lhs: Expr
    rhs: Expr


@dataclass
class CallExp:
    callee: Id
    args: list[Expr] = field(default_factory=list)


@dataclass
class UnaryOp:
    op: str  # "-" or "!"
    operand: Expr


@dataclass
class BinaryOp:
    op: str
    left: Expr
    right: Expr
