"""Unparser: turns a (possibly name-analyzed) Moo AST back into source text."""

from __future__ import annotations

from mooc.parser.ast_nodes import (
    Program, VarDecl, FnDecl, FormalDecl, StructDecl,
    PrimitiveType, StructType,
    AssignStmt, PostIncStmt, PostDecStmt, ReadStmt, WriteStmt,
    IfStmt, IfElseStmt, WhileStmt, CallStmt, ReturnStmt,
    IntLit, StrLit, BoolLit, Id, DotAccess, AssignExp, CallExp,
    UnaryOp, BinaryOp,
)
from mooc.analysis.symbols import FunctionSymbol

_INDENT = 4


def unparse(program: Program, annotate: bool = True) -> str:
    """Render `program` as Moo source.

    With `annotate` set, every identifier use that name analysis resolved is
    followed by the type of its symbol in parentheses, e.g. `x(int)`.
    """
    return Unparser(annotate).unparse(program)


class Unparser:
    def __init__(self, annotate: bool = True):
        self.annotate = annotate
        self.lines: list[str] = []

    def unparse(self, program: Program) -> str:
        self.lines = []
        for decl in program.decls:
            self._decl(decl, 0)
        return "\n".join(self.lines) + "\n" if self.lines else ""

    def _line(self, text: str, indent: int) -> None:
        self.lines.append(" " * indent + text)

    # --- Declarations ---

    def _decl(self, decl, indent: int):
        if isinstance(decl, VarDecl):
            self._line(f"{_type(decl.type)} {decl.id.name};", indent)

        elif isinstance(decl, FnDecl):
            formals = ", ".join(_formal(f) for f in decl.formals)
            self._line(f"{_type(decl.return_type)} {decl.id.name}({formals}) {{", indent)
            self._block(decl.body.decls, decl.body.stmts, indent + _INDENT)
            self._line("}", indent)
            self.lines.append("")

        elif isinstance(decl, StructDecl):
            self._line(f"struct {decl.id.name} {{", indent)
            for f in decl.fields:
                self._decl(f, indent + _INDENT)
            self._line("};", indent)
            self.lines.append("")

        else:
            raise TypeError(f"Cannot unparse declaration {type(decl).__name__}")

    def _block(self, decls: list, stmts: list, indent: int):
        for d in decls:
            self._decl(d, indent)
        for s in stmts:
            self._stmt(s, indent)

    # --- Statements ---

    def _stmt(self, stmt, indent: int):
        if isinstance(stmt, AssignStmt):
            self._line(f"{self._assign(stmt.assign, nested=False)};", indent)
        elif isinstance(stmt, PostIncStmt):
            self._line(f"{self._expr(stmt.exp)}++;", indent)
        elif isinstance(stmt, PostDecStmt):
            self._line(f"{self._expr(stmt.exp)}--;", indent)
        elif isinstance(stmt, ReadStmt):
            self._line(f"cin >> {self._expr(stmt.exp)};", indent)
        elif isinstance(stmt, WriteStmt):
            self._line(f"cout << {self._expr(stmt.exp)};", indent)
        elif isinstance(stmt, IfStmt):
            self._line(f"if ({self._expr(stmt.condition)}) {{", indent)
            self._block(stmt.decls, stmt.stmts, indent + _INDENT)
            self._line("}", indent)
        elif isinstance(stmt, IfElseStmt):
            self._line(f"if ({self._expr(stmt.condition)}) {{", indent)
            self._block(stmt.then_decls, stmt.then_stmts, indent + _INDENT)
            self._line("}", indent)
            self._line("else {", indent)
            self._block(stmt.else_decls, stmt.else_stmts, indent + _INDENT)
            self._line("}", indent)
        elif isinstance(stmt, WhileStmt):
            self._line(f"while ({self._expr(stmt.condition)}) {{", indent)
            self._block(stmt.decls, stmt.stmts, indent + _INDENT)
            self._line("}", indent)
        elif isinstance(stmt, CallStmt):
            self._line(f"{self._expr(stmt.call)};", indent)
        elif isinstance(stmt, ReturnStmt):
            if stmt.exp is None:
                self._line("return;", indent)
            else:
                self._line(f"return {self._expr(stmt.exp)};", indent)
        else:
            raise TypeError(f"Cannot unparse statement {type(stmt).__name__}")

    # --- Expressions ---

    def _expr(self, expr) -> str:
        if isinstance(expr, IntLit):
            return str(expr.value)
        if isinstance(expr, StrLit):
            return expr.value
        if isinstance(expr, BoolLit):
            return "true" if expr.value else "false"
        if isinstance(expr, Id):
            return self._id(expr)
        if isinstance(expr, DotAccess):
            return f"({self._expr(expr.object)}).{self._id(expr.field)}"
        if isinstance(expr, AssignExp):
            return self._assign(expr, nested=True)
        if isinstance(expr, CallExp):
            args = ", ".join(self._expr(a) for a in expr.args)
            return f"{self._callee(expr.callee)}({args})"
        if isinstance(expr, UnaryOp):
            return f"({expr.op}{self._expr(expr.operand)})"
        if isinstance(expr, BinaryOp):
            return f"({self._expr(expr.left)} {expr.op} {self._expr(expr.right)})"
        raise TypeError(f"Cannot unparse expression {type(expr).__name__}")

    def _assign(self, expr: AssignExp, nested: bool) -> str:
        text = f"{self._expr(expr.lhs)} = {self._expr(expr.rhs)}"
        return f"({text})" if nested else text

    def _id(self, node: Id) -> str:
        if self.annotate and node.symbol is not None:
            return f"{node.name}({node.symbol.type_name})"
        return node.name

    def _callee(self, node: Id) -> str:
        # f(int)(int,bool->int): return type, then the full signature
        if self.annotate and isinstance(node.symbol, FunctionSymbol):
            return f"{self._id(node)}({node.symbol})"
        return self._id(node)


def _type(node) -> str:
    if isinstance(node, PrimitiveType):
        return node.name
    if isinstance(node, StructType):
        return f"struct {node.name}"
    raise TypeError(f"Cannot unparse type {type(node).__name__}")


def _formal(formal: FormalDecl) -> str:
    return f"{_type(formal.type)} {formal.id.name}"
