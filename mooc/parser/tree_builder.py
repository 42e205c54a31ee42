"""Lark Transformer that builds our AST from the parse tree."""

from __future__ import annotations
from pathlib import Path
from lark import Lark, Transformer, Token
from lark.exceptions import (
    UnexpectedInput, UnexpectedToken, UnexpectedCharacters, UnexpectedEOF,
)

from mooc.parser.ast_nodes import (
    Program, VarDecl, FnDecl, FormalDecl, FnBody, StructDecl,
    PrimitiveType, StructType,
    AssignStmt, PostIncStmt, PostDecStmt, ReadStmt, WriteStmt,
    IfStmt, IfElseStmt, WhileStmt, CallStmt, ReturnStmt,
    IntLit, StrLit, BoolLit, Id, DotAccess, AssignExp, CallExp,
    UnaryOp, BinaryOp, SourceLocation,
)

_GRAMMAR_PATH = Path(__file__).parent.parent / "grammar" / "moo.lark"

_parser = Lark(
    _GRAMMAR_PATH.read_text(encoding="utf-8"),
    parser="lalr",
    propagate_positions=True,
)


class MooSyntaxError(Exception):
    def __init__(self, line: int, column: int, message: str):
        super().__init__(f"{line}:{column} {message}")
        self.line = line
        self.column = column
        self.message = message


def _tok_loc(tok: Token) -> SourceLocation | None:
    if tok is not None and hasattr(tok, "line"):
        return SourceLocation(tok.line, tok.column)
    return None


def _id(tok: Token) -> Id:
    return Id(str(tok), _tok_loc(tok))


class _Block:
    """Declarations and statements of a braced block, before they are
    spread into the owning statement."""
    def __init__(self, decls: list, stmts: list):
        self.decls = decls
        self.stmts = stmts


class MooTransformer(Transformer):
    # --- Program ---

    def start(self, items):
        return Program(list(items))

    # --- Declarations ---

    def var_decl(self, args):
        return VarDecl(args[0], _id(args[1]))

    def struct_decl(self, args):
        fields = [a for a in args[1:] if isinstance(a, VarDecl)]
        return StructDecl(_id(args[0]), fields)

    def fn_decl(self, args):
        ret_type, name, formals, body = args
        return FnDecl(ret_type, _id(name), formals or [], body)

    def formals(self, args):
        return list(args)

    def formal_decl(self, args):
        return FormalDecl(args[0], _id(args[1]))

    def fn_body(self, args):
        return FnBody(args[0], args[1])

    def decl_list(self, args):
        return list(args)

    def stmt_list(self, args):
        return list(args)

    # --- Types ---

    def int_type(self, args):
        return PrimitiveType("int")

    def bool_type(self, args):
        return PrimitiveType("bool")

    def void_type(self, args):
        return PrimitiveType("void")

    def struct_type(self, args):
        return StructType(_id(args[0]))

    # --- Statements ---

    def block(self, args):
        return _Block(args[0], args[1])

    def assign_stmt(self, args):
        return AssignStmt(args[0])

    def post_inc_stmt(self, args):
        return PostIncStmt(args[0])

    def post_dec_stmt(self, args):
        return PostDecStmt(args[0])

    def read_stmt(self, args):
        return ReadStmt(args[0])

    def write_stmt(self, args):
        return WriteStmt(args[0])

    def if_stmt(self, args):
        condition, body = args
        return IfStmt(condition, body.decls, body.stmts)

    def if_else_stmt(self, args):
        condition, then_body, else_body = args
        return IfElseStmt(
            condition,
            then_body.decls, then_body.stmts,
            else_body.decls, else_body.stmts,
        )

    def while_stmt(self, args):
        condition, body = args
        return WhileStmt(condition, body.decls, body.stmts)

    def call_stmt(self, args):
        return CallStmt(args[0])

    def return_stmt(self, args):
        return ReturnStmt(args[0] if args else None)

    # --- Expressions ---

    def assign_exp(self, args):
        return AssignExp(args[0], args[1])

    def int_lit(self, args):
        return IntLit(int(args[0]), _tok_loc(args[0]))

    def str_lit(self, args):
        return StrLit(str(args[0]), _tok_loc(args[0]))

    def true_lit(self, args):
        return BoolLit(True, _tok_loc(args[0]))

    def false_lit(self, args):
        return BoolLit(False, _tok_loc(args[0]))

    def id_ref(self, args):
        return _id(args[0])

    def dot_access(self, args):
        return DotAccess(args[0], _id(args[1]))

    def fn_call(self, args):
        name, actuals = args
        return CallExp(_id(name), actuals or [])

    def actuals(self, args):
        return list(args)

    def neg_op(self, args):
        return UnaryOp("-", args[0])

    def not_op(self, args):
        return UnaryOp("!", args[0])

    def or_op(self, args):
        return BinaryOp("||", args[0], args[1])

    def and_op(self, args):
        return BinaryOp("&&", args[0], args[1])

    def eq_op(self, args):
        return BinaryOp("==", args[0], args[1])

    def ne_op(self, args):
        return BinaryOp("!=", args[0], args[1])

    def lt_op(self, args):
        return BinaryOp("<", args[0], args[1])

    def gt_op(self, args):
        return BinaryOp(">", args[0], args[1])

    def le_op(self, args):
        return BinaryOp("<=", args[0], args[1])

    def ge_op(self, args):
        return BinaryOp(">=", args[0], args[1])

    def plus_op(self, args):
        return BinaryOp("+", args[0], args[1])

    def minus_op(self, args):
        return BinaryOp("-", args[0], args[1])

    def times_op(self, args):
        return BinaryOp("*", args[0], args[1])

    def divide_op(self, args):
        return BinaryOp("/", args[0], args[1])


def parse_moo(source: str) -> Program:
    try:
        tree = _parser.parse(source)
    except UnexpectedInput as e:
        raise MooSyntaxError(e.line, e.column, _describe(e)) from e
    return MooTransformer().transform(tree)


def _describe(err: UnexpectedInput) -> str:
    if isinstance(err, UnexpectedToken):
        if err.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected token '{err.token}'"
    if isinstance(err, UnexpectedCharacters):
        return f"Unexpected character '{err.char}'"
    if isinstance(err, UnexpectedEOF):
        return "Unexpected end of input"
    return "Syntax error"
