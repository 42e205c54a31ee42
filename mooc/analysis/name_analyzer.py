"""Name analysis for Moo programs.

Binds every identifier occurrence to its declaration, building the scoped
symbol table on the way. Semantic errors go to an ErrorReporter and the walk
keeps going, so a single pass reports every error in the program. Only
internal failures (scope stack underflow, unknown node kinds) abort it.
"""

from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field

from mooc.parser.ast_nodes import (
    Program, VarDecl, FnDecl, FormalDecl, StructDecl,
    PrimitiveType, StructType,
    AssignStmt, PostIncStmt, PostDecStmt, ReadStmt, WriteStmt,
    IfStmt, IfElseStmt, WhileStmt, CallStmt, ReturnStmt,
    IntLit, StrLit, BoolLit, Id, DotAccess, AssignExp, CallExp,
    UnaryOp, BinaryOp,
)
from mooc.analysis.errors import (
    ErrorReporter, SemanticError, SemanticErrorKind,
    DuplicateSymbolError, InternalCompilerError,
)
from mooc.analysis.symbols import (
    Symbol, SymbolTable, ValueSymbol, FunctionSymbol,
    StructTypeSymbol, StructInstanceSymbol, VOID, ERROR_TYPE,
)

logger = logging.getLogger(__name__)


@dataclass
class NameAnalysisResult:
    program: Program
    globals: SymbolTable
    errors: list[SemanticError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def name_analysis(program: Program, reporter: ErrorReporter | None = None) -> NameAnalysisResult:
    analyzer = NameAnalyzer(program, reporter)
    return analyzer.analyze()


class NameAnalyzer:
    def __init__(self, program: Program, reporter: ErrorReporter | None = None):
        self.program = program
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.table = SymbolTable()

    def analyze(self) -> NameAnalysisResult:
        first_error = len(self.reporter.errors)
        for decl in self.program.decls:
            self._analyze_decl(decl, self.table)
        if self.table.depth != 1:
            raise InternalCompilerError(
                f"Scope stack left at depth {self.table.depth} after name analysis"
            )
        errors = self.reporter.errors[first_error:]
        logger.debug("name analysis finished with %d error(s)", len(errors))
        return NameAnalysisResult(self.program, self.table, list(errors))

    @contextmanager
    def _scope(self, table: SymbolTable):
        table.add_scope()
        try:
            yield
        finally:
            table.remove_scope()

    def _error(self, node: Id, kind: SemanticErrorKind) -> None:
        if node.loc is None:
            self.reporter.report(0, 0, kind)
        else:
            self.reporter.report(node.loc.line, node.loc.column, kind)

    # --- Declarations ---

    def _analyze_decl(self, decl, table: SymbolTable):
        if isinstance(decl, VarDecl):
            self._declare_variable(decl, table, table)
        elif isinstance(decl, FnDecl):
            self._analyze_function(decl, table)
        elif isinstance(decl, StructDecl):
            self._analyze_struct(decl, table)
        else:
            raise InternalCompilerError(f"Unknown declaration: {type(decl).__name__}")

    def _declare_variable(self, decl: VarDecl | FormalDecl, table: SymbolTable,
                          type_table: SymbolTable):
        """Declare a variable, field or formal in `table`.

        The declared type is looked up in `type_table`, which differs from
        `table` only for struct fields.
        """
        sym = self._symbol_for_type(decl.type, decl.id, type_table)
        if sym is not None:
            self._declare(decl.id, sym, table)
        decl.id.symbol = table.lookup_local(decl.id.name)

    def _symbol_for_type(self, type_node, name: Id, type_table: SymbolTable) -> Symbol | None:
        if isinstance(type_node, StructType):
            definition = self._struct_definition(type_node, type_table)
            if definition is None:
                return None
            return StructInstanceSymbol(definition.name, definition)
        if isinstance(type_node, PrimitiveType):
            if type_node.name == VOID:
                self._error(name, SemanticErrorKind.VOID_VARIABLE)
                return ValueSymbol(ERROR_TYPE)
            return ValueSymbol(type_node.name)
        raise InternalCompilerError(f"Unknown type node: {type(type_node).__name__}")

    def _struct_definition(self, type_node: StructType, table: SymbolTable) -> StructTypeSymbol | None:
        definition = table.lookup_global(type_node.name)
        if not isinstance(definition, StructTypeSymbol):
            self._error(type_node.id, SemanticErrorKind.INVALID_STRUCT_TYPE)
            return None
        type_node.id.symbol = definition
        return definition

    def _declare(self, name: Id, sym: Symbol, table: SymbolTable) -> None:
        try:
            table.add_decl(name.name, sym)
        except DuplicateSymbolError:
            self._error(name, SemanticErrorKind.DUPLICATE_DECLARATION)

    def _analyze_function(self, fn: FnDecl, table: SymbolTable):
        if isinstance(fn.return_type, StructType):
            self._struct_definition(fn.return_type, table)
        param_types = tuple(f.type.name for f in fn.formals)
        self._declare(fn.id, FunctionSymbol(fn.return_type.name, param_types), table)
        fn.id.symbol = table.lookup_local(fn.id.name)

        logger.debug("entering function '%s'", fn.id.name)
        with self._scope(table):
            for formal in fn.formals:
                self._declare_variable(formal, table, table)
            self._analyze_block(fn.body.decls, fn.body.stmts, table)

    def _analyze_struct(self, struct: StructDecl, table: SymbolTable):
        members = SymbolTable()
        for field_decl in struct.fields:
            self._declare_variable(field_decl, members, table)
        self._declare(struct.id, StructTypeSymbol(struct.id.name, members), table)
        struct.id.symbol = table.lookup_local(struct.id.name)

    # --- Statements ---

    def _analyze_block(self, decls: list[VarDecl], stmts: list, table: SymbolTable):
        for decl in decls:
            self._declare_variable(decl, table, table)
        for stmt in stmts:
            self._analyze_stmt(stmt, table)

    def _analyze_stmt(self, stmt, table: SymbolTable):
        if isinstance(stmt, AssignStmt):
            self._resolve_expr(stmt.assign, table)

        elif isinstance(stmt, (PostIncStmt, PostDecStmt, ReadStmt, WriteStmt)):
            self._resolve_expr(stmt.exp, table)

        elif isinstance(stmt, IfStmt):
            self._resolve_expr(stmt.condition, table)
            with self._scope(table):
                self._analyze_block(stmt.decls, stmt.stmts, table)

        elif isinstance(stmt, IfElseStmt):
            self._resolve_expr(stmt.condition, table)
            with self._scope(table):
                self._analyze_block(stmt.then_decls, stmt.then_stmts, table)
            with self._scope(table):
                self._analyze_block(stmt.else_decls, stmt.else_stmts, table)

        elif isinstance(stmt, WhileStmt):
            self._resolve_expr(stmt.condition, table)
            with self._scope(table):
                self._analyze_block(stmt.decls, stmt.stmts, table)

        elif isinstance(stmt, CallStmt):
            self._resolve_expr(stmt.call, table)

        elif isinstance(stmt, ReturnStmt):
            if stmt.exp is not None:
                self._resolve_expr(stmt.exp, table)

        else:
            raise InternalCompilerError(f"Unknown statement: {type(stmt).__name__}")

    # --- Expressions ---

    def _resolve_expr(self, expr, table: SymbolTable) -> Symbol | None:
        """Resolve every name in `expr`.

        Returns the symbol the expression denotes when it is a name or a
        field access, None otherwise (and on failure).
        """
        if isinstance(expr, Id):
            return self._resolve_id(expr, table)

        elif isinstance(expr, DotAccess):
            return self._resolve_dot_access(expr, table)

        elif isinstance(expr, AssignExp):
            self._resolve_expr(expr.lhs, table)
            self._resolve_expr(expr.rhs, table)
            return None

        elif isinstance(expr, CallExp):
            self._resolve_id(expr.callee, table)
            for arg in expr.args:
                self._resolve_expr(arg, table)
            return None

        elif isinstance(expr, UnaryOp):
            self._resolve_expr(expr.operand, table)
            return None

        elif isinstance(expr, BinaryOp):
            self._resolve_expr(expr.left, table)
            self._resolve_expr(expr.right, table)
            return None

        elif isinstance(expr, (IntLit, StrLit, BoolLit)):
            return None

        raise InternalCompilerError(f"Unknown expression: {type(expr).__name__}")

    def _resolve_id(self, node: Id, table: SymbolTable) -> Symbol | None:
        sym = table.lookup_global(node.name)
        if sym is None:
            self._error(node, SemanticErrorKind.UNDECLARED_IDENTIFIER)
        node.symbol = sym
        return sym

    def _resolve_dot_access(self, node: DotAccess, table: SymbolTable) -> Symbol | None:
        # The left side is resolved in the lexical scope; every step to the
        # right narrows into the member table of the struct found so far.
        # A left side that failed to resolve is not a struct either, so it
        # gets its own report on top of the one already made for it.
        base = self._resolve_expr(node.object, table)
        if not isinstance(base, StructInstanceSymbol):
            if isinstance(node.object, Id):
                anchor = node.object
            elif isinstance(node.object, DotAccess):
                anchor = node.object.field
            else:
                anchor = node.field
            self._error(anchor, SemanticErrorKind.NON_STRUCT_DOT_ACCESS)
            return None

        sym = base.definition.members.lookup_local(node.field.name)
        if sym is None:
            self._error(node.field, SemanticErrorKind.INVALID_STRUCT_FIELD)
            return None
        node.field.symbol = sym
        node.symbol = sym
        return sym
