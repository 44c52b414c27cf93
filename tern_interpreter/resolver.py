import logging
from enum import Enum, auto
from typing import Dict, List, Set, TYPE_CHECKING

from . import ast_nodes as ast
from . tokens import Token
from . errors import Diagnostics, Phase

if TYPE_CHECKING:
    from . interpreter import Interpreter

logger = logging.getLogger(__name__)


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()


class Resolver(ast.ExprVisitor, ast.StmtVisitor):
    """
    The Resolver performs a single static pass over the program. For every
    variable reference it tells the interpreter how many scopes out the
    binding lives, and it reports scoping mistakes before anything runs.

    scopes[0] is the global scope and is never popped. Top-level names the
    program declares anywhere are also kept in forward_globals, so code can
    refer to a global declared further down the file. Globals are not given
    a binding distance; the interpreter looks them up in its global environment.
    """
    def __init__(self, interpreter: 'Interpreter', diagnostics: Diagnostics):
        self.interpreter = interpreter
        self.diagnostics = diagnostics
        # Each scope maps name -> ready. False means declared, initializer still being resolved.
        self.scopes: List[Dict[str, bool]] = [{}]
        self.forward_globals: Set[str] = set()
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.resolved_count = 0

    def resolve(self, statements: List[ast.Stmt]):
        """Resolves a whole program."""
        self._declare_globals(statements)
        self._resolve_statements(statements)
        logger.debug("Resolved %d local binding(s).", self.resolved_count)

    def _declare_globals(self, statements: List[ast.Stmt]):
        """
        Records every top-level declaration up front so that functions can
        refer to globals declared further down the file.
        """
        for statement in statements:
            if isinstance(statement, (ast.Let, ast.Function, ast.Class)):
                self.forward_globals.add(statement.name.lexeme)

    def _resolve_statements(self, statements: List[ast.Stmt]):
        for statement in statements:
            self._resolve_stmt(statement)

    def _resolve_stmt(self, stmt: ast.Stmt):
        stmt.accept(self)

    def _resolve_expr(self, expr: ast.Expr):
        expr.accept(self)

    # --- Scope Management ---

    def _begin_scope(self):
        self.scopes.append({})

    def _end_scope(self):
        self.scopes.pop()

    def _in_global_scope(self) -> bool:
        return len(self.scopes) == 1

    def _declare(self, name: Token):
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._report_error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token):
        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: ast.Expr, name: Token):
        local_scopes = self.scopes[1:]
        for distance, scope in enumerate(reversed(local_scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, distance)
                self.resolved_count += 1
                return

        if name.lexeme in self.scopes[0] or name.lexeme in self.forward_globals \
                or self.interpreter.globals.contains(name.lexeme):
            return

        self._report_error(name, f"Undefined variable '{name.lexeme}'.")

    def _resolve_function(self, function: ast.Function, function_type: FunctionType):
        enclosing_function = self.current_function
        self.current_function = function_type

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self._resolve_statements(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    # --- Statements ---

    def visit_block_stmt(self, stmt: ast.Block):
        self._begin_scope()
        self._resolve_statements(stmt.statements)
        self._end_scope()

    def visit_let_stmt(self, stmt: ast.Let):
        self._declare(stmt.name)
        if stmt.initializer is not None:
            self._resolve_expr(stmt.initializer)
        self._define(stmt.name)

    def visit_function_stmt(self, stmt: ast.Function):
        self._declare(stmt.name)
        self._define(stmt.name)
        self._resolve_function(stmt, FunctionType.FUNCTION)

    def visit_class_stmt(self, stmt: ast.Class):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        self._begin_scope()
        self.scopes[-1]["this"] = True
        for method in stmt.methods:
            self._resolve_function(method, FunctionType.METHOD)
        self._end_scope()

        self.current_class = enclosing_class

    def visit_return_stmt(self, stmt: ast.Return):
        if self.current_function == FunctionType.NONE:
            self._report_error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            self._resolve_expr(stmt.value)

    def visit_expression_stmt(self, stmt: ast.Expression): self._resolve_expr(stmt.expression)

    def visit_print_stmt(self, stmt: ast.Print):
        if stmt.expression is not None: self._resolve_expr(stmt.expression)

    def visit_if_stmt(self, stmt: ast.If):
        self._resolve_expr(stmt.condition)
        self._resolve_stmt(stmt.then_branch)
        if stmt.else_branch is not None: self._resolve_stmt(stmt.else_branch)

    def visit_while_stmt(self, stmt: ast.While): self._resolve_expr(stmt.condition); self._resolve_stmt(stmt.body)

    # --- Expressions ---

    def visit_variable_expr(self, expr: ast.Variable):
        if not self._in_global_scope() and self.scopes[-1].get(expr.name.lexeme) is False:
            self._report_error(expr.name, "Can't read local variable in its own initializer.")
        self._resolve_local(expr, expr.name)

    def visit_assign_expr(self, expr: ast.Assign):
        self._resolve_expr(expr.value)
        self._resolve_local(expr, expr.name)

    def visit_this_expr(self, expr: ast.This):
        if self.current_class == ClassType.NONE:
            self._report_error(expr.keyword, "Can't use 'this' outside of a class.")
            return
        self._resolve_local(expr, expr.keyword)

    def visit_binary_expr(self, expr: ast.Binary): self._resolve_expr(expr.left); self._resolve_expr(expr.right)
    def visit_call_expr(self, expr: ast.Call): self._resolve_expr(expr.callee); [self._resolve_expr(arg) for arg in expr.arguments]
    def visit_get_expr(self, expr: ast.Get): self._resolve_expr(expr.object)
    def visit_grouping_expr(self, expr: ast.Grouping): self._resolve_expr(expr.expression)
    def visit_literal_expr(self, expr: ast.Literal): pass
    def visit_logical_expr(self, expr: ast.Logical): self._resolve_expr(expr.left); self._resolve_expr(expr.right)
    def visit_set_expr(self, expr: ast.Set): self._resolve_expr(expr.value); self._resolve_expr(expr.object)
    def visit_unary_expr(self, expr: ast.Unary): self._resolve_expr(expr.right)

    def _report_error(self, token: Token, message: str):
        self.diagnostics.report(token, message, Phase.RESOLVE)
