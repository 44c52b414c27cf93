import logging
import time
from typing import Any, Dict, List, Optional, TextIO

from . import ast_nodes as ast
from . tokens import Token, TokenType
from . errors import Diagnostics, TernRuntimeError, Return
from . environment import Environment
from . callables import NativeFunction, TernCallable, TernClass, TernFunction, TernInstance

logger = logging.getLogger(__name__)


def stringify(value: Any) -> str:
    """Formats a runtime value the way 'print' shows it."""
    if value is None: return "nil"
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        # Keeps the sign of -0.0.
        return f"{value:.0f}"
    return str(value)


class Interpreter(ast.ExprVisitor, ast.StmtVisitor):
    """
    The Interpreter walks the AST and executes the code.

    One interpreter is kept for a whole session: `globals` and the
    binding-distance table in `locals` survive between calls to `interpret`,
    which is what lets a REPL build a program up line by line.
    """
    def __init__(self, output: Optional[TextIO] = None):
        self.globals = Environment()
        self.environment = self.globals
        self.locals: Dict[ast.Expr, int] = {}
        self.output = output

        self.globals.define("clock", NativeFunction("clock", 0, lambda arguments: time.time()))

    def interpret(self, statements: List[ast.Stmt], diagnostics: Diagnostics):
        """The main entry point for the interpreter."""
        try:
            for statement in statements:
                self._execute(statement)
        except TernRuntimeError as error:
            logger.debug("Runtime error at line %d: %s", error.token.line, error.message)
            diagnostics.runtime_error(error)

    def resolve(self, expr: ast.Expr, depth: int):
        """Called by the resolver for every expression bound in a local scope."""
        self.locals[expr] = depth

    def _execute(self, stmt: ast.Stmt):
        """Helper to execute a single statement."""
        stmt.accept(self)

    def _evaluate(self, expr: ast.Expr) -> Any:
        """Helper to evaluate a single expression."""
        return expr.accept(self)

    def execute_block(self, statements: List[ast.Stmt], environment: Environment):
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self._execute(statement)
        finally:
            self.environment = previous

    # --- STATEMENT VISITOR METHODS ---

    def visit_expression_stmt(self, stmt: ast.Expression):
        self._evaluate(stmt.expression)
        return None

    def visit_print_stmt(self, stmt: ast.Print):
        text = ""
        if stmt.expression is not None:
            text = stringify(self._evaluate(stmt.expression))
        print(text, file=self.output, flush=True)
        return None

    def visit_let_stmt(self, stmt: ast.Let):
        value = None
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)
        return None

    def visit_block_stmt(self, stmt: ast.Block):
        self.execute_block(stmt.statements, Environment(self.environment))
        return None

    def visit_if_stmt(self, stmt: ast.If):
        if self._is_truthy(self._evaluate(stmt.condition)):
            self._execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self._execute(stmt.else_branch)
        return None

    def visit_while_stmt(self, stmt: ast.While):
        while self._is_truthy(self._evaluate(stmt.condition)):
            self._execute(stmt.body)
        return None

    def visit_function_stmt(self, stmt: ast.Function):
        function = TernFunction(stmt, self.environment)
        self.environment.define(stmt.name.lexeme, function)
        return None

    def visit_return_stmt(self, stmt: ast.Return):
        value = None
        if stmt.value is not None:
            value = self._evaluate(stmt.value)

        raise Return(value)

    def visit_class_stmt(self, stmt: ast.Class):
        methods = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = TernFunction(method, self.environment)

        self.environment.define(stmt.name.lexeme, TernClass(stmt.name.lexeme, methods))
        return None

    # --- HELPER METHODS FOR RUNTIME CHECKS ---

    def _is_truthy(self, obj: Any) -> bool:
        """False and nil are falsey, everything else (0 and "" included) is truthy."""
        if obj is None: return False
        if isinstance(obj, bool): return obj
        return True

    def _is_equal(self, a: Any, b: Any) -> bool:
        """Equality never coerces: values of different kinds are never equal."""
        if a is None and b is None: return True
        if a is None or b is None: return False
        if isinstance(a, bool) or isinstance(b, bool):
            return type(a) is type(b) and a == b
        return a == b

    def _is_number(self, value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def _check_number_operand(self, operator: Token, operand: Any):
        if self._is_number(operand): return
        raise TernRuntimeError(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if self._is_number(left) and self._is_number(right): return
        raise TernRuntimeError(operator, "Operands must be numbers.")

    def _look_up_variable(self, name: Token, expr: ast.Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name)
        return self.globals.get(name)

    # --- EXPRESSION VISITOR METHODS ---

    def visit_binary_expr(self, expr: ast.Binary):
        left = self._evaluate(expr.left)
        right = self._evaluate(expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.MINUS:
            self._check_number_operands(expr.operator, left, right)
            return float(left) - float(right)
        if op_type == TokenType.SLASH:
            self._check_number_operands(expr.operator, left, right)
            if float(right) == 0.0:
                raise TernRuntimeError(expr.operator, "Division by zero.")
            return float(left) / float(right)
        if op_type == TokenType.STAR:
            self._check_number_operands(expr.operator, left, right)
            return float(left) * float(right)
        if op_type == TokenType.PLUS:
            if self._is_number(left) and self._is_number(right):
                return float(left) + float(right)
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise TernRuntimeError(expr.operator, "Operands must be two numbers or at least one string.")

        if op_type == TokenType.GREATER:
            self._check_number_operands(expr.operator, left, right)
            return float(left) > float(right)
        if op_type == TokenType.GREATER_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return float(left) >= float(right)
        if op_type == TokenType.LESS:
            self._check_number_operands(expr.operator, left, right)
            return float(left) < float(right)
        if op_type == TokenType.LESS_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return float(left) <= float(right)

        if op_type == TokenType.EQUAL_EQUAL:
            return self._is_equal(left, right)
        if op_type == TokenType.BANG_EQUAL:
            return not self._is_equal(left, right)

        # Should be unreachable.
        return None

    def visit_grouping_expr(self, expr: ast.Grouping):
        return self._evaluate(expr.expression)

    def visit_literal_expr(self, expr: ast.Literal):
        return expr.value

    def visit_unary_expr(self, expr: ast.Unary):
        right = self._evaluate(expr.right)
        if expr.operator.token_type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -float(right)
        if expr.operator.token_type == TokenType.BANG:
            return not self._is_truthy(right)

        # Should be unreachable.
        return None

    def visit_variable_expr(self, expr: ast.Variable):
        return self._look_up_variable(expr.name, expr)

    def visit_assign_expr(self, expr: ast.Assign):
        value = self._evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)
        return value

    def visit_this_expr(self, expr: ast.This):
        return self._look_up_variable(expr.keyword, expr)

    def visit_logical_expr(self, expr: ast.Logical):
        left = self._evaluate(expr.left)

        if expr.operator.token_type == TokenType.OR:
            if self._is_truthy(left):
                return left
        else: # AND
            if not self._is_truthy(left):
                return left

        return self._evaluate(expr.right)

    def visit_call_expr(self, expr: ast.Call):
        callee = self._evaluate(expr.callee)

        arguments = []
        for argument in expr.arguments:
            arguments.append(self._evaluate(argument))

        if not isinstance(callee, TernCallable):
            raise TernRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise TernRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        return callee.call(self, arguments)

    def visit_get_expr(self, expr: ast.Get):
        obj = self._evaluate(expr.object)
        if isinstance(obj, TernInstance):
            return obj.get(expr.name)

        raise TernRuntimeError(expr.name, "Only instances have properties.")

    def visit_set_expr(self, expr: ast.Set):
        obj = self._evaluate(expr.object)

        if not isinstance(obj, TernInstance):
            raise TernRuntimeError(expr.name, "Only instances have fields.")

        value = self._evaluate(expr.value)
        obj.set(expr.name, value)
        return value
