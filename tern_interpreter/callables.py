from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from . import ast_nodes as ast
from . tokens import Token
from . environment import Environment
from . errors import Return
from . errors import TernRuntimeError

# This is a common pattern to break circular import cycles.
# The import is only done for static type checking, not at runtime.
if TYPE_CHECKING:
    from . interpreter import Interpreter


class TernCallable(ABC):
    """
    An abstract base class for all objects that can be called like a function.
    """
    @abstractmethod
    def arity(self) -> int:
        """Returns the number of arguments the callable expects."""
        raise NotImplementedError

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        """Executes the callable's logic."""
        raise NotImplementedError

    def __str__(self) -> str:
        return "<native fn>"


class NativeFunction(TernCallable):
    """A function implemented in Python and exposed as a global."""
    def __init__(self, name: str, arity: int, function: Callable[[List[Any]], Any]):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.function(arguments)


class TernFunction(TernCallable):
    """
    Represents a user-defined function or method.
    """
    def __init__(self, declaration: ast.Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure # The environment where the function was declared.

    def arity(self) -> int:
        """The number of parameters the function declares."""
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        """
        Executes the function. This involves creating a new environment for the
        function's scope, binding arguments to parameters, and then executing
        the function's body.
        """
        # It encloses the function's closure, not the caller's environment.
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        try:
            interpreter.execute_block(self.declaration.body, environment)
        except Return as return_value:
            return return_value.value

        # If no 'return' is encountered, functions implicitly return nil.
        return None

    def bind(self, instance: 'TernInstance') -> 'TernFunction':
        """Binds 'this' to a specific instance."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return TernFunction(self.declaration, environment)

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"


class TernClass(TernCallable):
    """
    A class declaration at runtime. Calling it produces a new instance.
    """
    def __init__(self, name: str, methods: Dict[str, TernFunction]):
        self.name = name
        self.methods = methods

    def find_method(self, name: str) -> Optional[TernFunction]:
        return self.methods.get(name)

    def arity(self) -> int:
        return 0

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return TernInstance(self)

    def __str__(self) -> str:
        return self.name


class TernInstance:
    """An object created by calling a class. Fields shadow methods of the same name."""
    def __init__(self, klass: TernClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise TernRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"<{self.klass.name} instance>"
