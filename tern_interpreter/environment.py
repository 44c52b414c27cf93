from typing import Dict, Any, Optional

from . tokens import Token
from . errors import TernRuntimeError

class Environment:
    """
    Manages variable scopes, storing and retrieving variable values.

    Frames form a parent-pointer chain. A frame stays alive for as long as
    anything refers to it, so a closure keeps its declaring frame (and every
    frame above it) after the block that created it has exited.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any):
        """
        Defines a variable in the current scope.
        Redefining an existing name in the same frame overwrites it.
        """
        self.values[name] = value

    def contains(self, name: str) -> bool:
        """True if this frame itself (not an enclosing one) binds `name`."""
        return name in self.values

    def get(self, name: Token) -> Any:
        """
        Retrieves the value of a variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]

        if self.enclosing is not None:
            return self.enclosing.get(name)

        raise TernRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        """
        Assigns a new value to an existing variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return

        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return

        raise TernRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> 'Environment':
        """Returns the frame `distance` links outward from this one."""
        environment = self
        for _ in range(distance):
            if environment.enclosing is None:
                raise RuntimeError(f"No enclosing environment at distance {distance}.")
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: Token) -> Any:
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise TernRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        return values[name.lexeme]

    def assign_at(self, distance: int, name: Token, value: Any):
        self.ancestor(distance).values[name.lexeme] = value
