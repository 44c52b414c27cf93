from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Union

from . tokens import Token, TokenType


class Phase(Enum):
    """The pipeline stage a diagnostic came from. Values are the display labels."""
    SYNTAX = "Error"
    RESOLVE = "ResolveError"
    RUNTIME = "RuntimeError"


@dataclass
class Diagnostic:
    line: int
    where: str
    message: str
    phase: Phase

    def __str__(self) -> str:
        return f"[Line {self.line}] {self.phase.value}{self.where}: {self.message}"


class Diagnostics:
    """
    Collects every error reported while running one piece of source.
    The caller inspects it to decide whether to execute the program and
    which exit status to surface.
    """
    def __init__(self):
        self.entries: List[Diagnostic] = []

    def report(self, location: Union[Token, int], message: str, phase: Phase = Phase.SYNTAX):
        """Records an error at a token (or a bare line number)."""
        if isinstance(location, Token):
            line = location.line
            if location.token_type == TokenType.EOF:
                where = " at end"
            else:
                where = f" at '{location.lexeme}'"
        else:
            line = location
            where = ""
        self.entries.append(Diagnostic(line, where, message, phase))

    def runtime_error(self, error: 'TernRuntimeError'):
        self.report(error.token, error.message, Phase.RUNTIME)

    @property
    def had_error(self) -> bool:
        return any(entry.phase != Phase.RUNTIME for entry in self.entries)

    @property
    def had_runtime_error(self) -> bool:
        return any(entry.phase == Phase.RUNTIME for entry in self.entries)

    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]


class TernRuntimeError(RuntimeError):
    """Custom exception for reporting runtime errors."""
    def __init__(self, token: Token, message: str):
        self.token = token
        self.message = message
        super().__init__(self.message)

class Return(Exception):
    """
    An exception used for control flow to handle 'return' statements.
    It's not an error, so it inherits from the base Exception.
    """
    def __init__(self, value: Any):
        self.value = value
