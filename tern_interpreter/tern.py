import logging
import sys
from typing import List, Optional, TextIO

from . lexer import Lexer
from . parser import Parser
from . resolver import Resolver
from . interpreter import Interpreter
from . errors import Diagnostics

logger = logging.getLogger(__name__)

USAGE = "Usage: python -m tern_interpreter.tern [--verbose] [script]"
# Deeply recursive Tern programs need more Python frames than the default allows.
RECURSION_LIMIT = 5000


class Tern:
    """
    Runs source through the whole pipeline: lex, parse, resolve, execute.
    The interpreter (and its globals) is shared by every call to `run`.
    """
    def __init__(self, output: Optional[TextIO] = None):
        self.interpreter = Interpreter(output)
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def run(self, source: str) -> Diagnostics:
        diagnostics = Diagnostics()

        tokens = Lexer(source, diagnostics).scan_tokens()
        statements = Parser(tokens, diagnostics).parse()
        if diagnostics.had_error:
            logger.debug("Skipping resolution after %d syntax error(s).", len(diagnostics.entries))
            return diagnostics

        Resolver(self.interpreter, diagnostics).resolve(statements)
        if diagnostics.had_error:
            logger.debug("Skipping execution after %d static error(s).", len(diagnostics.entries))
            return diagnostics

        logger.debug("Executing %d top-level statement(s).", len(statements))
        self.interpreter.interpret(statements, diagnostics)
        return diagnostics

    def run_file(self, path: str) -> Diagnostics:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        logger.debug("Loaded '%s'.", path)
        return self.run(source)

    def run_prompt(self):
        print("Tern REPL (Ctrl+C to exit)")
        while True:
            try:
                line = input("> ")
                if not line: continue
                # Each line gets fresh diagnostics; globals persist.
                _report(self.run(line))
            except RecursionError:
                self.interpreter.environment = self.interpreter.globals
                print("FATAL: Stack overflow.", file=sys.stderr)
            except KeyboardInterrupt:
                print("\nExiting.")
                break
            except EOFError:
                print("\nExiting.")
                break


def _report(diagnostics: Diagnostics):
    for entry in diagnostics.entries:
        print(entry, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = "--verbose" in args
    if verbose:
        args.remove("--verbose")
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if len(args) > 1:
        print(USAGE)
        return 64

    tern = Tern()
    if not args:
        tern.run_prompt()
        return 0

    try:
        diagnostics = tern.run_file(args[0])
    except OSError as error:
        print(f"Could not read '{args[0]}': {error}", file=sys.stderr)
        return 66
    except RecursionError:
        print("FATAL: Stack overflow.", file=sys.stderr)
        return 70

    _report(diagnostics)
    if diagnostics.had_error: return 65
    if diagnostics.had_runtime_error: return 70
    return 0


if __name__ == "__main__":
    sys.exit(main())
