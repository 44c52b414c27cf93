import sys
from . lexer import Lexer
from . parser import Parser
from . ast_printer import AstPrinter
from . errors import Diagnostics
from . import ast_nodes as ast

def run_parser_test(name, source_code, expected_ast_str):
    """
    Runs a full lexer -> parser -> ast_printer test.
    """
    print(f"--- Running Parser Test: {name} ---")

    diagnostics = Diagnostics()

    # 1. Lexer
    tokens = Lexer(source_code, diagnostics).scan_tokens()

    # 2. Parser
    statements = Parser(tokens, diagnostics).parse()
    if diagnostics.had_error:
        print(f"FAIL: {name} - Parser reported errors:")
        for entry in diagnostics.entries: print(entry)
        return False

    # 3. AST Printer
    printer = AstPrinter()
    actual_ast_str = printer.print_program(statements)

    # 4. Compare
    # Normalize by stripping whitespace from each line and joining
    normalized_actual = "\n".join(line.strip() for line in actual_ast_str.strip().split('\n'))
    normalized_expected = "\n".join(line.strip() for line in expected_ast_str.strip().split('\n'))

    if normalized_actual == normalized_expected:
        print(f"PASS: {name}")
        return True
    else:
        print(f"FAIL: {name}")
        print("\n--- EXPECTED AST ---")
        print(normalized_expected)
        print("\n--- ACTUAL AST ---")
        print(normalized_actual)
        print("\n--------------------")
        return False


def test_let_and_precedence():
    assert run_parser_test("Let Declaration and Precedence", "let x = 10 * (2 + 3);", """
    (let x (* 10 (group (+ 2 3))))
    """)


def test_equality_and_unary():
    assert run_parser_test("Equality and Unary", "!(1 + 1 != 2) == -3;", """
    (expr_stmt (== (! (group (!= (+ 1 1) 2))) (- 3)))
    """)


def test_let_without_initializer_and_print():
    assert run_parser_test("Let without Initializer", "let y; print y; print;", """
    (let y)
    (print y)
    (print)
    """)


def test_logical_operators():
    assert run_parser_test("Logical Operators", "a or b and nil;", """
    (expr_stmt (or a (and b nil)))
    """)


def test_property_set_and_call_chain():
    assert run_parser_test("Property Set", "box.width = make(1, 2).size;", """
    (expr_stmt (= width box (. size (call make 1 2))))
    """)


def test_class_declaration():
    source = """
    class Greeter {
        greet(name) {
            return "hi " + this.name;
        }
    }
    """
    expected = """
    (class Greeter {
    (fn greet(name) {
    (return (+ "hi " (. name this)))
    })
    })
    """
    assert run_parser_test("Class Declaration", source, expected)


def test_for_loop_desugars_to_while():
    source = "for (let i = 0; i < 3; i = i + 1) print i;"
    expected = """
    (block
    (let i 0)
    (while (< i 3) (block
    (print i)
    (expr_stmt (assign i (+ i 1)))
    ))
    )
    """
    assert run_parser_test("For Loop Desugaring", source, expected)


def test_syntax_errors_are_reported_and_recovered():
    diagnostics = Diagnostics()
    tokens = Lexer("let = 1; 1 = 2; let ok = 3;", diagnostics).scan_tokens()
    statements = Parser(tokens, diagnostics).parse()

    assert [str(entry) for entry in diagnostics.entries] == [
        "[Line 1] Error at '=': Expect variable name.",
        "[Line 1] Error at '=': Invalid assignment target.",
    ]
    # The parser synchronizes and still produces the last declaration.
    assert isinstance(statements[-1], ast.Let)
    assert statements[-1].name.lexeme == "ok"


def test_missing_semicolon_at_end():
    diagnostics = Diagnostics()
    Parser(Lexer("print 1", diagnostics).scan_tokens(), diagnostics).parse()
    assert [str(entry) for entry in diagnostics.entries] == [
        "[Line 1] Error at end: Expect ';' after value.",
    ]


def main():
    tests = [value for key, value in sorted(globals().items()) if key.startswith("test_") and callable(value)]
    tests_passed = 0
    for test in tests:
        try:
            test()
            tests_passed += 1
        except AssertionError:
            print(f"FAIL: {test.__name__}")

    print(f"\n--- Parser Test Summary ---")
    print(f"{tests_passed} / {len(tests)} tests passed.")

    if tests_passed != len(tests):
        sys.exit(1) # Exit with error code if any test fails

if __name__ == "__main__":
    main()
