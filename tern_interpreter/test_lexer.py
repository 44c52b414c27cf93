import sys
from . lexer import Lexer
from . tokens import TokenType, Token
from . errors import Diagnostics

def run_test(name, source, expected_tokens):
    """Helper function to run a single lexer test case."""
    print(f"--- Running Test: {name} ---")
    lexer = Lexer(source)
    tokens = lexer.scan_tokens()

    # Extracting token types for comparison
    actual_types = [token.token_type for token in tokens]
    expected_types = [token.token_type for token in expected_tokens]

    if actual_types != expected_types:
        print(f"FAIL: {name}")
        print(f"Expected: {expected_types}")
        print(f"Got:      {actual_types}")
        # Also print full tokens for easier debugging
        print("\nExpected Tokens:")
        for t in expected_tokens: print(t)
        print("\nActual Tokens:")
        for t in tokens: print(t)
        return False

    for i, token in enumerate(tokens):
        expected_token = expected_tokens[i]
        if token.lexeme != expected_token.lexeme or token.literal != expected_token.literal \
                or token.line != expected_token.line:
            print(f"FAIL: {name} (Mismatch at token {i})")
            print(f"Expected: {expected_token}")
            print(f"Got:      {token}")
            return False

    print(f"PASS: {name}")
    return True


def test_let_declaration():
    source = "let x = 10;"
    expected = [
        Token(TokenType.LET, 'let', None, 1),
        Token(TokenType.IDENTIFIER, 'x', None, 1),
        Token(TokenType.EQUAL, '=', None, 1),
        Token(TokenType.NUMBER, '10', 10, 1),
        Token(TokenType.SEMICOLON, ';', None, 1),
        Token(TokenType.EOF, '', None, 1)
    ]
    assert run_test("Let Declaration", source, expected)


def test_comments_and_lines():
    source = """
    // Simple function
    fn main() {
        /* block
           comment */
        return 2.5;
    }
    """
    expected = [
        Token(TokenType.FN, 'fn', None, 3),
        Token(TokenType.IDENTIFIER, 'main', None, 3),
        Token(TokenType.LEFT_PAREN, '(', None, 3),
        Token(TokenType.RIGHT_PAREN, ')', None, 3),
        Token(TokenType.LEFT_BRACE, '{', None, 3),
        Token(TokenType.RETURN, 'return', None, 6),
        Token(TokenType.NUMBER, '2.5', 2.5, 6),
        Token(TokenType.SEMICOLON, ';', None, 6),
        Token(TokenType.RIGHT_BRACE, '}', None, 7),
        Token(TokenType.EOF, '', None, 8)
    ]
    assert run_test("Comments and Line Numbers", source, expected)


def test_operators():
    source = "! != = == < <= > >= / * . ,"
    expected = [
        Token(TokenType.BANG, '!', None, 1),
        Token(TokenType.BANG_EQUAL, '!=', None, 1),
        Token(TokenType.EQUAL, '=', None, 1),
        Token(TokenType.EQUAL_EQUAL, '==', None, 1),
        Token(TokenType.LESS, '<', None, 1),
        Token(TokenType.LESS_EQUAL, '<=', None, 1),
        Token(TokenType.GREATER, '>', None, 1),
        Token(TokenType.GREATER_EQUAL, '>=', None, 1),
        Token(TokenType.SLASH, '/', None, 1),
        Token(TokenType.STAR, '*', None, 1),
        Token(TokenType.DOT, '.', None, 1),
        Token(TokenType.COMMA, ',', None, 1),
        Token(TokenType.EOF, '', None, 1)
    ]
    assert run_test("Operators", source, expected)


def test_keywords_and_strings():
    source = "class this nil 'single' \"double\" or_else"
    expected = [
        Token(TokenType.CLASS, 'class', None, 1),
        Token(TokenType.THIS, 'this', None, 1),
        Token(TokenType.NIL, 'nil', None, 1),
        Token(TokenType.STRING, "'single'", 'single', 1),
        Token(TokenType.STRING, '"double"', 'double', 1),
        Token(TokenType.IDENTIFIER, 'or_else', None, 1),
        Token(TokenType.EOF, '', None, 1)
    ]
    assert run_test("Keywords and Strings", source, expected)


def test_lexical_errors_are_reported():
    diagnostics = Diagnostics()
    tokens = Lexer('let a = @;\n"open', diagnostics).scan_tokens()

    assert diagnostics.had_error
    assert [entry.message for entry in diagnostics.entries] == [
        "Unexpected character: @",
        "Unterminated string.",
    ]
    assert diagnostics.entries[1].line == 2
    # Scanning carries on past the bad character.
    assert [t.token_type for t in tokens][-2:] == [TokenType.SEMICOLON, TokenType.EOF]

def test_number_literals():
    digits = "1" + "0" * 400
    tokens = Lexer(f"{digits} 2.5 7", Diagnostics()).scan_tokens()

    assert [t.literal for t in tokens[:3]] == [10 ** 400, 2.5, 7]
    assert type(tokens[0].literal) is int and type(tokens[2].literal) is int
    assert type(tokens[1].literal) is float


def main():
    tests = [value for key, value in sorted(globals().items()) if key.startswith("test_") and callable(value)]
    tests_passed = 0
    for test in tests:
        try:
            test()
            tests_passed += 1
        except AssertionError:
            print(f"FAIL: {test.__name__}")

    print(f"\n--- Lexer Test Summary ---")
    print(f"{tests_passed} / {len(tests)} tests passed.")

    if tests_passed != len(tests):
        sys.exit(1)

if __name__ == "__main__":
    main()
