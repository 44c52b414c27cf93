import sys

from . environment import Environment
from . errors import TernRuntimeError
from . tokens import Token, TokenType


def _name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


def test_get_walks_outward():
    outer = Environment()
    outer.define("a", 1)
    inner = Environment(outer)
    assert inner.get(_name("a")) == 1

def test_define_shadows_and_redefines():
    outer = Environment()
    outer.define("a", 1)
    inner = Environment(outer)
    inner.define("a", 2)
    inner.define("a", 3)
    assert inner.get(_name("a")) == 3
    assert outer.get(_name("a")) == 1

def test_assign_updates_defining_frame():
    outer = Environment()
    outer.define("a", 1)
    inner = Environment(outer)
    inner.assign(_name("a"), 5)
    assert outer.get(_name("a")) == 5
    assert not inner.contains("a")

def test_assign_never_creates_a_binding():
    environment = Environment(Environment())
    try:
        environment.assign(_name("ghost"), 1)
    except TernRuntimeError as error:
        assert error.message == "Undefined variable 'ghost'."
        assert error.token.lexeme == "ghost"
    else:
        raise AssertionError("assigning an undefined variable should fail")
    assert not environment.contains("ghost")

def test_get_undefined():
    try:
        Environment().get(_name("ghost"))
    except TernRuntimeError as error:
        assert error.message == "Undefined variable 'ghost'."
    else:
        raise AssertionError("reading an undefined variable should fail")

def test_ancestor_and_scoped_access():
    globals_ = Environment()
    middle = Environment(globals_)
    inner = Environment(middle)
    middle.define("x", "middle")
    inner.define("x", "inner")

    assert inner.ancestor(0) is inner
    assert inner.ancestor(2) is globals_
    assert inner.get_at(1, _name("x")) == "middle"

    inner.assign_at(1, _name("x"), "changed")
    assert middle.get(_name("x")) == "changed"
    assert inner.get(_name("x")) == "inner"

def test_ancestor_past_the_chain_is_fatal():
    environment = Environment(Environment())
    try:
        environment.ancestor(2)
    except TernRuntimeError:
        raise AssertionError("an invariant violation is not a language error")
    except RuntimeError as error:
        assert "distance 2" in str(error)
    else:
        raise AssertionError("walking past the global frame should fail")


def main():
    tests = [value for key, value in sorted(globals().items()) if key.startswith("test_") and callable(value)]
    tests_passed = 0
    for test in tests:
        try:
            test()
            print(f"PASS: {test.__name__}")
            tests_passed += 1
        except AssertionError:
            print(f"FAIL: {test.__name__}")

    print(f"\n--- Environment Test Summary ---")
    print(f"{tests_passed} / {len(tests)} tests passed.")

    if tests_passed != len(tests):
        sys.exit(1)

if __name__ == "__main__":
    main()
