"""
Tests for the rule-based spoken symbol corrector.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from voice_syntax.correction.rules import Rule, RuleBasedCorrector, DEFAULT_RULES


@pytest.fixture
def corrector():
    return RuleBasedCorrector()


class TestOperators:
    @pytest.mark.parametrize("text,expected", [
        ("x equals equals y", "x == y"),
        ("x triple equals y", "x === y"),
        ("a not equals b", "a != b"),
        ("x greater than or equal to y", "x >= y"),
        ("x less than y", "x < y"),
        ("count plus equals one", "count += one"),
        ("x fat arrow y", "x => y"),
        ("self arrow name", "self -> name"),
        ("a ampersand ampersand b", "a && b"),
        ("a pipe pipe b", "a || b"),
        ("x equals five", "x = five"),
    ])
    def test_operators(self, corrector, text, expected):
        assert corrector.correct(text) == expected


class TestGluedSymbols:
    @pytest.mark.parametrize("text,expected", [
        ("foo dot bar", "foo.bar"),
        ("my underscore var", "my_var"),
        ("print open paren x close paren", "print(x)"),
        ("items open bracket zero close bracket", "items[zero]"),
        ("Foo double colon bar", "Foo::bar"),
        ("at sign decorator", "@decorator"),
        ("echo dollar HOME", "echo $HOME"),
        ("done semicolon", "done;"),
    ])
    def test_glue(self, corrector, text, expected):
        assert corrector.correct(text) == expected

    def test_braces(self, corrector):
        assert corrector.correct("open brace close brace") == "{ }"


class TestDashes:
    def test_double_dash_flag(self, corrector):
        assert corrector.correct("dash dash verbose") == "--verbose"

    def test_short_flag(self, corrector):
        assert corrector.correct("git commit dash m message") == "git commit -m message"

    def test_minus(self, corrector):
        assert corrector.correct("a minus b") == "a - b"


class TestLiteralReplacements:
    def test_backslash_is_literal(self, corrector):
        """String replacements are not treated as regex templates."""
        assert corrector.correct("backslash n") == "\\n"

    def test_slash(self, corrector):
        assert corrector.correct("src slash main") == "src/main"

    def test_case_insensitive(self, corrector):
        assert corrector.correct("foo DOT bar") == "foo.bar"

    def test_plain_words_untouched(self, corrector):
        assert corrector.correct("hello world") == "hello world"


class TestRule:
    def test_callable_replacement(self):
        rule = Rule(r"\b(\w+) squared\b", lambda match: f"{match.group(1)} ** 2")
        assert rule.apply("x squared") == "x ** 2"

    def test_case_sensitive(self):
        rule = Rule(r"\bNULL\b", "None", case_sensitive=True)
        assert rule.apply("null NULL") == "null None"

    def test_extend_returns_new_corrector(self, corrector):
        extended = corrector.extend([Rule(r"\bnull\b", "None", name="null")])

        assert len(extended.rules) == len(DEFAULT_RULES) + 1
        assert len(corrector.rules) == len(DEFAULT_RULES)
        assert extended.correct("x equals null") == "x = None"

    def test_empty_rule_list(self):
        assert RuleBasedCorrector([]).correct("foo dot bar") == "foo dot bar"
