"""
Rule-based spoken symbol correction.

The fallback used in programming modes when the LLM is disabled, not
available or fails. Only arithmetic, comparison, bracket and punctuation
words are rewritten; markdown vocabulary belongs to the preprocessor.
"""

from typing import Callable, List, Optional, Sequence, Union
from re import Match, Pattern
from dataclasses import dataclass, field
import logging
import re

logger = logging.getLogger(__name__)

Replacement = Union[str, Callable[[Match[str]], str]]


@dataclass(frozen=True)
class Rule:
    """
    A single regex rewrite.

    String replacements are inserted literally (no group references), so a
    rule can emit a backslash without escaping. Use a callable to build the
    replacement from the match.
    """
    pattern: str
    replacement: Replacement
    case_sensitive: bool = False
    name: str = ""
    flags: int = 0
    regex: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        flags = self.flags if self.case_sensitive else self.flags | re.IGNORECASE
        object.__setattr__(self, "regex", re.compile(self.pattern, flags))

    def apply(self, text: str) -> str:
        replacement = self.replacement
        if callable(replacement):
            return self.regex.sub(replacement, text)
        return self.regex.sub(lambda _match: replacement, text)


# Multi-word phrases come before any single word they contain
DEFAULT_RULES: List[Rule] = [
    # Compound operators
    Rule(r"\btriple equals\b", "===", name="strict-equals"),
    Rule(r"\b(?:equals equals|double equals)\b", "==", name="equals-equals"),
    Rule(r"\bnot equals?\b", "!=", name="not-equals"),
    Rule(r"\bgreater than or equals?(?: to)?\b", ">=", name="greater-equal"),
    Rule(r"\bless than or equals?(?: to)?\b", "<=", name="less-equal"),
    Rule(r"\bplus equals\b", "+=", name="plus-equals"),
    Rule(r"\bminus equals\b", "-=", name="minus-equals"),
    Rule(r"\b(?:times|star) equals\b", "*=", name="times-equals"),
    Rule(r"\b(?:fat arrow|double arrow)\b", "=>", name="fat-arrow"),
    Rule(r"\barrow\b", "->", name="arrow"),
    Rule(r"\s*\bdouble colon\b\s*", "::", name="double-colon"),
    Rule(r"\b(?:ampersand ampersand|double ampersand)\b", "&&", name="logical-and"),
    Rule(r"\b(?:pipe pipe|double pipe)\b", "||", name="logical-or"),
    Rule(r"\b(?:dash dash|double dash)\b ?", "--", name="double-dash"),

    # Brackets
    Rule(r"\s*\bopen paren(?:thesis)?\b\s*", "(", name="open-paren"),
    Rule(r"\s*\bclose paren(?:thesis)?\b", ")", name="close-paren"),
    Rule(r"\s*\bopen (?:square )?bracket\b\s*", "[", name="open-bracket"),
    Rule(r"\s*\bclose (?:square )?bracket\b", "]", name="close-bracket"),
    Rule(r"\bopen (?:brace|curly(?: brace)?)\b", "{", name="open-brace"),
    Rule(r"\bclose (?:brace|curly(?: brace)?)\b", "}", name="close-brace"),

    # Comparison
    Rule(r"\bgreater than\b", ">", name="greater-than"),
    Rule(r"\bless than\b", "<", name="less-than"),

    # Single symbols
    Rule(r"\s*\bdot\b\s*", ".", name="dot"),
    Rule(r"\s*\bunderscore\b\s*", "_", name="underscore"),
    Rule(r"\s*\bback ?slash\b\s*", "\\", name="backslash"),
    Rule(r"\s*\b(?:forward )?slash\b\s*", "/", name="slash"),
    Rule(r"\bequals\b", "=", name="equals"),
    Rule(r"\bplus\b", "+", name="plus"),
    Rule(r"\bminus\b", "-", name="minus"),
    Rule(r"(?:(?<=\s)|^)dash (?=\w)", "-", name="flag-dash"),
    Rule(r"\bdash\b", "-", name="dash"),
    Rule(r"\b(?:asterisk|star)\b", "*", name="asterisk"),
    Rule(r"\bat sign\b\s*", "@", name="at-sign"),
    Rule(r"\b(?:hash|pound)(?: sign)?\b", "#", name="hash"),
    Rule(r"\bdollar(?: sign)?\b\s*", "$", name="dollar"),
    Rule(r"\bpercent(?: sign)?\b", "%", name="percent"),
    Rule(r"\bcaret\b", "^", name="caret"),
    Rule(r"\bampersand\b", "&", name="ampersand"),
    Rule(r"\bpipe\b", "|", name="pipe"),
    Rule(r"\btilde\b", "~", name="tilde"),
    Rule(r"\bbacktick\b", "`", name="backtick"),
    Rule(r"\s*\bsemicolon\b", ";", name="semicolon"),
    Rule(r"\s*\bcolon\b", ":", name="colon"),
    Rule(r"\s*\bcomma\b", ",", name="comma"),
    Rule(r"\s*\bquestion mark\b", "?", name="question-mark"),
    Rule(r"\b(?:exclamation mark|exclamation point)\b\s*", "!", name="exclamation"),
    Rule(r"\bdouble quotes?\b", '"', name="double-quote"),
    Rule(r"\bsingle quotes?\b", "'", name="single-quote"),
]


class RuleBasedCorrector:
    """Applies an ordered list of spoken-symbol rules."""

    def __init__(self, rules: Optional[Sequence[Rule]] = None):
        self.rules: List[Rule] = list(DEFAULT_RULES if rules is None else rules)

    def correct(self, text: str) -> str:
        """Apply every rule in order and return the rewritten text."""
        result = text
        for rule in self.rules:
            updated = rule.apply(result)
            if updated != result:
                logger.debug(f"Rule {rule.name or rule.pattern}: {result!r} -> {updated!r}")
                result = updated
        return result

    def extend(self, rules: Sequence[Rule]) -> "RuleBasedCorrector":
        """Create a corrector with additional rules appended."""
        return RuleBasedCorrector(self.rules + list(rules))
