"""
Deterministic rewriting of spoken markdown and punctuation commands.

Speech recognition output is noisy and several spoken commands overlap
("hash hash" vs "hash", "end code" vs "end code block", "quote" vs "block
quote"), so the rewrites run as an explicit, ordered list of stages. Each
stage assumes every earlier stage already ran; reordering them changes the
output.

Plain-text mode only gets minimal cleanup. Every other mode gets the full
rule set.
"""

from typing import Callable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
import logging
import re

from ..modes.registry import Mode
from .rules import Rule

logger = logging.getLogger(__name__)

# Upper bound on passes for the fixed-point stages
MAX_PASSES = 20

NUMBER_WORDS = {
    "one": "1", "two": "2", "three": "3", "four": "4", "five": "5",
    "six": "6", "seven": "7", "eight": "8", "nine": "9", "ten": "10",
}

# (spoken name, marker), longer names first so "bold italic" wins over "bold"
TOGGLES: List[Tuple[str, str]] = [
    ("bold italic", "***"),
    ("bold", "**"),
    ("italic", "*"),
    ("inline code", "`"),
    ("code", "`"),
    ("strikethrough", "~~"),
    ("strike", "~~"),
    ("highlight", "=="),
    ("subscript", "~"),
    ("superscript", "^"),
]

LINE_BREAK_PHRASES = ["new line", "newline", "line break", "next line"]
PARAGRAPH_PHRASE = "new paragraph"

FENCE_CLOSE_PHRASES = ["end code block", "end codeblock", "close code block"]


def _toggle_phrases() -> List[str]:
    phrases = []
    for name, _marker in TOGGLES:
        phrases += [f"{name} on", f"{name} start", f"start {name}"]
        phrases += [f"{name} off", f"{name} end", f"end {name}"]
    return phrases


# Spoken command phrases lowercased before any other rule runs, so the
# remaining rules can match case-sensitively and leave user casing alone.
VOCABULARY: List[str] = sorted(
    set(
        ["hash", "dash", "heading", "bullet", "list item", "numbered", "number",
         "block quote", "quote", "checkbox", "todo", "checked",
         "code block", "codeblock", "horizontal rule", "divider",
         "open link", "link text", "link to", "link url", "end link", "close link",
         "open image", "image alt", "image from", "image url", "image source",
         "end image", "close image", "footnote",
         "colon", "slash", "forward slash", "double slash", "dot",
         PARAGRAPH_PHRASE]
        + [f"h{level}" for level in range(1, 7)]
        + [f"heading {word}" for word in list(NUMBER_WORDS)[:6]]
        + LINE_BREAK_PHRASES
        + FENCE_CLOSE_PHRASES
        + _toggle_phrases()
    ),
    key=len,
    reverse=True,
)

_VOCABULARY_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(phrase) for phrase in VOCABULARY) + r")\b",
    re.IGNORECASE,
)


def _line_start() -> str:
    """
    Anchor for block-level commands.

    Matches at the start of the text, after a newline, or right after a
    spoken line break that has not been converted yet.
    """
    lookbehinds = [
        f"(?<=\\b{re.escape(phrase)}{suffix})"
        for phrase in [PARAGRAPH_PHRASE] + LINE_BREAK_PHRASES
        for suffix in (" ", r"\. ")
    ]
    return "(?:^|" + "|".join(lookbehinds) + ")"


LINE_START = _line_start()

_LINE_BREAK_AHEAD = (
    r"(?=\s*$|\s+(?:" + "|".join(re.escape(p) for p in [PARAGRAPH_PHRASE] + LINE_BREAK_PHRASES) + r")\b)"
)

# A fence language must not be the start of a spoken line break
_NOT_LINE_BREAK = (
    r"(?!(?:" + "|".join(re.escape(p) for p in [PARAGRAPH_PHRASE] + LINE_BREAK_PHRASES) + r")\b)"
)

URL_HEAD = r"\b[A-Za-z][\w+.-]*://"


def _rule(pattern: str, replacement, name: str, multiline: bool = False) -> Rule:
    # Vocabulary is already lowercase, so stage rules are case-sensitive
    return Rule(
        pattern,
        replacement,
        case_sensitive=True,
        name=name,
        flags=re.MULTILINE if multiline else 0,
    )


@dataclass(frozen=True)
class Stage:
    """A named group of rules applied in order."""
    name: str
    rules: Sequence[Rule]
    until_stable: bool = False
    applies: Optional[Callable[[str], bool]] = None

    def run(self, text: str) -> str:
        if self.applies is not None and not self.applies(text):
            return text

        passes = MAX_PASSES if self.until_stable else 1
        for _ in range(passes):
            previous = text
            for rule in self.rules:
                text = rule.apply(text)
            if text == previous:
                break
        return text


def _lowercase_vocabulary(text: str) -> str:
    return _VOCABULARY_RE.sub(lambda match: match.group(0).lower(), text)


def _repeated_symbol_rules() -> List[Rule]:
    rules = []
    for count in range(6, 0, -1):
        rules.append(_rule(
            r"\bhash" + r" hash" * (count - 1) + r"\b",
            "#" * count,
            name=f"hash-x{count}",
        ))
    rules.append(_rule(r"\bdash dash dash\b", "---", name="dash-x3"))
    rules.append(_rule(r"\bdash dash\b ?", "--", name="dash-x2"))
    return rules


def _toggle_rules() -> List[Rule]:
    rules = []
    for name, marker in TOGGLES:
        # Inline code toggles must not eat "code block" commands
        guard = r"(?! ?block)" if name.endswith("code") else ""
        opener = rf"\b(?:{name} on|{name} start|start {name})\b{guard}[.,]?\s*"
        closer = rf"\s*\b(?:{name} off|{name} end|end {name})\b{guard}([.,]?)"
        rules.append(_rule(opener, marker, name=f"{name}-open"))
        rules.append(_rule(
            closer,
            lambda match, marker=marker: marker + match.group(1),
            name=f"{name}-close",
        ))
    return rules


def _heading_pattern(level: int) -> str:
    alternatives = [f"heading {level}", f"h{level}"]
    word = next(w for w, digit in NUMBER_WORDS.items() if digit == str(level))
    alternatives.insert(1, f"heading {word}")
    return LINE_START + r"(?:" + "|".join(alternatives) + r")\b[.,]? ?"


def _block_rules() -> List[Rule]:
    rules = [
        _rule(_heading_pattern(level), "#" * level + " ", name=f"heading-{level}", multiline=True)
        for level in range(6, 0, -1)
    ]
    rules += [
        _rule(LINE_START + r"(?:bullet|list item)\b ?", "- ", name="bullet", multiline=True),
        _rule(LINE_START + r"(?:numbered item|number item|numbered|number)\b ?", "1. ",
              name="numbered", multiline=True),
        _rule(LINE_START + r"(?:block quote|quote)\b ?", "> ", name="block-quote", multiline=True),
        _rule(LINE_START + r"(?:checkbox|todo)\b ?", "- [ ] ", name="checkbox", multiline=True),
        _rule(LINE_START + r"checked\b ?", "- [x] ", name="checked", multiline=True),
        _rule(
            LINE_START + r"(?:" + "|".join(FENCE_CLOSE_PHRASES) + r")\b",
            "```",
            name="fence-close-line",
            multiline=True,
        ),
        # A close spoken mid-line still needs its own line
        _rule(
            r"[ \t]*\b(?:" + "|".join(FENCE_CLOSE_PHRASES) + r")\b",
            "\n```",
            name="fence-close",
        ),
        _rule(
            LINE_START + r"(?:code block|codeblock)\b(?: " + _NOT_LINE_BREAK + r"([\w+#-]+))?",
            lambda match: "```" + (match.group(1) or ""),
            name="fence-open",
            multiline=True,
        ),
        _rule(
            LINE_START + r"(?:horizontal rule|divider)" + _LINE_BREAK_AHEAD,
            "---",
            name="horizontal-rule",
            multiline=True,
        ),
    ]
    return rules


def _inline_rules() -> List[Rule]:
    footnote_ids = r"\d+|" + "|".join(NUMBER_WORDS)
    return [
        _rule(
            r"\b(?:open image|image alt)\b\s*(.*?)\s*\b(?:image from|image url|image source)\b\s*(.*?)"
            r"\s*(?:\b(?:end image|close image)\b|$)",
            lambda match: f"![{match.group(1)}]({match.group(2)})",
            name="image",
        ),
        _rule(
            r"\b(?:open link|link text)\b\s*(.*?)\s*\b(?:link to|link url)\b\s*(.*?)"
            r"\s*(?:\b(?:end link|close link)\b|$)",
            lambda match: f"[{match.group(1)}]({match.group(2)})",
            name="link",
        ),
        _rule(
            rf"\s*\bfootnote ({footnote_ids})\b",
            lambda match: f"[^{NUMBER_WORDS.get(match.group(1), match.group(1))}]",
            name="footnote",
        ),
    ]


def _line_break_rules() -> List[Rule]:
    breaks = "|".join(re.escape(phrase) for phrase in LINE_BREAK_PHRASES)
    return [
        _rule(rf"[ \t]*\b{PARAGRAPH_PHRASE}\b[.,]?[ \t]*", "\n\n", name="paragraph"),
        _rule(rf"[ \t]*\b(?:{breaks})\b[.,]?[ \t]*", "\n", name="line-break"),
    ]


_SPOKEN_SLASH = r"(?:\bforward slash\b|\bslash\b|/)"

SCHEME_RULES: List[Rule] = [
    _rule(
        rf"\s*(?:\bcolon\b|:)\s*(?:\bdouble slash\b|{_SPOKEN_SLASH}\s*{_SPOKEN_SLASH})\s*",
        "://",
        name="spoken-scheme",
    ),
]

SCHEME_SPACING_RULES: List[Rule] = [
    _rule(r"(?<=\w)\s+(?=:\s*/\s*/)", "", name="space-before-colon"),
    _rule(r"(?<=:)\s+(?=/\s*/)", "", name="space-after-colon"),
    _rule(r"(?<=:/)\s+(?=/)", "", name="space-between-slashes"),
    _rule(r"(?<=://)\s+(?=\w)", "", name="space-after-scheme"),
]

_URL_SYMBOLS = {"dot": ".", "slash": "/"}

URL_BODY_RULES: List[Rule] = [
    _rule(
        rf"({URL_HEAD}\S*?)\s+(dot|slash|\.|/)\s+(?=\w)",
        lambda match: match.group(1) + _URL_SYMBOLS.get(match.group(2), match.group(2)),
        name="url-spaced-separator",
    ),
    _rule(rf"({URL_HEAD}\S*?)\s+([./])(?=\w)", lambda match: match.group(1) + match.group(2),
          name="url-space-before-separator"),
    _rule(
        rf"({URL_HEAD}\S*?\.)\s+(?=(?:com|org|net|io|dev|ai|co|edu|gov|app)\b)",
        lambda match: match.group(1),
        name="url-space-before-tld",
    ),
]


def _build_stages() -> List[Stage]:
    return [
        Stage("repeated-symbols", _repeated_symbol_rules()),
        Stage("toggles", _toggle_rules()),
        Stage("block-elements", _block_rules()),
        Stage("inline-compounds", _inline_rules()),
        Stage("line-breaks", _line_break_rules()),
        Stage("url-scheme", SCHEME_RULES),
        Stage("url-scheme-spacing", SCHEME_SPACING_RULES, until_stable=True),
        Stage("url-body", URL_BODY_RULES, until_stable=True, applies=lambda text: "://" in text),
    ]


def _collapse_spaces(text: str) -> str:
    return re.sub(r" {2,}", " ", text).strip()


class Preprocessor:
    """
    Converts spoken markdown and punctuation commands to literal syntax.

    Stages, in order:
    - strip transcription-artifact commas (every mode; plain mode stops here)
    - lowercase the spoken command vocabulary
    - repeated symbols, longest run first
    - paired toggles (bold, italic, code, strike, highlight, ...)
    - block elements at line start (headings, lists, quotes, fences)
    - links, images and footnotes
    - line breaks and paragraphs
    - URL scheme and body cleanup, to a fixed point
    - space collapse and trim
    """

    def __init__(self):
        self.stages = _build_stages()

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    def preprocess(self, text: str, mode: Mode) -> str:
        """
        Rewrite spoken commands for the given mode.

        Args:
            text: Transcript (mode trigger already removed)
            mode: Active voice mode

        Returns:
            Rewritten text.
        """
        # Whisper inserts commas between repeated command words ("hash, hash")
        result = text.replace(",", "")

        if mode == Mode.NONE:
            return _collapse_spaces(result)

        result = _lowercase_vocabulary(result)
        for stage in self.stages:
            updated = stage.run(result)
            if updated != result:
                logger.debug(f"Stage {stage.name}: {result!r} -> {updated!r}")
                result = updated

        return _collapse_spaces(result)


_default_preprocessor: Optional[Preprocessor] = None


def preprocess(text: str, mode: Mode) -> str:
    """Preprocess with a shared default Preprocessor."""
    global _default_preprocessor
    if _default_preprocessor is None:
        _default_preprocessor = Preprocessor()
    return _default_preprocessor.preprocess(text, mode)
