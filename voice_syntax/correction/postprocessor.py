"""
Final cleanup after rule-based or LLM correction.
"""

import re

_SPACE_RUN = re.compile(r" {2,}")


def _collapse(text: str, pattern: str, replacement: str) -> str:
    while pattern in text:
        text = text.replace(pattern, replacement)
    return text


def postprocess(text: str) -> str:
    """
    Collapse symbols split apart by overlapping rules and normalize spaces.

    "# # title" becomes "## title" and "- - x" becomes "-- x"; repeated
    spaces collapse and the result is trimmed.
    """
    result = _collapse(text, "# #", "##")
    result = _collapse(result, "- -", "--")
    result = _SPACE_RUN.sub(" ", result)
    return result.strip()
