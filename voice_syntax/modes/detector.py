"""
Mode trigger detection.

Finds a spoken "mode on" or "mode off" phrase at the start of an utterance
and splits it from the content that follows.
"""

from typing import Dict, List, Optional, Tuple
from re import Pattern
import logging
import re
import string

from .registry import Mode, ModeSpec, MODE_REGISTRY, OFF_PHRASES, ordered_triggers

logger = logging.getLogger(__name__)

_TRIM_CHARS = string.punctuation + string.whitespace


def _prefix_pattern(phrase: str) -> Pattern[str]:
    # A trigger followed by optional sentence punctuation and a space: "Markdown. Hello"
    return re.compile(rf"{re.escape(phrase)}[.,!?;:]?\s+", re.IGNORECASE)


class ModeDetector:
    """
    Detects mode switches spoken at the start of a transcript.

    Off phrases are checked first. Activation triggers are then tried
    longest first across the whole registry, so "md on notes" activates
    markdown with "notes" as content rather than matching "md".
    """

    def __init__(
        self,
        registry: Dict[Mode, ModeSpec] = MODE_REGISTRY,
        off_phrases: Tuple[str, ...] = OFF_PHRASES,
    ):
        self._off_phrases = [
            (phrase, _prefix_pattern(phrase))
            for phrase in sorted(off_phrases, key=len, reverse=True)
        ]
        self._triggers: List[Tuple[str, Mode, Pattern[str]]] = [
            (trigger, mode, _prefix_pattern(trigger))
            for trigger, mode in ordered_triggers(registry)
        ]

    def detect(self, text: str) -> Tuple[Optional[Mode], str]:
        """
        Look for a mode trigger in the text.

        Args:
            text: Raw transcript

        Returns:
            (mode, remainder). mode is None when no trigger was found, in
            which case remainder is the untouched input. An empty remainder
            means the utterance only switched modes.
        """
        source = text.strip()
        stripped = source.lower().strip(_TRIM_CHARS)

        for phrase, prefix in self._off_phrases:
            if stripped == phrase or prefix.match(source):
                logger.info(f"Mode off trigger detected: {phrase}")
                return Mode.NONE, ""

        for trigger, mode, prefix in self._triggers:
            match = prefix.match(source)
            if match:
                logger.info(f"Mode trigger detected: {trigger} -> {mode.value}")
                return mode, source[match.end():]
            if stripped == trigger:
                logger.info(f"Mode set to: {mode.value}")
                return mode, ""

        return None, text
