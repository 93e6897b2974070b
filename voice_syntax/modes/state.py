"""
Current voice mode, shared across pipeline invocations.
"""

import asyncio
import logging

from .registry import Mode, ModeSpec, get_spec

logger = logging.getLogger(__name__)


class ModeState:
    """
    Holds the active voice mode.

    The mode persists between transcripts until a trigger changes it.
    Callers that read and write the mode as one step hold `lock` so a
    second transcript cannot interleave with the first.
    """

    def __init__(self, initial: Mode = Mode.NONE):
        self._mode = initial
        self.lock = asyncio.Lock()

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def spec(self) -> ModeSpec:
        return get_spec(self._mode)

    def set_mode(self, mode: Mode) -> bool:
        """
        Switch to a new mode.

        Returns:
            True if the mode actually changed.
        """
        if mode == self._mode:
            return False
        logger.info(f"Mode changed: {self._mode.value} -> {mode.value}")
        self._mode = mode
        return True

    def clear(self) -> None:
        """Return to plain text."""
        self.set_mode(Mode.NONE)
