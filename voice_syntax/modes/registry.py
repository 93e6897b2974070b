"""
Voice mode catalog.

A voice mode names the syntax the user is dictating into. Each mode carries
its trigger phrases, a display name and whether spoken symbols ("slash",
"dot", "equals") should be converted to literal characters.
"""

from typing import Dict, List, Tuple
from dataclasses import dataclass
from enum import Enum


class Mode(str, Enum):
    NONE = "none"
    MARKDOWN = "markdown"
    JAVASCRIPT = "javascript"
    PHP = "php"
    PYTHON = "python"
    BASH = "bash"


@dataclass(frozen=True)
class ModeSpec:
    """Static description of a voice mode."""
    triggers: Tuple[str, ...]
    display_name: str
    requires_symbol_conversion: bool


MODE_REGISTRY: Dict[Mode, ModeSpec] = {
    Mode.NONE: ModeSpec(
        triggers=("plain", "plain text", "clear mode", "normal"),
        display_name="Plain Text",
        requires_symbol_conversion=False,
    ),
    Mode.MARKDOWN: ModeSpec(
        triggers=(
            "markdown", "mark down", "md",
            "markdown on", "mark down on", "md on",
            "markdown mode", "mark down mode", "md mode",
        ),
        display_name="Markdown",
        requires_symbol_conversion=False,
    ),
    Mode.JAVASCRIPT: ModeSpec(
        triggers=(
            "javascript", "js", "typescript", "ts",
            "javascript on", "js on", "typescript on", "ts on",
        ),
        display_name="JavaScript",
        requires_symbol_conversion=True,
    ),
    Mode.PHP: ModeSpec(
        triggers=("php", "php on", "php mode"),
        display_name="PHP",
        requires_symbol_conversion=True,
    ),
    Mode.PYTHON: ModeSpec(
        triggers=("python", "py", "python on", "py on", "python mode", "py mode"),
        display_name="Python",
        requires_symbol_conversion=True,
    ),
    Mode.BASH: ModeSpec(
        triggers=(
            "bash", "shell", "terminal", "command",
            "bash on", "shell on", "terminal on", "command on",
        ),
        display_name="Bash",
        requires_symbol_conversion=True,
    ),
}

# Phrases that switch any active mode back to plain text
OFF_PHRASES: Tuple[str, ...] = (
    "markdown off", "mark down off", "md off",
    "javascript off", "js off", "typescript off", "ts off",
    "php off",
    "python off", "py off",
    "bash off", "shell off", "terminal off", "command off",
    "mode off", "turn off mode", "disable mode",
)


def validate_registry(registry: Dict[Mode, ModeSpec], off_phrases: Tuple[str, ...] = OFF_PHRASES) -> None:
    """
    Check the registry covers every mode and that trigger phrases are unique.

    Raises:
        ValueError: If a mode has no entry, a trigger is not lowercase, or a
            phrase is claimed twice.
    """
    missing = [mode.value for mode in Mode if mode not in registry]
    if missing:
        raise ValueError(f"Modes missing from registry: {', '.join(missing)}")

    owners: Dict[str, str] = {phrase: "off" for phrase in off_phrases}
    if len(owners) != len(off_phrases):
        raise ValueError("Duplicate phrase in off phrase list")

    for mode, spec in registry.items():
        if spec.requires_symbol_conversion == (mode in (Mode.NONE, Mode.MARKDOWN)):
            raise ValueError(f"Mode {mode.value} has the wrong symbol conversion flag")
        for trigger in spec.triggers:
            if trigger != trigger.lower().strip():
                raise ValueError(f"Trigger {trigger!r} must be lowercase and trimmed")
            if trigger in owners:
                raise ValueError(
                    f"Trigger {trigger!r} of {mode.value} already used by {owners[trigger]}"
                )
            owners[trigger] = mode.value


def ordered_triggers(registry: Dict[Mode, ModeSpec] = MODE_REGISTRY) -> List[Tuple[str, Mode]]:
    """All (trigger, mode) pairs, longest trigger first, ties in registry order."""
    pairs = [
        (trigger, mode)
        for mode, spec in registry.items()
        for trigger in spec.triggers
    ]
    # sorted() is stable, so equal lengths keep registry order
    return sorted(pairs, key=lambda pair: -len(pair[0]))


def get_spec(mode: Mode) -> ModeSpec:
    return MODE_REGISTRY[mode]


validate_registry(MODE_REGISTRY)
