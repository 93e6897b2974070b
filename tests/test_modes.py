"""
Tests for the voice mode registry, detector, state and prompts.
"""

import pytest
import asyncio
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from voice_syntax.modes.registry import (
    Mode,
    ModeSpec,
    MODE_REGISTRY,
    OFF_PHRASES,
    get_spec,
    ordered_triggers,
    validate_registry,
)
from voice_syntax.modes.detector import ModeDetector
from voice_syntax.modes.state import ModeState
from voice_syntax.modes.prompts import PROMPTS, INPUT_PLACEHOLDER, get_prompt, render_prompt


class TestModeRegistry:
    """Test the static mode catalog."""

    def test_every_mode_registered(self):
        """Every Mode member has a spec."""
        assert set(MODE_REGISTRY) == set(Mode)

    def test_symbol_conversion_flags(self):
        """Only programming modes convert spoken symbols."""
        assert not get_spec(Mode.NONE).requires_symbol_conversion
        assert not get_spec(Mode.MARKDOWN).requires_symbol_conversion
        for mode in (Mode.JAVASCRIPT, Mode.PHP, Mode.PYTHON, Mode.BASH):
            assert get_spec(mode).requires_symbol_conversion

    def test_display_names(self):
        assert get_spec(Mode.JAVASCRIPT).display_name == "JavaScript"
        assert get_spec(Mode.NONE).display_name == "Plain Text"

    def test_duplicate_trigger_rejected(self):
        """A trigger claimed by two modes fails validation."""
        registry = dict(MODE_REGISTRY)
        registry[Mode.PHP] = ModeSpec(("php", "python"), "PHP", True)

        with pytest.raises(ValueError, match="already used"):
            validate_registry(registry)

    def test_trigger_clashing_with_off_phrase_rejected(self):
        registry = dict(MODE_REGISTRY)
        registry[Mode.PHP] = ModeSpec(("php", "mode off"), "PHP", True)

        with pytest.raises(ValueError):
            validate_registry(registry)

    def test_missing_mode_rejected(self):
        registry = dict(MODE_REGISTRY)
        del registry[Mode.BASH]

        with pytest.raises(ValueError, match="bash"):
            validate_registry(registry)

    def test_uppercase_trigger_rejected(self):
        registry = dict(MODE_REGISTRY)
        registry[Mode.PHP] = ModeSpec(("PHP",), "PHP", True)

        with pytest.raises(ValueError, match="lowercase"):
            validate_registry(registry)

    def test_wrong_conversion_flag_rejected(self):
        registry = dict(MODE_REGISTRY)
        registry[Mode.MARKDOWN] = ModeSpec(("markdown",), "Markdown", True)

        with pytest.raises(ValueError, match="symbol conversion"):
            validate_registry(registry)

    def test_ordered_triggers_longest_first(self):
        """Longer triggers are tried before their prefixes."""
        triggers = [trigger for trigger, _mode in ordered_triggers()]
        lengths = [len(trigger) for trigger in triggers]

        assert lengths == sorted(lengths, reverse=True)
        assert triggers.index("md on") < triggers.index("md")


class TestModeDetector:
    """Test trigger detection at the start of an utterance."""

    @pytest.fixture
    def detector(self):
        return ModeDetector()

    @pytest.mark.parametrize("text,mode", [
        ("markdown", Mode.MARKDOWN),
        ("Markdown.", Mode.MARKDOWN),
        ("mark down mode", Mode.MARKDOWN),
        ("JavaScript", Mode.JAVASCRIPT),
        ("ts on", Mode.JAVASCRIPT),
        ("PHP", Mode.PHP),
        ("py mode", Mode.PYTHON),
        ("shell", Mode.BASH),
        ("plain text", Mode.NONE),
    ])
    def test_mode_only_utterance(self, detector, text, mode):
        """A trigger alone switches mode with nothing left to type."""
        assert detector.detect(text) == (mode, "")

    def test_trigger_prefix_keeps_remainder_casing(self, detector):
        mode, remainder = detector.detect("Python Print Hello")

        assert mode == Mode.PYTHON
        assert remainder == "Print Hello"

    def test_trigger_followed_by_punctuation(self, detector):
        assert detector.detect("Markdown. Hello world") == (Mode.MARKDOWN, "Hello world")

    def test_longest_trigger_wins(self, detector):
        """'md on notes' is markdown with 'notes', not markdown with 'on notes'."""
        assert detector.detect("md on notes") == (Mode.MARKDOWN, "notes")

    @pytest.mark.parametrize("text", [
        "mode off",
        "Markdown off.",
        "python off",
        "disable mode",
        "turn off mode",
        "js off please",
    ])
    def test_off_phrases(self, detector, text):
        """Off phrases always resolve to plain text."""
        assert detector.detect(text) == (Mode.NONE, "")

    def test_no_trigger(self, detector):
        assert detector.detect("hello world") == (None, "hello world")

    def test_trigger_must_be_whole_word(self, detector):
        """'pythonic' does not activate python."""
        assert detector.detect("pythonic code") == (None, "pythonic code")

    def test_surrounding_whitespace_ignored(self, detector):
        assert detector.detect("  bash ls  ") == (Mode.BASH, "ls")

    def test_empty_input(self, detector):
        assert detector.detect("") == (None, "")


class TestModeState:
    """Test the shared mode cell."""

    def test_initial_mode(self):
        assert ModeState().mode == Mode.NONE
        assert ModeState(Mode.PHP).mode == Mode.PHP

    def test_set_mode_reports_change(self):
        state = ModeState()

        assert state.set_mode(Mode.MARKDOWN) is True
        assert state.set_mode(Mode.MARKDOWN) is False
        assert state.mode == Mode.MARKDOWN
        assert state.spec.display_name == "Markdown"

    def test_clear(self):
        state = ModeState(Mode.BASH)
        state.clear()

        assert state.mode == Mode.NONE

    @pytest.mark.asyncio
    async def test_lock_serializes_holders(self):
        """Only one holder of the lock at a time."""
        state = ModeState()
        order = []

        async def hold(name):
            async with state.lock:
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(hold("a"), hold("b"))

        assert order == ["a-in", "a-out", "b-in", "b-out"]


class TestPrompts:
    """Test per-mode prompt templates."""

    def test_prompt_for_every_mode(self):
        for mode in Mode:
            assert INPUT_PLACEHOLDER in get_prompt(mode)
        assert set(PROMPTS) == set(Mode)

    def test_prompts_differ_by_mode(self):
        assert get_prompt(Mode.PYTHON) != get_prompt(Mode.BASH)
        assert "Python" in get_prompt(Mode.PYTHON)

    def test_render_prompt(self):
        rendered = render_prompt(get_prompt(Mode.MARKDOWN), "hash hello")

        assert INPUT_PLACEHOLDER not in rendered
        assert "hash hello" in rendered


class TestOffPhrases:
    def test_off_phrases_unique(self):
        assert len(set(OFF_PHRASES)) == len(OFF_PHRASES)
