"""
Tests for configuration loading, the developer-app catalog and
transcription result values.
"""

import pytest
from dataclasses import FrozenInstanceError
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from voice_syntax.config import LLMSettings, PipelineConfig
from voice_syntax.dev_apps import CorrectionContext, DevApp, DevAppRegistry, DEFAULT_DEV_APPS
from voice_syntax.transcription import TranscriptionResult


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig()

        assert config.dev_correction_enabled
        assert not config.llm_correction_enabled
        assert not config.llm_always_apply

    def test_from_env(self):
        config = PipelineConfig.from_env({
            "VOICE_SYNTAX_DEV_CORRECTION": "off",
            "VOICE_SYNTAX_LLM_CORRECTION": "1",
            "VOICE_SYNTAX_LLM_ALWAYS_APPLY": "Yes",
        })

        assert not config.dev_correction_enabled
        assert config.llm_correction_enabled
        assert config.llm_always_apply

    def test_invalid_flag_keeps_default(self, caplog):
        config = PipelineConfig.from_env({"VOICE_SYNTAX_LLM_CORRECTION": "maybe"})

        assert not config.llm_correction_enabled
        assert "VOICE_SYNTAX_LLM_CORRECTION" in caplog.text

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            PipelineConfig().llm_correction_enabled = True


class TestLLMSettings:
    def test_defaults(self):
        settings = LLMSettings.from_env({})

        assert settings.provider == "openai"
        assert settings.resolved_model == "gpt-4o-mini"
        assert settings.api_key is None
        assert settings.timeout == 10.0

    def test_claude_reads_anthropic_key(self):
        settings = LLMSettings.from_env({
            "VOICE_SYNTAX_LLM_PROVIDER": "claude",
            "ANTHROPIC_API_KEY": "a-key",
            "OPENAI_API_KEY": "o-key",
        })

        assert settings.api_key == "a-key"
        assert settings.resolved_model == "claude-3-haiku-20240307"

    def test_provider_override(self):
        settings = LLMSettings.from_env({"OPENAI_API_KEY": "o-key"}, provider="mock")

        assert settings.provider == "mock"

    def test_unknown_provider_falls_back(self):
        assert LLMSettings.from_env({"VOICE_SYNTAX_LLM_PROVIDER": "gemini"}).provider == "openai"

    def test_model_base_url_and_timeout(self):
        settings = LLMSettings.from_env({
            "VOICE_SYNTAX_LLM_MODEL": "llama3",
            "VOICE_SYNTAX_LLM_BASE_URL": "http://localhost:11434/v1",
            "VOICE_SYNTAX_LLM_TIMEOUT": "2.5",
        })

        assert settings.resolved_model == "llama3"
        assert settings.base_url == "http://localhost:11434/v1"
        assert settings.timeout == 2.5

    def test_invalid_timeout_ignored(self):
        assert LLMSettings.from_env({"VOICE_SYNTAX_LLM_TIMEOUT": "soon"}).timeout == 10.0


class TestDevApps:
    def test_default_catalog(self):
        registry = DevAppRegistry()

        assert registry.is_dev_app("com.microsoft.VSCode")
        assert registry.is_dev_app("com.googlecode.iterm2")
        assert not registry.is_dev_app("com.apple.Notes")
        assert not registry.is_dev_app(None)
        assert len(registry.apps) == len(DEFAULT_DEV_APPS)

    def test_disable_app(self):
        registry = DevAppRegistry()
        registry.set_enabled("com.apple.Terminal", False)

        assert not registry.is_dev_app("com.apple.Terminal")
        assert DevAppRegistry().is_dev_app("com.apple.Terminal")

    def test_disable_unknown_app(self):
        with pytest.raises(KeyError):
            DevAppRegistry().set_enabled("com.example.Unknown", False)

    def test_add_app(self):
        registry = DevAppRegistry(apps=[])
        registry.add(DevApp("org.vim.MacVim", "MacVim"))

        assert registry.is_dev_app("org.vim.MacVim")

    def test_context_for_app(self):
        assert CorrectionContext.for_app("dev.zed.Zed").is_dev_app
        assert not CorrectionContext.for_app("com.apple.Safari").is_dev_app


class TestTranscriptionResult:
    def test_with_correction(self):
        result = TranscriptionResult(text="hash hello", confidence=0.8, processing_time=1.2)
        corrected = result.with_correction("# hello")

        assert corrected.text == "# hello"
        assert corrected.was_corrected
        assert corrected.original_text == "hash hello"
        assert corrected.confidence == 0.8
        assert corrected.processing_time == 1.2

    def test_original_untouched(self):
        result = TranscriptionResult(text="hash hello")
        result.with_correction("# hello")

        assert result.text == "hash hello"
        assert not result.was_corrected
        assert result.original_text is None
