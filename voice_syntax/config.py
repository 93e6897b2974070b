"""
Pipeline and LLM configuration.

Settings are plain frozen dataclasses so the pipeline can read them per
invocation without caring where they came from. Environment variables
provide defaults; the CLI overrides them with explicit flags.
"""

from typing import Optional, Mapping
from dataclasses import dataclass
import os
import logging

logger = logging.getLogger(__name__)

ENV_PREFIX = "VOICE_SYNTAX_"

# Providers understood by create_corrector()
LLM_PROVIDERS = ["openai", "claude", "mock"]

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "claude": "claude-3-haiku-20240307",
    "mock": "mock",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False

    logger.warning(f"Ignoring invalid boolean {ENV_PREFIX + name}={raw!r}")
    return default


@dataclass(frozen=True)
class PipelineConfig:
    """Correction switches read by the pipeline on every invocation."""
    dev_correction_enabled: bool = True
    llm_correction_enabled: bool = False
    llm_always_apply: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """
        Build a config from VOICE_SYNTAX_* environment variables.

        Args:
            env: Mapping to read from. Defaults to os.environ.

        Returns:
            PipelineConfig with unset variables left at their defaults.
        """
        env = os.environ if env is None else env
        return cls(
            dev_correction_enabled=_env_flag(env, "DEV_CORRECTION", True),
            llm_correction_enabled=_env_flag(env, "LLM_CORRECTION", False),
            llm_always_apply=_env_flag(env, "LLM_ALWAYS_APPLY", False),
        )


@dataclass(frozen=True)
class LLMSettings:
    """Connection settings for the language-model collaborator."""
    provider: str = "openai"
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None  # OpenAI-compatible local/remote servers
    timeout: float = 10.0

    @property
    def resolved_model(self) -> str:
        """Model name, falling back to the provider default."""
        return self.model or DEFAULT_MODELS.get(self.provider, "")

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        provider: Optional[str] = None,
    ) -> "LLMSettings":
        """
        Build LLM settings from the environment.

        Args:
            env: Mapping to read from. Defaults to os.environ.
            provider: Provider overriding VOICE_SYNTAX_LLM_PROVIDER; also
                decides which API key variable is read.
        """
        env = os.environ if env is None else env

        provider = (provider or env.get(ENV_PREFIX + "LLM_PROVIDER", "openai")).strip().lower()
        if provider not in LLM_PROVIDERS:
            logger.warning(f"Unknown LLM provider '{provider}', using 'openai'")
            provider = "openai"

        timeout = cls.timeout
        raw_timeout = env.get(ENV_PREFIX + "LLM_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid LLM timeout {raw_timeout!r}")

        key_var = "ANTHROPIC_API_KEY" if provider == "claude" else "OPENAI_API_KEY"
        return cls(
            provider=provider,
            model=env.get(ENV_PREFIX + "LLM_MODEL") or None,
            api_key=env.get(key_var) or None,
            base_url=env.get(ENV_PREFIX + "LLM_BASE_URL") or None,
            timeout=timeout,
        )
