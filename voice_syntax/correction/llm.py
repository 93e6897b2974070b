"""
LLM correction adapters.

Provides a unified interface for language-model services (OpenAI or any
OpenAI-compatible server, Claude) that rewrite a preprocessed transcript
using a mode-specific prompt. Model output is untrusted: it is sanitized
and length-checked before the pipeline may use it.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional
import asyncio
import logging
import os
import time

# Import statements that may fail if dependencies aren't installed
try:
    import openai
    OPENAI_AVAILABLE = True
except ImportError:
    OPENAI_AVAILABLE = False

try:
    from anthropic import Anthropic
    ANTHROPIC_AVAILABLE = True
except ImportError:
    ANTHROPIC_AVAILABLE = False

from ..config import LLMSettings
from ..modes.prompts import render_prompt
from .errors import CorrectionError, InferenceFailed, InferenceUnavailable, InvalidResponse

logger = logging.getLogger(__name__)

# Sanitized output longer than this multiple of the input is rejected
MAX_LENGTH_RATIO = 3

# Chat-template end markers (Gemma, Llama, Qwen, Phi, ...)
END_TOKENS = [
    "<end_of_turn>", "<|end|>", "<|eot_id|>", "</s>",
    "<|im_end|>", "<|endoftext|>", "<|assistant|>", "<|user|>",
]

RESPONSE_PREFIXES = [
    "Here is the corrected text:",
    "The corrected text is:",
    "Corrected:",
    "Output:",
    "Result:",
]

WRAPPING_QUOTES = ['"', "'", "`"]

# Spoken constructs (or their preprocessed form) that usually need a model
SPOKEN_PATTERNS = [
    "--", "equals equals", "not equals",
    "greater than", "less than",
    "open paren", "close paren", "open bracket", "close bracket",
    "open brace", "close brace",
    "arrow", "fat arrow",
    "pipe pipe", "ampersand ampersand", "and and", "or or",
]

CODE_INDICATORS = [
    "function", "const", "let", "var",
    "import", "export", "return",
    "async", "await", "class",
    "git", "npm", "pip", "cargo",
    "sudo", "chmod", "mkdir",
]

# Words that are usually dictated lowercase but written with inner capitals
BRAND_WORDS = ["iphone", "javascript", "typescript", "github", "gitlab"]


def sanitize_response(raw: str) -> str:
    """
    Strip model boilerplate from a raw completion.

    Cuts at the first chat end token, removes a wrapping fenced code block,
    known "Output:"-style prefixes and one layer of matching wrapping quotes.
    """
    cleaned = raw
    for token in END_TOKENS:
        index = cleaned.find(token)
        if index != -1:
            cleaned = cleaned[:index]
    cleaned = cleaned.strip()

    # ```lang\n...\n``` around the whole answer
    if cleaned.startswith("```") and cleaned.endswith("```") and len(cleaned) >= 6:
        body = cleaned[3:-3]
        newline = body.find("\n")
        if newline != -1 and " " not in body[:newline].strip():
            body = body[newline + 1:]
        cleaned = body.strip()

    for prefix in RESPONSE_PREFIXES:
        if cleaned.lower().startswith(prefix.lower()):
            cleaned = cleaned[len(prefix):].strip()

    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in WRAPPING_QUOTES:
        cleaned = cleaned[1:-1]

    return cleaned.strip()


def validate_response(cleaned: str, source_text: str) -> str:
    """
    Reject degenerate model output.

    Raises:
        InvalidResponse: If the text is empty or longer than
            MAX_LENGTH_RATIO times the source text.
    """
    limit = len(source_text) * MAX_LENGTH_RATIO
    if not cleaned or len(cleaned) > limit:
        raise InvalidResponse(cleaned, limit)
    return cleaned


def should_apply_correction(text: str) -> bool:
    """
    Cheap check whether the text looks like it needs the LLM.

    Args:
        text: Preprocessed transcript

    Returns:
        True if the text contains spoken code constructs worth a model call.
    """
    word_count = len(text.split())
    if word_count < 2 or word_count > 50:
        return False

    lowercased = text.lower()
    if any(pattern in lowercased for pattern in SPOKEN_PATTERNS):
        return True

    if any(indicator in lowercased for indicator in CODE_INDICATORS):
        return True

    # A brand word present only in lowercase form needs proper casing
    for word in BRAND_WORDS:
        if word in lowercased and word in text and not _has_cased_form(text, word):
            return True

    return False


def _has_cased_form(text: str, word: str) -> bool:
    lowercased = text.lower()
    start = lowercased.find(word)
    while start != -1:
        if text[start:start + len(word)] != word:
            return True
        start = lowercased.find(word, start + 1)
    return False


class LLMCorrector(ABC):
    """Abstract base class for LLM correction adapters."""

    def __init__(self, name: str, timeout: float = 10.0):
        self.name = name
        self.timeout = timeout
        self.usage_stats = {
            'requests': 0,
            'successful': 0,
            'failed': 0,
            'rejected': 0,
            'total_tokens': 0,
        }

    @abstractmethod
    def available(self) -> bool:
        """Check if this adapter can be called (package, API key, model)."""
        pass

    @abstractmethod
    async def _generate(self, prompt: str, text: str) -> str:
        """Run the model on a fully rendered prompt and return raw output."""
        pass

    async def correct(self, text: str, prompt_template: str) -> str:
        """
        Correct text with the model.

        Args:
            text: Preprocessed transcript
            prompt_template: Mode prompt containing an {input} placeholder

        Returns:
            Sanitized, validated correction.

        Raises:
            InferenceUnavailable: The adapter is not available.
            InferenceFailed: The call timed out or raised.
            InvalidResponse: The sanitized output was rejected.
        """
        self.usage_stats['requests'] += 1

        if not self.available():
            self.usage_stats['failed'] += 1
            raise InferenceUnavailable(self.name)

        prompt = render_prompt(prompt_template, text)
        start_time = time.time()

        try:
            raw = await asyncio.wait_for(self._generate(prompt, text), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.usage_stats['failed'] += 1
            raise InferenceFailed(f"{self.name} timed out after {self.timeout}s")
        except CorrectionError:
            self.usage_stats['failed'] += 1
            raise
        except Exception as e:
            self.usage_stats['failed'] += 1
            raise InferenceFailed(str(e)) from e

        logger.debug(f"{self.name} raw output ({time.time() - start_time:.2f}s): {raw!r}")

        cleaned = sanitize_response(raw)
        try:
            validate_response(cleaned, text)
        except InvalidResponse:
            self.usage_stats['rejected'] += 1
            raise

        self.usage_stats['successful'] += 1
        return cleaned

    def get_usage_stats(self) -> Dict[str, Any]:
        """Get current usage statistics."""
        return self.usage_stats.copy()


class OpenAICorrector(LLMCorrector):
    """OpenAI chat completions, or any OpenAI-compatible server via base_url."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        max_tokens: int = 200,
        temperature: float = 0.1,
    ):
        super().__init__("openai", timeout=timeout)
        self.model = model
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = base_url
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = None

    def available(self) -> bool:
        """Local OpenAI-compatible servers do not need an API key."""
        return OPENAI_AVAILABLE and bool(self.api_key or self.base_url)

    async def _generate(self, prompt: str, text: str) -> str:
        # Run the synchronous OpenAI call in the default thread pool
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._sync_generate, prompt)

    def _sync_generate(self, prompt: str) -> str:
        """Synchronous completion call to be run in executor."""
        if not self._client:
            self._client = openai.OpenAI(
                api_key=self.api_key or "not-needed",
                base_url=self.base_url,
                timeout=self.timeout,
            )

        response = self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        if response.usage:
            self.usage_stats['total_tokens'] += response.usage.total_tokens
        return response.choices[0].message.content or ""


class ClaudeCorrector(LLMCorrector):
    """Anthropic Claude adapter."""

    def __init__(
        self,
        model: str = "claude-3-haiku-20240307",
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        max_tokens: int = 200,
        temperature: float = 0.1,
    ):
        super().__init__("claude", timeout=timeout)
        self.model = model
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: Optional[Anthropic] = None

    def available(self) -> bool:
        """Check if Claude is available."""
        return ANTHROPIC_AVAILABLE and bool(self.api_key)

    async def _generate(self, prompt: str, text: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._sync_generate, prompt)

    def _sync_generate(self, prompt: str) -> str:
        """Synchronous messages call to be run in executor."""
        if not self._client:
            self._client = Anthropic(api_key=self.api_key, timeout=self.timeout)

        response = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        if getattr(response, 'usage', None):
            self.usage_stats['total_tokens'] += response.usage.input_tokens + response.usage.output_tokens
        return "".join(block.text for block in response.content if getattr(block, 'text', None))


class MockCorrector(LLMCorrector):
    """Deterministic corrector for tests and offline runs."""

    def __init__(
        self,
        response: Optional[str] = None,
        transform: Optional[Callable[[str], str]] = None,
        should_fail: bool = False,
        is_available: bool = True,
        delay: float = 0.0,
        timeout: float = 10.0,
    ):
        super().__init__("mock", timeout=timeout)
        self.response = response
        self.transform = transform
        self.should_fail = should_fail
        self.is_available = is_available
        self.delay = delay
        self.prompts: List[str] = []

    def available(self) -> bool:
        return self.is_available

    async def _generate(self, prompt: str, text: str) -> str:
        self.prompts.append(prompt)

        if self.delay > 0:
            await asyncio.sleep(self.delay)

        if self.should_fail:
            raise RuntimeError("Mock corrector configured to fail")

        if self.response is not None:
            return self.response
        if self.transform is not None:
            return self.transform(text)
        return text


def create_corrector(settings: LLMSettings) -> LLMCorrector:
    """
    Build the adapter named by the settings.

    Raises:
        ValueError: If the provider is unknown.
    """
    if settings.provider == "openai":
        return OpenAICorrector(
            model=settings.resolved_model,
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
    if settings.provider == "claude":
        return ClaudeCorrector(
            model=settings.resolved_model,
            api_key=settings.api_key,
            timeout=settings.timeout,
        )
    if settings.provider == "mock":
        return MockCorrector(timeout=settings.timeout)
    raise ValueError(f"Unknown LLM provider: {settings.provider}")
