"""
Errors raised by LLM correction adapters.

The pipeline catches all of these and falls back to rule-based correction,
so none of them reach the caller.
"""

from typing import Optional


class CorrectionError(Exception):
    """Base class for LLM correction failures."""


class InferenceUnavailable(CorrectionError):
    """The model is not loaded or not configured."""

    def __init__(self, provider: str):
        super().__init__(f"{provider} is not available")
        self.provider = provider


class InferenceFailed(CorrectionError):
    """The model call timed out or raised."""

    def __init__(self, reason: str):
        super().__init__(f"Inference failed: {reason}")
        self.reason = reason


class InvalidResponse(CorrectionError):
    """Sanitized output was empty or implausibly long."""

    def __init__(self, response: str, limit: Optional[int] = None):
        if not response:
            message = "Model returned an empty response"
        else:
            message = f"Model response too long ({len(response)} chars, limit {limit})"
        super().__init__(message)
        self.response = response
        self.limit = limit
