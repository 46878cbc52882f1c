"""Base provider implementing the Template Method pattern.

All providers share the same request flow:
    complete() → _call_api()          ← only this differs per provider
               → _translate_error()   ← maps SDK exceptions onto ProviderError
               → response validation

Subclasses implement three things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response
  - _translate_error: map the SDK's exception types to the errors below

A failed call is never retried here. The review session decides what a
failure means (skip the step, keep the Q&A loop going); transport-level
retries are left to the SDK client's own ``max_retries`` setting.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# Shared defaults; subclasses may override as class attributes if needed.
_MAX_TOKENS = 8192

# Keys shorter than this are rejected before any request is made.
_MIN_API_KEY_LENGTH = 21

SYSTEM_PROMPT = (
    "You are an expert code reviewer. Follow the task instructions in each "
    "message exactly and answer in GitHub-flavored markdown."
)


class ProviderError(Exception):
    """A call to the model provider failed."""


class NetworkError(ProviderError):
    """The provider could not be reached, or the request timed out."""


class AuthError(ProviderError):
    """The provider rejected the credential (HTTP 401/403)."""


class RateLimitError(ProviderError):
    """The provider throttled the request (HTTP 429)."""


class ResponseFormatError(ProviderError):
    """The provider answered, but without usable text."""


def validate_api_key(api_key: str | None) -> bool:
    """Loose format check; the provider performs the real validation."""
    return isinstance(api_key, str) and len(api_key.strip()) >= _MIN_API_KEY_LENGTH


def error_for_status(status_code: int | None, message: str) -> ProviderError:
    """Map an HTTP status from a failed API call to the matching ProviderError."""
    if status_code in (401, 403):
        return AuthError(message)
    if status_code == 429:
        return RateLimitError(message)
    return ProviderError(message)


class BaseProvider(ABC):
    MAX_TOKENS: int = _MAX_TOKENS

    def complete(self, prompt: str) -> str:
        """Send one prompt and return the model's text answer.

        Raises a ProviderError subclass on any failure; never returns an
        empty string.
        """
        try:
            text = self._call_api(SYSTEM_PROMPT, prompt)
        except ProviderError:
            raise
        except Exception as e:
            translated = self._translate_error(e)
            logger.debug("%s call failed: %r", self.__class__.__name__, e)
            raise translated from e

        if not isinstance(text, str) or not text.strip():
            raise ResponseFormatError(f"Unexpected response format from {self.__class__.__name__}: no text content.")
        return text

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        """Make a single API call and return the raw text response."""

    def _translate_error(self, error: Exception) -> ProviderError:
        """Fallback mapping used when a provider has nothing more specific.

        Looks for an HTTP status on the exception, which both official SDKs
        expose as ``status_code`` on their status errors.
        """
        return error_for_status(getattr(error, "status_code", None), str(error))
