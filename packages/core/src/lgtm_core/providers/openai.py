from __future__ import annotations

try:
    import openai as _openai
except ImportError:
    _openai = None  # type: ignore[assignment]

from lgtm_core.providers.base import BaseProvider, NetworkError, ProviderError, error_for_status


class OpenAIProvider(BaseProvider):
    MODEL = "gpt-4o"
    TEMPERATURE = 0.2

    def __init__(self, api_key: str, max_retries: int = 2):
        if _openai is None:
            raise ImportError(
                "The 'openai' package is required for this provider. "
                "Install it with: pip install 'lgtm-review[openai]'"
            )
        self.client = _openai.OpenAI(api_key=api_key, max_retries=max_retries)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def _translate_error(self, error: Exception) -> ProviderError:
        if _openai is not None:
            if isinstance(error, _openai.APIConnectionError):
                return NetworkError(f"Could not reach the OpenAI API: {error}")
            if isinstance(error, _openai.APIStatusError):
                return error_for_status(error.status_code, f"OpenAI API error ({error.status_code}): {error.message}")
        return super()._translate_error(error)
