from __future__ import annotations

from lgtm_core.providers.base import BaseProvider, NetworkError, ProviderError, error_for_status


class AnthropicProvider(BaseProvider):
    MODEL = "claude-sonnet-4-20250514"
    # Low temperature keeps successive steps consistent in tone and structure.
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, max_retries: int = 2):
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'lgtm-review[anthropic]'"
            )
        self.client = Anthropic(api_key=api_key, max_retries=max_retries)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        from anthropic.types import TextBlock

        message = self.client.messages.create(
            model=self.MODEL,
            max_tokens=self.MAX_TOKENS,
            temperature=self.TEMPERATURE,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        # Tool-use and thinking blocks carry no review text.
        return "".join(block.text for block in message.content if isinstance(block, TextBlock))

    def _translate_error(self, error: Exception) -> ProviderError:
        import anthropic

        if isinstance(error, anthropic.APIConnectionError):
            return NetworkError(f"Could not reach the Anthropic API: {error}")
        if isinstance(error, anthropic.APIStatusError):
            return error_for_status(error.status_code, f"Anthropic API error ({error.status_code}): {error.message}")
        return super()._translate_error(error)
