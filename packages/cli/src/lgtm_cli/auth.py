"""Provider API key resolution.

Resolution order (stops at first success):
  1. --api-key on the command line
  2. the provider's environment variable (ANTHROPIC_API_KEY / OPENAI_API_KEY)
  3. LGTM_API_KEY, a provider-neutral fallback for CI setups
"""

from __future__ import annotations

import logging
import os

from lgtm_core.config import API_KEY_ENV_VARS

logger = logging.getLogger(__name__)

FALLBACK_ENV_VAR = "LGTM_API_KEY"


def resolve_api_key(model: str, explicit: str | None = None) -> str | None:
    """Return the API key for model, or None if no source provides one.

    Never raises and never validates the format; callers decide what a
    missing or malformed key means.
    """
    if explicit:
        logger.debug("Using API key from the command line.")
        return explicit

    env_var = API_KEY_ENV_VARS.get(model)
    if env_var:
        token = os.environ.get(env_var)
        if token:
            logger.debug("Resolved API key from %s.", env_var)
            return token

    token = os.environ.get(FALLBACK_ENV_VAR)
    if token:
        logger.debug("Resolved API key from %s.", FALLBACK_ENV_VAR)
        return token

    return None
