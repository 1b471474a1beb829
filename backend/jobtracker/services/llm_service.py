"""
LLM Service — unified interface to all providers via LiteLLM.

Responsibilities:
  • Resolve the configured provider/model to a LiteLLM model id
  • Attach the server-side API key for that provider (callers never send keys)
  • Provide a structured completion helper (JSON mode)
  • Translate every provider failure into a GenerationError with a safe message
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import litellm
from litellm import acompletion

from jobtracker.config import MODELS, PROMPT_CONFIG, settings
from jobtracker.exceptions import GenerationError

logger = logging.getLogger(__name__)

# Silence verbose LiteLLM logs in dev
litellm.suppress_debug_info = True
litellm.set_verbose = False

GENERIC_FAILURE = "Failed to generate content. Please try again."
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
QUOTA_MESSAGE = "Service quota exceeded. Please try again later."
NOT_CONFIGURED_MESSAGE = "AI service is not configured"

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
# A fence wrapping the whole reply (its body may itself contain fences)
_OUTER_FENCE_RE = re.compile(r"^\s*```(?:json)?[ \t]*\n(.*)\n\s*```\s*$", re.IGNORECASE | re.DOTALL)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _resolve_model_id(provider: str, model_key: str) -> str:
    """Look up the LiteLLM model_id from our registry."""
    provider_models = MODELS.get(provider)
    if not provider_models:
        raise GenerationError(NOT_CONFIGURED_MESSAGE, status_code=503, detail=f"Unknown provider: {provider}")
    model_entry = provider_models.get(model_key)
    if not model_entry:
        raise GenerationError(
            NOT_CONFIGURED_MESSAGE,
            status_code=503,
            detail=f"Unknown model: {model_key} for provider {provider}",
        )
    return model_entry["model_id"]


def _classify_error(exc: Exception) -> GenerationError:
    """Map a raw provider exception to a GenerationError."""
    raw_error = str(exc).lower()
    status = getattr(exc, "status_code", None)
    if status == 429 or "429" in raw_error or "rate_limit" in raw_error or "rate limit" in raw_error \
            or "too many requests" in raw_error:
        return GenerationError(RATE_LIMIT_MESSAGE, status_code=429, rate_limited=True, detail=str(exc))
    if status == 402 or "quota" in raw_error or "insufficient_quota" in raw_error:
        return GenerationError(QUOTA_MESSAGE, status_code=402, rate_limited=True, detail=str(exc))
    return GenerationError(GENERIC_FAILURE, status_code=status if isinstance(status, int) else None, detail=str(exc))


def loads_reply(raw: str) -> Any:
    """
    Parse a model reply as JSON: the bare text first, then the fenced body.

    Raises:
        json.JSONDecodeError: when neither parses
    """
    try:
        return json.loads(raw.strip())
    except json.JSONDecodeError:
        pass

    # An outer fence can hold valid JSON whose strings contain fences of their own
    outer = _OUTER_FENCE_RE.match(raw)
    if outer:
        try:
            return json.loads(outer.group(1).strip())
        except json.JSONDecodeError:
            pass

    first = _FENCE_RE.search(raw)
    if first is None:
        raise json.JSONDecodeError("No JSON object or fenced block", raw, 0)
    return json.loads(first.group(1).strip())


# ── Core Completion ──────────────────────────────────────────────────────────


async def complete(
    *,
    messages: list[dict[str, str]],
    prompt_name: str | None = None,
    provider: str | None = None,
    model_key: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    json_mode: bool = False,
) -> str:
    """
    Send a chat completion request via LiteLLM.

    Args:
        messages:    OpenAI-format message list
        prompt_name: Optional key into PROMPT_CONFIG for default temp/tokens
        provider:    Override settings.llm_provider
        model_key:   Override settings.llm_model_key
        temperature: Override temperature (takes precedence over prompt_name)
        max_tokens:  Override max_tokens (takes precedence over prompt_name)
        json_mode:   If True, request JSON output

    Returns:
        The assistant's response text (never empty).

    Raises:
        GenerationError: on any provider failure or an empty response
    """
    provider = provider or settings.llm_provider
    model_key = model_key or settings.llm_model_key
    model_id = _resolve_model_id(provider, model_key)

    api_key = settings.api_key_for(provider)
    if not api_key:
        logger.error(f"No API key configured for provider {provider}")
        raise GenerationError(NOT_CONFIGURED_MESSAGE, status_code=503)

    # Merge prompt config defaults → explicit overrides
    config = PROMPT_CONFIG.get(prompt_name, {}) if prompt_name else {}
    temp = temperature if temperature is not None else config.get("temperature", 0.3)
    tokens = max_tokens if max_tokens is not None else config.get("max_tokens", 1500)

    kwargs: dict[str, Any] = {
        "model": model_id,
        "messages": messages,
        "temperature": temp,
        "max_tokens": tokens,
        "api_key": api_key,
        "timeout": settings.llm_timeout_seconds,
    }

    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    logger.info(f"LLM call: provider={provider} model={model_id} temp={temp} tokens={tokens}")

    try:
        response = await acompletion(**kwargs)
        content = response.choices[0].message.content
    except Exception as e:
        logger.error(f"LLM error ({provider}/{model_key}): {e}")
        raise _classify_error(e) from e

    if not content or not content.strip():
        logger.error(f"LLM returned empty content ({provider}/{model_key})")
        raise GenerationError(GENERIC_FAILURE, detail="No content generated")

    logger.info(f"LLM response: {len(content)} chars, usage={getattr(response, 'usage', None)}")
    return content


async def complete_json(
    *,
    messages: list[dict[str, str]],
    prompt_name: str | None = None,
    provider: str | None = None,
    model_key: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> dict | list:
    """
    Same as complete() but parses the response as JSON.
    Falls back to extracting JSON from markdown code blocks if needed.
    """
    raw = await complete(
        messages=messages,
        prompt_name=prompt_name,
        provider=provider,
        model_key=model_key,
        temperature=temperature,
        max_tokens=max_tokens,
        json_mode=True,
    )

    try:
        return loads_reply(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Could not parse LLM response as JSON: {raw[:200]}...")
        raise GenerationError(GENERIC_FAILURE, detail=f"Invalid JSON from model: {e}") from e
