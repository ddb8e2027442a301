"""Centralized helpers for Anthropic LLM calls."""

from __future__ import annotations

import json
import logging
import re

from anthropic import Anthropic

from src.decision_matrix.config import settings

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL)


def _strip_fences(text: str) -> str:
    m = _FENCE_RE.search(text)
    return m.group(1).strip() if m else text.strip()


def _reply_text(resp) -> str:
    """Concatenate the text blocks of a Messages response; '' when there are none."""
    blocks = getattr(resp, "content", None) or []
    return "".join(
        getattr(b, "text", "") for b in blocks
        if getattr(b, "type", "text") == "text"
    )


def make_client() -> Anthropic:
    return Anthropic(api_key=settings.anthropic_api_key)


def call_llm_json(
    client: Anthropic,
    system: str,
    user: str,
    *,
    fast: bool = True,
) -> dict:
    """Send one prompt and parse the reply as a JSON object.

    Returns ``{}`` for an empty reply, invalid JSON, or JSON that is not an
    object.  Transport errors (``anthropic.APIError``) propagate.
    """
    model = settings.anthropic_fast_model if fast else settings.anthropic_model
    resp = client.messages.create(
        model=model,
        max_tokens=settings.anthropic_max_tokens,
        system=system,
        messages=[{"role": "user", "content": user}],
    )
    raw = _reply_text(resp)
    if not raw.strip():
        logger.warning("LLM returned no text (%s model)", model)
        return {}

    try:
        data = json.loads(_strip_fences(raw))
    except json.JSONDecodeError:
        logger.warning("LLM returned non-JSON (%s model): %s", model, raw[:200])
        return {}
    if not isinstance(data, dict):
        logger.warning("LLM returned a JSON %s, expected an object", type(data).__name__)
        return {}
    return data
