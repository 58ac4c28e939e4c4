"""OpenAI-compatible chat client used by the ``llm`` proofread backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from openai import OpenAI

# Proofreading runs right before a post; a slow or retried call only delays it.
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 0


@dataclass(frozen=True)
class Provider:
    api_key_env: str
    base_url: Optional[str] = None


PROVIDERS: Dict[str, Provider] = {
    "anthropic": Provider("ANTHROPIC_API_KEY", "https://api.anthropic.com/v1/"),
    "gemini": Provider("GEMINI_API_KEY", "https://generativelanguage.googleapis.com/v1beta/openai/"),
    "openrouter": Provider("OPENROUTER_API_KEY", "https://openrouter.ai/api/v1"),
    "openai": Provider("OPENAI_API_KEY"),
}
ALIASES = {"claude": "anthropic"}


def resolve_provider(name: str) -> Provider:
    key = ALIASES.get(name.lower(), name.lower())
    if key not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}")
    return PROVIDERS[key]


def make_client(
    provider: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> Any:
    info = resolve_provider(provider)
    api_key = os.getenv(info.api_key_env)
    if not api_key:
        raise RuntimeError(f"Missing env {info.api_key_env}")
    client_kwargs: Dict[str, Any] = {
        "api_key": api_key,
        "timeout": timeout_seconds,
        "max_retries": max_retries,
    }
    if info.base_url:
        client_kwargs["base_url"] = info.base_url
    return OpenAI(**client_kwargs)


def complete_text(client: Any, model: str, prompt: str) -> str:
    resp = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        temperature=0,
    )
    content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
    if not content:
        raise RuntimeError(f"Empty completion from {model}")
    return content


def proofread_text(
    provider: str,
    model: str,
    prompt: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """One proofreading round trip: a fresh client, no retries, bounded by the timeout."""
    client = make_client(provider, timeout_seconds=timeout_seconds, max_retries=DEFAULT_MAX_RETRIES)
    return complete_text(client, model, prompt)
