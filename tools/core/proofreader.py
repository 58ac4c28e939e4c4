"""Best-effort spelling/grammar pass over an edited draft.

Any failure leaves the draft untouched; proofreading never blocks a post.
"""

from __future__ import annotations

import json
import re
import subprocess
from typing import Any, List, Optional

from core.draft import Draft, DraftParseError, draft_to_data, filter_blanks, parse_draft
from integrations import llm_client

PROOFREAD_INSTRUCTIONS = " ".join(
    [
        "Fix only spelling and grammar errors in this JSON.",
        "Do not rewrite or rephrase anything.",
        "Keep the exact same JSON structure and keys.",
        "Return ONLY the corrected JSON, no explanation.",
    ]
)
FENCE_START_RE = re.compile(r"^```(?:json5?|javascript)?\n?", re.IGNORECASE)
FENCE_END_RE = re.compile(r"\n?```\s*$", re.IGNORECASE)


def build_prompt(draft: Draft) -> str:
    body = json.dumps(draft_to_data(draft), indent=2, ensure_ascii=False)
    return "\n".join([PROOFREAD_INSTRUCTIONS, "", body])


def strip_code_fences(text: str) -> str:
    text = FENCE_START_RE.sub("", text.strip())
    return FENCE_END_RE.sub("", text).strip()


class CommandProofreader:
    """Runs a local CLI (``claude -p`` by default) with the prompt as last argument."""

    def __init__(self, command: List[str], timeout: float = 30.0) -> None:
        self.command = list(command)
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        proc = subprocess.run(
            [*self.command, prompt],
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        if proc.returncode != 0 or not proc.stdout:
            raise RuntimeError(f"{self.command[0]} exited with status {proc.returncode}")
        return proc.stdout


class LLMProofreader:
    def __init__(self, provider: str, model: str, timeout: float = 30.0) -> None:
        self.provider = provider
        self.model = model
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        return llm_client.proofread_text(self.provider, self.model, prompt, timeout_seconds=self.timeout)


def make_proofreader(config: Any) -> Optional[Any]:
    backend = config.proofread_backend
    if backend in {"none", "off", ""}:
        return None
    if backend == "command":
        return CommandProofreader(config.proofread_command, timeout=config.proofread_timeout)
    if backend == "llm":
        return LLMProofreader(config.proofread_provider, config.proofread_model, timeout=config.proofread_timeout)
    raise ValueError(f"Unknown proofread backend: {backend}")


def _check_same_shape(original: Draft, corrected: Draft) -> None:
    expected = filter_blanks(draft_to_data(original))
    for name, items in corrected.sections():
        if len(items) != len(expected[name]):
            raise DraftParseError(f"{name} changed from {len(expected[name])} to {len(items)} items")


def proofread_draft(draft: Draft, proofreader: Any) -> Draft:
    print("[proofread] checking spelling and grammar...")
    try:
        output = proofreader.complete(build_prompt(draft))
        corrected = parse_draft(strip_code_fences(output), require_sections=True)
        _check_same_shape(draft, corrected)
    except Exception as exc:
        print(f"[proofread] skipped: {exc}")
        return draft
    print("[proofread] done")
    return corrected.model_copy(update={"live": draft.live})
