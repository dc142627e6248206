"""Structured (JSON) completions over an LLM provider."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from lawflow.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

_JSON_INSTRUCTION = "Respond with a single valid JSON object and nothing else."
_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class AIResponseError(ValueError):
    """The model reply did not contain a usable JSON object."""


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first JSON object found in a model reply.

    Accepts bare JSON, JSON inside a ``` fence, or JSON surrounded by prose.
    """

    candidates: list[str] = []
    fenced = _FENCE_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    candidates.append(text)

    decoder = json.JSONDecoder()
    for candidate in candidates:
        start = candidate.find("{")
        while start != -1:
            try:
                obj, _end = decoder.raw_decode(candidate, start)
            except json.JSONDecodeError:
                start = candidate.find("{", start + 1)
                continue
            if isinstance(obj, dict):
                return obj
            start = candidate.find("{", start + 1)

    raise AIResponseError("Model reply did not contain a JSON object")


def generate_json_completion(
    provider: LLMProvider,
    prompt: str,
    system_prompt: str,
    *,
    temperature: float | None = None,
) -> dict[str, Any]:
    reply = provider.generate(
        prompt,
        system_prompt=f"{system_prompt}\n\n{_JSON_INSTRUCTION}",
        temperature=temperature,
    )
    try:
        return extract_json_object(reply)
    except AIResponseError:
        logger.warning("Unparsable JSON completion", extra={"reply_preview": reply[:200]})
        raise
