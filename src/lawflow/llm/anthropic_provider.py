"""Anthropic Messages API backend."""

import logging
from typing import Any

import anthropic

from lawflow.core.config import LLMConfig
from lawflow.llm.provider import LLMProvider, Message

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """System prompts travel in the dedicated `system` parameter, so `chat`
    lifts system messages out of the conversation before sending it.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Create the Anthropic client.

        Raises:
            ValueError: If no Anthropic API key is configured.
        """
        if not config.anthropic_api_key:
            raise ValueError("Anthropic API key is required (LAWFLOW_LLM_ANTHROPIC_API_KEY)")

        self.config = config
        self.client = anthropic.Anthropic(api_key=config.anthropic_api_key)
        self.model = config.anthropic_model

        logger.info("Anthropic provider ready", extra={"model": self.model})

    def chat(
        self,
        messages: list[Message],
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        system = "\n\n".join(m["content"] for m in messages if m.get("role") == "system")
        conversation = [m for m in messages if m.get("role") != "system"]

        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens or self.config.max_tokens,
            "temperature": temperature if temperature is not None else self.config.temperature,
            "messages": conversation,
            **kwargs,
        }
        if system:
            request["system"] = system

        response = self.client.messages.create(**request)

        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.debug(
            "Anthropic completion received",
            extra={"model": self.model, "messages": len(conversation), "reply_chars": len(content)},
        )
        return content
