"""OpenAI chat-completions backend."""

import logging
from typing import Any

from openai import OpenAI

from lawflow.core.config import LLMConfig
from lawflow.llm.provider import LLMProvider, Message

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    def __init__(self, config: LLMConfig) -> None:
        """Create the OpenAI client.

        Raises:
            ValueError: If no OpenAI API key is configured.
        """
        if not config.openai_api_key:
            raise ValueError("OpenAI API key is required (LAWFLOW_LLM_OPENAI_API_KEY)")

        self.config = config
        self.client = OpenAI(api_key=config.openai_api_key)
        self.model = config.openai_model

        logger.info("OpenAI provider ready", extra={"model": self.model})

    def chat(
        self,
        messages: list[Message],
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            max_tokens=max_tokens or self.config.max_tokens,
            temperature=temperature if temperature is not None else self.config.temperature,
            **kwargs,
        )

        content = response.choices[0].message.content or ""
        logger.debug(
            "OpenAI completion received",
            extra={"model": self.model, "messages": len(messages), "reply_chars": len(content)},
        )
        return content
