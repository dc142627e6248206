"""Base class for the LLM backends behind the AI workflow helpers."""

from abc import ABC, abstractmethod
from typing import Any

Message = dict[str, str]


class LLMProvider(ABC):
    """A chat-completion backend (OpenAI, Anthropic).

    Subclasses implement `chat`; single-prompt generation is built on top of
    it. Replies are plain text; turning them into structured results is the
    caller's job (see `lawflow.ai.completion`).
    """

    model: str = ""

    @abstractmethod
    def chat(
        self,
        messages: list[Message],
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Complete a conversation.

        Args:
            messages: Dicts with 'role' ("system", "user" or "assistant") and
                'content'.
            max_tokens: Reply length limit; the configured default when None.
            temperature: Sampling temperature; the configured default when None.
            **kwargs: Passed through to the vendor SDK.

        Returns:
            The reply text.
        """

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Complete a single user prompt, optionally framed by a system prompt."""
        messages: list[Message] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return self.chat(messages, max_tokens=max_tokens, temperature=temperature, **kwargs)

    def count_tokens(self, text: str) -> int:
        # Approximation: about four characters per token.
        return len(text) // 4
