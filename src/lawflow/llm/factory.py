"""Select the LLM backend named by `LLMConfig.provider`."""

import logging

from lawflow.core.config import LLMConfig
from lawflow.llm.anthropic_provider import AnthropicProvider
from lawflow.llm.openai_provider import OpenAIProvider
from lawflow.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


class LLMFactory:
    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """Build the configured provider.

        Raises:
            ValueError: Unknown provider name, or the provider has no API key.
        """
        provider_cls = PROVIDERS.get(config.provider)
        if provider_cls is None:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")

        logger.info("Creating LLM provider", extra={"provider": config.provider})
        return provider_cls(config)  # type: ignore[call-arg]
