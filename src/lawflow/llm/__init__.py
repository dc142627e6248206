"""LLM package initialization."""

from lawflow.llm.factory import LLMFactory
from lawflow.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
