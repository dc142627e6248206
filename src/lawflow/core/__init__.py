"""Core package initialization."""

from lawflow.core.config import EngineConfig, LawflowConfig, LLMConfig, StoreConfig

__all__ = [
    "EngineConfig",
    "LLMConfig",
    "LawflowConfig",
    "StoreConfig",
]
