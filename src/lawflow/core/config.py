"""Core configuration for lawflow."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lawflow.logging import configure_logging


class LLMConfig(BaseSettings):
    """Configuration for LLM providers."""

    provider: Literal["openai", "anthropic"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    # OpenAI settings
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4-turbo-preview",
        description="OpenAI model to use",
    )

    # Anthropic settings
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key",
    )
    anthropic_model: str = Field(
        default="claude-3-sonnet-20240229",
        description="Anthropic model to use",
    )

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    max_tokens: int = Field(
        default=4096,
        gt=0,
        description="Maximum tokens per completion",
    )

    model_config = SettingsConfigDict(
        env_prefix="LAWFLOW_LLM_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Whether the selected provider has credentials."""
        if self.provider == "openai":
            return bool(self.openai_api_key)
        return bool(self.anthropic_api_key)


class EngineConfig(BaseSettings):
    """Configuration for the workflow engine."""

    action_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single collaborator call before the step is failed",
    )
    warn_on_unknown_operator: bool = Field(
        default=True,
        description="Log a warning when a condition uses an operator the evaluator does not know",
    )

    model_config = SettingsConfigDict(
        env_prefix="LAWFLOW_ENGINE_",
        env_file=".env",
        extra="ignore",
    )


class StoreConfig(BaseSettings):
    """Configuration for local persistence."""

    state_path: Path = Field(
        default=Path("lawflow_state"),
        description="Directory where workflows and collaborator records are persisted",
    )

    model_config = SettingsConfigDict(
        env_prefix="LAWFLOW_STORE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def workflows_file(self) -> Path:
        """Path where workflow definitions are persisted."""

        return self.state_path / "workflows.json"


class LawflowConfig(BaseSettings):
    """Main configuration for lawflow."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    engine: EngineConfig = Field(
        default_factory=EngineConfig,
        description="Workflow engine configuration",
    )
    store: StoreConfig = Field(
        default_factory=StoreConfig,
        description="Persistence configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="LAWFLOW_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level)

        if self.debug:
            logging.getLogger("lawflow").setLevel(logging.DEBUG)
