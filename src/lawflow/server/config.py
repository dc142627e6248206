"""Configuration for the REST server.

The server starts without LLM credentials; AI endpoints check for them at
request time.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the REST API."""

    host: str = Field(default="127.0.0.1", validation_alias="LAWFLOW_SERVER_HOST")
    port: int = Field(default=8000, ge=1, le=65535, validation_alias="LAWFLOW_SERVER_PORT")

    # Dev-friendly CORS. Override via LAWFLOW_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="LAWFLOW_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
