"""
Global settings from environment variables.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentloopSettings(BaseSettings):
    """
    Global configuration loaded from environment variables.

    Environment variables should be prefixed with AGENTLOOP_
    Example: AGENTLOOP_DEBUG=true, AGENTLOOP_MAX_STEPS=10
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENTLOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )

    # Core settings
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    # Execution loop
    max_steps: int = Field(default=20, ge=1, le=100)

    # OpenAI
    openai_api_key: SecretStr | None = None
    openai_base_url: str | None = None
    openai_timeout: float = Field(default=60.0, gt=0)
    openai_max_retries: int = Field(default=3, ge=1)
    strict_tool_schemas: bool = False

    # Simulation
    simulation_delay: float = Field(default=2.0, ge=0.0)

    # Link previews
    fetch_link_previews: bool = False
    link_preview_timeout: float = Field(default=5.0, gt=0)


# Global settings instance (singleton)
settings = AgentloopSettings()


__all__ = ["AgentloopSettings", "settings"]
