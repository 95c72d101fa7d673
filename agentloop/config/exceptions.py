"""Configuration errors."""

from agentloop.domain.errors import AgentloopError


class ConfigError(AgentloopError):
    """Base exception for configuration errors."""

    pass


class GenerationOptionsError(ConfigError):
    """Generation options are invalid for the chosen model."""

    def __init__(self, message: str, recovery_suggestion: str | None = None):
        super().__init__(message)
        self.recovery_suggestion = recovery_suggestion


__all__ = ["ConfigError", "GenerationOptionsError"]
