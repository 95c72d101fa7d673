"""
Configuration for agentloop.

- Global settings from environment variables
- Configuration errors
"""

from agentloop.config.exceptions import ConfigError, GenerationOptionsError
from agentloop.config.settings import AgentloopSettings, settings

__all__ = [
    "AgentloopSettings",
    "settings",
    "ConfigError",
    "GenerationOptionsError",
]
