"""
Structured logging for agentloop.

All modules obtain their logger through get_logger(__name__) and log
snake_case event names with keyword context:

    logger = get_logger(__name__)
    logger.info("tool_call", tool_name="weather", call_id="call_1")
"""

import logging
import sys
from typing import Any

import structlog

SENSITIVE_KEYS = ("api_key", "apikey", "password", "secret", "authorization", "access_token")
REDACTED = "***REDACTED***"

_configured = False


def filter_sensitive_data(logger: Any, method_name: str, event_dict: dict) -> dict:
    """
    Redact credentials from the event dict.

    Token counters (input_tokens, total_tokens, ...) are metrics, not secrets,
    and are left untouched.
    """
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if lowered.endswith("tokens"):
            continue
        if any(marker in lowered for marker in SENSITIVE_KEYS):
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Install the structlog processor chain and stdlib handler."""
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger("agentloop")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            filter_sensitive_data,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "agentloop") -> Any:
    """Return a structlog logger, configuring from settings on first use."""
    if not _configured:
        from agentloop.config.settings import settings

        configure_logging(settings.log_level, settings.log_json)
    return structlog.get_logger(name)


__all__ = ["configure_logging", "filter_sensitive_data", "get_logger"]
