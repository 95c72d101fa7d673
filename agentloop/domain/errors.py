"""
Error taxonomy for agent turns.

- Generation errors: the backend produced something the turn cannot use.
  Turn-fatal, forwarded to the caller unchanged.
- Tool errors: ToolRunError aborts the turn, ToolRunProblem is recoverable and
  becomes the tool's output.
- Resolution errors: only raised when rebuilding typed tool runs after the fact.

Configuration errors live in agentloop.config.exceptions.
"""

from typing import Any


class AgentloopError(Exception):
    """Root of all agentloop errors."""

    pass


# ============================================================================
# Generation
# ============================================================================


class GenerationError(AgentloopError):
    """The model failed to produce usable content for this turn."""

    pass


class UnexpectedStructuredResponseError(GenerationError):
    """A structured response was requested but the turn ended without one."""

    def __init__(self, expected_type: str | None = None):
        self.expected_type = expected_type
        message = "Received unexpected structured response from model"
        if expected_type:
            message = f"Model finished without a structured response of type {expected_type}"
        super().__init__(message)


class UnsupportedToolCalledError(GenerationError):
    """The model called a tool that is not part of the configured tool set."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Model called unsupported tool: {tool_name}")


class EmptyMessageContentError(GenerationError):
    """The model returned an empty message where content was required."""

    def __init__(self, expected_type: str):
        self.expected_type = expected_type
        super().__init__(f"Model returned empty content when expecting {expected_type}")


class StructuredContentParsingError(GenerationError):
    """Structured content returned by the model could not be decoded."""

    def __init__(self, raw_content: str, underlying_error: BaseException):
        self.raw_content = raw_content
        self.underlying_error = underlying_error
        super().__init__(f"Failed to parse structured content: {underlying_error}")


class ContentRefusalError(GenerationError):
    """The model refused to generate the requested content."""

    def __init__(self, expected_type: str, reason: str | None = None):
        self.expected_type = expected_type
        self.reason = reason
        if reason:
            message = f"Model refused to generate content for {expected_type}: {reason}"
        else:
            message = f"Model refused to generate content for {expected_type}"
        super().__init__(message)


# ============================================================================
# Tool execution
# ============================================================================


class ToolRunError(AgentloopError):
    """A tool failed in a way the agent cannot recover from."""

    def __init__(self, tool_name: str, underlying_error: BaseException):
        self.tool_name = tool_name
        self.underlying_error = underlying_error
        super().__init__(f"Tool '{tool_name}' failed: {underlying_error}")


class ToolRunProblem(AgentloopError):
    """
    Recoverable tool failure.

    Raise from AgentTool.call() when the invocation cannot complete but the
    model should see what went wrong and try something else. The content is
    forwarded to the model exactly like a successful tool output.

    Examples:
        >>> raise ToolRunProblem({"error": "city_not_found", "city": "Atlantis"})
    """

    def __init__(self, content: Any, reason: str | None = None):
        self.content = content
        self.reason = reason
        super().__init__(reason or "Recoverable tool problem")


# ============================================================================
# Resolution
# ============================================================================


class ToolResolutionError(AgentloopError):
    """Rebuilding a typed tool run from the transcript failed."""

    pass


class UnknownToolError(ToolResolutionError):
    """The tool call names a tool the resolver does not know."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolDecodingError(ToolResolutionError):
    """Tool arguments or output did not decode into the tool's types."""

    def __init__(self, tool_name: str, underlying_error: BaseException):
        self.tool_name = tool_name
        self.underlying_error = underlying_error
        super().__init__(f"Failed to decode run of tool '{tool_name}': {underlying_error}")


__all__ = [
    "AgentloopError",
    "GenerationError",
    "UnexpectedStructuredResponseError",
    "UnsupportedToolCalledError",
    "EmptyMessageContentError",
    "StructuredContentParsingError",
    "ContentRefusalError",
    "ToolRunError",
    "ToolRunProblem",
    "ToolResolutionError",
    "UnknownToolError",
    "ToolDecodingError",
]
