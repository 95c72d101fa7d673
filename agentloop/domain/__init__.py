"""
Domain models: transcript entries, usage, prompt context, updates and errors.
"""

from agentloop.domain.context import LinkPreview, PromptContext
from agentloop.domain.errors import (
    AgentloopError,
    ContentRefusalError,
    EmptyMessageContentError,
    GenerationError,
    StructuredContentParsingError,
    ToolDecodingError,
    ToolResolutionError,
    ToolRunError,
    ToolRunProblem,
    UnexpectedStructuredResponseError,
    UnknownToolError,
    UnsupportedToolCalledError,
)
from agentloop.domain.transcript import (
    Entry,
    PromptEntry,
    Reasoning,
    Response,
    Segment,
    Status,
    StructuredSegment,
    TextSegment,
    ToolCall,
    ToolCalls,
    ToolOutput,
    Transcript,
)
from agentloop.domain.updates import AgentResponse, AgentUpdate, TokenUsageUpdate, TranscriptUpdate
from agentloop.domain.usage import TokenUsage

__all__ = [
    # Transcript
    "Transcript",
    "Entry",
    "PromptEntry",
    "Reasoning",
    "ToolCalls",
    "ToolCall",
    "ToolOutput",
    "Response",
    "Segment",
    "TextSegment",
    "StructuredSegment",
    "Status",
    # Context
    "PromptContext",
    "LinkPreview",
    # Updates
    "AgentUpdate",
    "TranscriptUpdate",
    "TokenUsageUpdate",
    "AgentResponse",
    "TokenUsage",
    # Errors
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
