"""
agentloop - bounded, tool-using conversations with generative model backends

Top-level exports for easy access to core functionality.
"""

# Session
from agentloop.runtime import ModelSession, Session

# Domain models
from agentloop.domain import (
    AgentResponse,
    AgentUpdate,
    LinkPreview,
    PromptContext,
    PromptEntry,
    Reasoning,
    Response,
    Status,
    StructuredSegment,
    TextSegment,
    TokenUsage,
    TokenUsageUpdate,
    ToolCall,
    ToolCalls,
    ToolOutput,
    Transcript,
    TranscriptUpdate,
)
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

# Adapters
from agentloop.llm import (
    Adapter,
    CannedToolRun,
    GenerationOptions,
    MockTool,
    OpenAIAdapter,
    OpenAIConfiguration,
    OpenAIGenerationOptions,
    OpenAIModel,
    SimulationAdapter,
    SimulationConfiguration,
)

# Tools
from agentloop.tools import AgentTool, FunctionTool, ToolExecutor, ToolResolver, ToolRun, tool

# Prompt
from agentloop.prompt import Prompt, PromptSection, PromptTag, render

# Config
from agentloop.config import AgentloopSettings, ConfigError, GenerationOptionsError, settings

__version__ = "0.1.0"

__all__ = [
    # Session
    "Session",
    "ModelSession",
    # Domain
    "Transcript",
    "PromptEntry",
    "Reasoning",
    "ToolCalls",
    "ToolCall",
    "ToolOutput",
    "Response",
    "TextSegment",
    "StructuredSegment",
    "Status",
    "TokenUsage",
    "AgentUpdate",
    "TranscriptUpdate",
    "TokenUsageUpdate",
    "AgentResponse",
    "PromptContext",
    "LinkPreview",
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
    "ConfigError",
    "GenerationOptionsError",
    # Adapters
    "Adapter",
    "GenerationOptions",
    "OpenAIAdapter",
    "OpenAIConfiguration",
    "OpenAIGenerationOptions",
    "OpenAIModel",
    "SimulationAdapter",
    "SimulationConfiguration",
    "MockTool",
    "CannedToolRun",
    # Tools
    "AgentTool",
    "FunctionTool",
    "ToolRun",
    "ToolExecutor",
    "ToolResolver",
    "tool",
    # Prompt
    "Prompt",
    "PromptSection",
    "PromptTag",
    "render",
    # Config
    "AgentloopSettings",
    "settings",
]
