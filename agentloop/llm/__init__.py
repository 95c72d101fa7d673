"""
Adapters: the boundary between a session and a model backend.
"""

from agentloop.llm.base import Adapter, GenerationOptions
from agentloop.llm.openai import (
    OpenAIAdapter,
    OpenAIConfiguration,
    OpenAIGenerationOptions,
    OpenAIModel,
)
from agentloop.llm.simulation import (
    CannedToolRun,
    MockTool,
    SimulationAdapter,
    SimulationConfiguration,
    SimulationStep,
)

__all__ = [
    "Adapter",
    "GenerationOptions",
    "OpenAIAdapter",
    "OpenAIConfiguration",
    "OpenAIGenerationOptions",
    "OpenAIModel",
    "SimulationAdapter",
    "SimulationConfiguration",
    "SimulationStep",
    "MockTool",
    "CannedToolRun",
]
