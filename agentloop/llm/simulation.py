"""
Simulation adapter - scripted turns without a network

A script is an ordered list of steps:

    steps = [
        reasoning("Checking the forecast"),
        tool_run(CannedToolRun(WeatherTool(), {"city": "Berlin"}, WeatherReport(...))),
        response("Sunny"),
    ]

Each step produces the same entry shapes a real adapter would (synthesized
ids, completed status). A tool run ends the current generation step, so the
session loop sees the same ToolCalls -> ToolOutput -> next step rhythm as with
a live backend. The mock tool's output is synthesized into the ToolOutput; a
ToolRunProblem raised by the mock becomes the tool's structured output.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Iterable, Union

from pydantic import BaseModel, Field
from pydantic_core import to_jsonable_python

from agentloop.domain.errors import ToolRunError, ToolRunProblem
from agentloop.domain.transcript import (
    PromptEntry,
    Reasoning,
    Response,
    Status,
    StructuredSegment,
    TextSegment,
    ToolCall,
    ToolCalls,
    ToolOutput,
    Transcript,
    new_id,
)
from agentloop.domain.updates import AgentUpdate, TokenUsageUpdate, TranscriptUpdate
from agentloop.domain.usage import TokenUsage
from agentloop.llm.base import Adapter, GenerationOptions
from agentloop.tools.base import AgentTool
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


# ============================================================================
# Mock tools
# ============================================================================


class MockTool(ABC):
    """A tool paired with canned arguments and output for simulated runs."""

    tool: AgentTool

    @property
    def name(self) -> str:
        return self.tool.name

    @abstractmethod
    def mock_arguments(self) -> Any:
        """Arguments the simulated model passes (model instance or dict)."""
        pass

    @abstractmethod
    async def mock_output(self) -> Any:
        """Output the simulated tool returns. May raise ToolRunProblem."""
        pass


class CannedToolRun(MockTool):
    """
    MockTool with fixed arguments and output.

    Pass a ToolRunProblem as output to simulate a recoverable tool failure.
    """

    def __init__(self, tool: AgentTool, arguments: Any, output: Any):
        self.tool = tool
        self._arguments = arguments
        self._output = output

    def mock_arguments(self) -> Any:
        return self._arguments

    async def mock_output(self) -> Any:
        if isinstance(self._output, BaseException):
            raise self._output
        return self._output


# ============================================================================
# Script steps
# ============================================================================


@dataclass(frozen=True)
class ReasoningStep:
    summary: str


@dataclass(frozen=True)
class ToolRunStep:
    mock: MockTool


@dataclass(frozen=True)
class ResponseStep:
    content: Any


SimulationStep = Union[ReasoningStep, ToolRunStep, ResponseStep]


def reasoning(summary: str) -> ReasoningStep:
    return ReasoningStep(summary)


def tool_run(mock: MockTool) -> ToolRunStep:
    return ToolRunStep(mock)


def response(content: Any) -> ResponseStep:
    return ResponseStep(content)


def _default_delay() -> float:
    from agentloop.config import settings

    return settings.simulation_delay


class SimulationConfiguration(BaseModel):
    """
    Attributes:
        generation_delay: Seconds to wait before each scripted step
        token_usage: Usage reported once the script is exhausted
    """

    generation_delay: float = Field(default_factory=_default_delay, ge=0.0)
    token_usage: TokenUsage | None = None


# ============================================================================
# Adapter
# ============================================================================


class SimulationAdapter(Adapter):
    """
    Adapter that replays a script instead of calling a backend.

    The adapter keeps a cursor into its script, so consecutive respond()
    calls continue where the previous step stopped.
    """

    name = "simulation"

    def __init__(
        self,
        steps: Iterable[SimulationStep],
        configuration: SimulationConfiguration | None = None,
    ):
        self.steps = list(steps)
        tools = [s.mock.tool for s in self.steps if isinstance(s, ToolRunStep)]
        super().__init__(tools, "", configuration or SimulationConfiguration())
        self._cursor = 0
        self._usage_reported = False

    @property
    def default_model(self) -> str:
        return "simulated"

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self.steps)

    async def respond(
        self,
        prompt: PromptEntry,
        generating: Any,
        model: Any,
        transcript: Transcript[Any],
        options: GenerationOptions,
    ) -> AsyncIterator[AgentUpdate]:
        while not self.exhausted:
            step = self.steps[self._cursor]
            self._cursor += 1

            await asyncio.sleep(self.configuration.generation_delay)

            if isinstance(step, ReasoningStep):
                yield TranscriptUpdate(
                    entry=Reasoning(summary=[step.summary], encrypted_reasoning="", status=Status.COMPLETED)
                )
            elif isinstance(step, ToolRunStep):
                for entry in await self._run_tool(step.mock):
                    yield TranscriptUpdate(entry=entry)
                # A tool run ends the generation step
                return
            else:
                yield TranscriptUpdate(entry=self._response(step.content))

        usage = self.configuration.token_usage
        if usage is not None and not self._usage_reported:
            self._usage_reported = True
            yield TokenUsageUpdate(usage=usage)

    async def _run_tool(self, mock: MockTool) -> list[ToolCalls | ToolOutput]:
        call = ToolCall(
            call_id=new_id(),
            tool_name=mock.name,
            arguments=mock.tool.encode_arguments(mock.mock_arguments()),
            status=Status.COMPLETED,
        )
        calls = ToolCalls(calls=[call])

        try:
            output = await mock.mock_output()
            segment = mock.tool.encode_output(output)
        except ToolRunProblem as problem:
            logger.info("tool_run_problem", tool_name=mock.name, reason=problem.reason)
            segment = StructuredSegment(content=to_jsonable_python(problem.content))
        except Exception as e:
            logger.error("simulated_tool_failed", tool_name=mock.name, error=str(e))
            raise ToolRunError(mock.name, e) from e

        output_entry = ToolOutput(
            call_id=call.call_id,
            tool_name=mock.name,
            segment=segment,
            status=Status.COMPLETED,
        )
        return [calls, output_entry]

    def _response(self, content: Any) -> Response:
        if isinstance(content, str):
            segment = TextSegment(content=content)
        else:
            segment = StructuredSegment(content=to_jsonable_python(content))
        return Response(segments=[segment], status=Status.COMPLETED)


__all__ = [
    "MockTool",
    "CannedToolRun",
    "SimulationStep",
    "ReasoningStep",
    "ToolRunStep",
    "ResponseStep",
    "SimulationConfiguration",
    "SimulationAdapter",
    "reasoning",
    "tool_run",
    "response",
]
