"""
Shared tools and adapters for agentloop tests.
"""

from typing import Any, AsyncIterator

import pytest
from pydantic import BaseModel

from agentloop.domain.errors import ToolRunProblem
from agentloop.domain.transcript import PromptEntry, Transcript
from agentloop.domain.updates import AgentUpdate
from agentloop.llm.base import Adapter, GenerationOptions
from agentloop.tools.base import AgentTool, ToolRun


class CalculatorArguments(BaseModel):
    a: float
    b: float
    op: str = "+"


class CalculatorOutput(BaseModel):
    result: float


class CalculatorRun(BaseModel):
    run: ToolRun


class CalculatorTool(AgentTool[CalculatorRun]):
    name = "calculator"
    description = "Apply a basic arithmetic operation to two numbers"
    arguments_type = CalculatorArguments
    output_type = CalculatorOutput

    async def call(self, arguments: CalculatorArguments) -> CalculatorOutput:
        if arguments.op == "+":
            return CalculatorOutput(result=arguments.a + arguments.b)
        if arguments.op == "*":
            return CalculatorOutput(result=arguments.a * arguments.b)
        if arguments.op == "/":
            if arguments.b == 0:
                raise ToolRunProblem({"error": "division_by_zero"}, reason="b is zero")
            return CalculatorOutput(result=arguments.a / arguments.b)
        raise ValueError(f"Unsupported operator {arguments.op}")

    def resolve(self, run: ToolRun) -> CalculatorRun:
        return CalculatorRun(run=run)


class WeatherArguments(BaseModel):
    city: str


class WeatherReport(BaseModel):
    city: str
    condition: str
    temperature_c: float


class WeatherTool(AgentTool):
    name = "get_weather"
    description = "Current weather for a city"
    arguments_type = WeatherArguments
    output_type = WeatherReport

    async def call(self, arguments: WeatherArguments) -> WeatherReport:
        if arguments.city == "Atlantis":
            raise ToolRunProblem({"error": "city_not_found", "city": arguments.city})
        return WeatherReport(city=arguments.city, condition="Sunny", temperature_c=24.0)


class ScriptedAdapter(Adapter):
    """
    Adapter that replays one list of updates per step.

    Records the transcript length seen by each step. After the script runs
    out, every further step yields `repeat` (default: nothing).
    """

    name = "scripted"

    def __init__(self, steps: list[list[AgentUpdate]], tools=(), repeat=None):
        super().__init__(tools=tools)
        self.steps = list(steps)
        self.repeat = repeat or []
        self.calls = 0
        self.seen_lengths: list[int] = []
        self.seen_options: list[GenerationOptions] = []

    @property
    def default_model(self) -> str:
        return "scripted-model"

    async def respond(
        self,
        prompt: PromptEntry,
        generating: Any,
        model: Any,
        transcript: Transcript[Any],
        options: GenerationOptions,
    ) -> AsyncIterator[AgentUpdate]:
        self.seen_lengths.append(len(transcript))
        self.seen_options.append(options)
        index = self.calls
        self.calls += 1
        updates = self.steps[index] if index < len(self.steps) else self.repeat
        for update in updates:
            yield update


@pytest.fixture
def calculator():
    return CalculatorTool()


@pytest.fixture
def weather():
    return WeatherTool()
