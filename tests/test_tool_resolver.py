"""
ToolResolver: typed runs rebuilt from raw calls and outputs.
"""

import pytest

from agentloop.domain.errors import ToolDecodingError, UnknownToolError
from agentloop.domain.transcript import (
    PromptEntry,
    StructuredSegment,
    TextSegment,
    ToolCall,
    ToolCalls,
    ToolOutput,
    Transcript,
)
from agentloop.tools.decorator import tool
from agentloop.tools.resolver import ToolResolver

from conftest import CalculatorArguments, CalculatorOutput, CalculatorRun, CalculatorTool


def transcript_with(*entries) -> Transcript:
    transcript = Transcript()
    transcript.append(PromptEntry(input="q", embedded_prompt="q"))
    transcript.extend(entries)
    return transcript


def test_completed_call_resolves_with_typed_output():
    call = ToolCall(call_id="c1", tool_name="calculator", arguments={"a": 2, "b": 2})
    transcript = transcript_with(
        ToolCalls(calls=[call]),
        ToolOutput(call_id="c1", tool_name="calculator", segment=StructuredSegment(content={"result": 4})),
    )
    resolver = ToolResolver([CalculatorTool()], transcript)

    resolved = resolver.resolve(call)

    assert isinstance(resolved, CalculatorRun)
    assert resolved.run.arguments == CalculatorArguments(a=2, b=2)
    assert resolved.run.output == CalculatorOutput(result=4)
    assert resolved.run.completed


def test_call_without_output_resolves_with_none():
    call = ToolCall(call_id="c1", tool_name="calculator", arguments={"a": 1, "b": 1})
    resolver = ToolResolver([CalculatorTool()], transcript_with(ToolCalls(calls=[call])))

    run = resolver.run(call)

    assert run.output is None
    assert not run.completed


def test_outputs_are_matched_by_call_id_not_position():
    first = ToolCall(call_id="first", tool_name="calculator", arguments={"a": 1, "b": 1})
    second = ToolCall(call_id="second", tool_name="calculator", arguments={"a": 5, "b": 5})
    transcript = transcript_with(
        ToolCalls(calls=[first, second]),
        ToolOutput(call_id="second", tool_name="calculator", segment=StructuredSegment(content={"result": 10})),
        ToolOutput(call_id="first", tool_name="calculator", segment=StructuredSegment(content={"result": 2})),
    )
    resolver = ToolResolver([CalculatorTool()], transcript)

    assert resolver.run(first).output.result == 2
    assert resolver.run(second).output.result == 10


def test_resolution_is_repeatable():
    call = ToolCall(call_id="c1", tool_name="calculator", arguments={"a": 2, "b": 3})
    transcript = transcript_with(
        ToolCalls(calls=[call]),
        ToolOutput(call_id="c1", tool_name="calculator", segment=StructuredSegment(content={"result": 5})),
    )
    resolver = ToolResolver([CalculatorTool()], transcript)

    assert resolver.resolve(call) == resolver.resolve(call)
    assert list(resolver.resolve_all()) == [resolver.resolve(call)]


def test_unknown_tool_fails():
    call = ToolCall(call_id="c1", tool_name="teleport")
    resolver = ToolResolver([CalculatorTool()], transcript_with(ToolCalls(calls=[call])))

    with pytest.raises(UnknownToolError) as exc_info:
        resolver.resolve(call)

    assert exc_info.value.name == "teleport"


def test_decode_failure_is_a_resolution_error():
    call = ToolCall(call_id="c1", tool_name="calculator", arguments={"a": 1, "b": 1})
    transcript = transcript_with(
        ToolCalls(calls=[call]),
        ToolOutput(call_id="c1", tool_name="calculator", segment=StructuredSegment(content={"oops": True})),
    )
    resolver = ToolResolver([CalculatorTool()], transcript)

    with pytest.raises(ToolDecodingError) as exc_info:
        resolver.run(call)

    assert exc_info.value.tool_name == "calculator"


def test_function_tool_defaults_to_no_projection():
    @tool
    def shout(text: str) -> str:
        """Uppercase the text."""
        return text.upper()

    call = ToolCall(call_id="s1", tool_name="shout", arguments={"text": "hi"})
    transcript = transcript_with(
        ToolCalls(calls=[call]),
        ToolOutput(call_id="s1", tool_name="shout", segment=TextSegment(content="HI")),
    )
    resolver = ToolResolver([shout], transcript)

    assert resolver.resolve(call) is None
    assert resolver.run(call).output == "HI"


def test_function_tool_custom_projection():
    @tool(name="double", resolve=lambda run: ("double", run.arguments.value, run.output))
    async def double_it(value: int) -> int:
        return value * 2

    call = ToolCall(call_id="d1", tool_name="double", arguments={"value": 4})
    transcript = transcript_with(
        ToolCalls(calls=[call]),
        ToolOutput(call_id="d1", tool_name="double", segment=StructuredSegment(content=8)),
    )

    assert ToolResolver([double_it], transcript).resolve(call) == ("double", 4, 8)
