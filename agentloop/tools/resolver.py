"""
Tool resolver: raw tool calls back to typed, application-defined values.

    resolver = session.tool_resolver([WeatherTool(), CalculatorTool()])

    for call in session.transcript.tool_calls():
        match resolver.resolve(call):
            case WeatherRun(run=run):
                print(run.arguments.city, run.output)
            case CalculatorRun(run=run):
                ...

Resolution is a pure function of the transcript and the call, so it can be
re-run any number of times. A call without a matching ToolOutput resolves to
a run whose output is None.
"""

from typing import Any, Generic, Iterable, Iterator

from pydantic import ValidationError

from agentloop.domain.errors import ToolDecodingError, UnknownToolError
from agentloop.domain.transcript import ToolCall, Transcript
from agentloop.tools.base import AgentTool, ResolvedT, ToolRun
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


class ToolResolver(Generic[ResolvedT]):
    """
    Resolves ToolCalls from one transcript against a fixed set of tools.

    Args:
        tools: Tools sharing one resolved type, indexed by name
        transcript: Transcript to look up outputs in (read-only)
    """

    def __init__(self, tools: Iterable[AgentTool[ResolvedT]], transcript: Transcript[Any]):
        self.tools_map: dict[str, AgentTool[ResolvedT]] = {t.name: t for t in tools}
        self.transcript = transcript

    def run(self, call: ToolCall) -> ToolRun:
        """
        Build the typed run for a call.

        Raises:
            UnknownToolError: The call names a tool not in this resolver
            ToolDecodingError: Arguments or output failed validation
        """
        tool = self.tools_map.get(call.tool_name)
        if tool is None:
            logger.error(
                "tool_resolution_failed",
                tool_name=call.tool_name,
                available_tools=sorted(self.tools_map),
            )
            raise UnknownToolError(call.tool_name)

        tool_output = self.transcript.find_tool_output(call.call_id)

        try:
            arguments = tool.decode_arguments(call.arguments)
            output = tool.decode_output(tool_output.segment) if tool_output else None
        except ValidationError as e:
            logger.error(
                "tool_decoding_failed",
                tool_name=call.tool_name,
                call_id=call.call_id,
                error=str(e),
            )
            raise ToolDecodingError(call.tool_name, e) from e

        return ToolRun(
            tool_name=call.tool_name,
            call_id=call.call_id,
            arguments=arguments,
            output=output,
        )

    def resolve(self, call: ToolCall) -> ResolvedT | None:
        """Typed run projected through the tool's resolve()."""
        tool = self.tools_map.get(call.tool_name)
        run = self.run(call)
        return tool.resolve(run)

    def resolve_all(self) -> Iterator[ResolvedT | None]:
        """Resolve every tool call in the transcript, in order."""
        for call in self.transcript.tool_calls():
            yield self.resolve(call)


__all__ = ["ToolResolver"]
