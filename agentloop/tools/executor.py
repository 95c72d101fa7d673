"""
Tool executor.

Runs the tool calls the model requested and turns each into a ToolOutput
entry correlated by call_id.

Failure handling:
- ToolRunProblem raised by a tool is recoverable: its content becomes the
  tool's output and the turn continues.
- Any other exception (including invalid arguments) is wrapped in
  ToolRunError and aborts the turn.
- A call naming an unknown tool raises UnsupportedToolCalledError.
- asyncio.CancelledError is never caught.
"""

import time
from typing import Iterable

from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from agentloop.domain.errors import ToolRunError, ToolRunProblem, UnsupportedToolCalledError
from agentloop.domain.transcript import StructuredSegment, ToolCall, ToolOutput
from agentloop.tools.base import AgentTool
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


class ToolExecutor:
    """Executes tool calls against a name-indexed tool map."""

    def __init__(self, tools: Iterable[AgentTool]):
        """
        Args:
            tools: Tools available to the model
        """
        self.tools_map = {t.name: t for t in tools}

    def get(self, name: str) -> AgentTool | None:
        return self.tools_map.get(name)

    async def execute(self, call: ToolCall) -> ToolOutput:
        """
        Execute a single tool call.

        Returns:
            ToolOutput: Output entry with the call's call_id

        Raises:
            UnsupportedToolCalledError: Unknown tool name
            ToolRunError: The tool failed unrecoverably
        """
        tool = self.tools_map.get(call.tool_name)
        if tool is None:
            logger.error(
                "unsupported_tool_called",
                tool_name=call.tool_name,
                available_tools=sorted(self.tools_map),
            )
            raise UnsupportedToolCalledError(call.tool_name)

        start_time = time.time()

        try:
            arguments = tool.decode_arguments(call.arguments)
        except ValidationError as e:
            logger.error(
                "tool_arguments_invalid",
                tool_name=call.tool_name,
                call_id=call.call_id,
                error=str(e),
            )
            raise ToolRunError(call.tool_name, e) from e

        try:
            logger.debug("executing_tool", tool_name=call.tool_name, call_id=call.call_id)
            output = await tool.call(arguments)
        except ToolRunProblem as problem:
            logger.info(
                "tool_run_problem",
                tool_name=call.tool_name,
                call_id=call.call_id,
                reason=problem.reason,
            )
            return ToolOutput(
                call_id=call.call_id,
                tool_name=call.tool_name,
                segment=StructuredSegment(content=to_jsonable_python(problem.content)),
            )
        except Exception as e:
            logger.error(
                "tool_execution_exception",
                tool_name=call.tool_name,
                call_id=call.call_id,
                error=str(e),
                exc_info=True,
            )
            raise ToolRunError(call.tool_name, e) from e

        logger.debug(
            "tool_execution_completed",
            tool_name=call.tool_name,
            call_id=call.call_id,
            duration=time.time() - start_time,
        )
        return ToolOutput(
            call_id=call.call_id,
            tool_name=call.tool_name,
            segment=tool.encode_output(output),
        )

    async def execute_all(self, calls: Iterable[ToolCall]) -> list[ToolOutput]:
        """Execute calls one after another, in call order."""
        return [await self.execute(call) for call in calls]


__all__ = ["ToolExecutor"]
