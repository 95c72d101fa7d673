"""
Run narrative for agent turns.

One structured event per milestone of a turn, so a run can be followed in
the console or filtered in a JSON log pipeline:

    agent_start -> step_request -> reasoning / tool_call / tool_output /
    output_message / output_structured -> token_usage -> agent_finish

JSON payloads (tool arguments, tool outputs, structured responses) are
pretty-printed when they parse, and passed through unchanged otherwise.
"""

import json
from typing import Any, Iterable

from agentloop.domain.transcript import Reasoning, Response, TextSegment, ToolCalls, ToolOutput
from agentloop.utils.logging import get_logger

logger = get_logger("agentloop.agent")

PROMPT_PREVIEW_LENGTH = 180


def pretty_json(value: Any) -> str:
    """Pretty-print JSON text or a JSON-compatible value; fall back to str()."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return value
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except TypeError:
        return str(value)


def start(model: Any, tool_names: Iterable[str], prompt_preview: str | None) -> None:
    logger.info(
        "agent_start",
        model=str(model),
        tools=list(tool_names),
        prompt=(prompt_preview or "")[:PROMPT_PREVIEW_LENGTH],
    )


def step_request(step: int) -> None:
    logger.debug("step_request", step=step)


def reasoning(summary: list[str]) -> None:
    if not summary:
        return
    logger.debug("reasoning", summary=summary)


def tool_call(name: str, call_id: str, arguments: Any) -> None:
    logger.info("tool_call", tool_name=name, call_id=call_id, arguments=pretty_json(arguments))


def tool_output(name: str, call_id: str, output: Any) -> None:
    logger.info("tool_output", tool_name=name, call_id=call_id, output=pretty_json(output))


def output_message(text: str, status: str) -> None:
    logger.info("output_message", status=status, text=text.strip())


def output_structured(content: Any, status: str) -> None:
    logger.info("output_structured", status=status, content=pretty_json(content))


def token_usage(usage: Any) -> None:
    logger.info(
        "token_usage",
        input_tokens=usage.input_tokens,
        output_tokens=usage.output_tokens,
        total_tokens=usage.total_tokens,
        cached_tokens=usage.cached_tokens,
        reasoning_tokens=usage.reasoning_tokens,
    )


def finish(steps: int | None = None) -> None:
    logger.info("agent_finish", steps=steps)


def entry(item: Any) -> None:
    """Log a transcript entry as it is appended."""
    if isinstance(item, Reasoning):
        reasoning(item.summary)
    elif isinstance(item, ToolCalls):
        for call in item.calls:
            tool_call(call.tool_name, call.call_id, call.arguments)
    elif isinstance(item, ToolOutput):
        tool_output(item.tool_name, item.call_id, item.content)
    elif isinstance(item, Response):
        for segment in item.segments:
            if isinstance(segment, TextSegment):
                output_message(segment.content, item.status.value)
            else:
                output_structured(segment.content, item.status.value)


def error(err: BaseException, context: str | None = None) -> None:
    logger.error(
        "agent_error",
        context=context or "-",
        error=str(err),
        error_type=type(err).__name__,
    )


__all__ = [
    "pretty_json",
    "start",
    "step_request",
    "reasoning",
    "tool_call",
    "tool_output",
    "output_message",
    "output_structured",
    "token_usage",
    "finish",
    "entry",
    "error",
]
