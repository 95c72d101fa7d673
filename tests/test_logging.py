"""
Log redaction and agent log formatting.
"""

from unittest.mock import patch

from structlog.testing import CapturingLogger

from agentloop.domain.transcript import Response, StructuredSegment, TextSegment, ToolCall, ToolCalls
from agentloop.domain.usage import TokenUsage
from agentloop.utils import agent_log
from agentloop.utils.logging import REDACTED, filter_sensitive_data


def test_credentials_are_redacted():
    event = {
        "event": "llm_request",
        "api_key": "sk-123",
        "Authorization": "Bearer x",
        "db_password": "hunter2",
        "model": "gpt-5",
    }

    result = filter_sensitive_data(CapturingLogger(), "info", event.copy())

    assert result["api_key"] == REDACTED
    assert result["Authorization"] == REDACTED
    assert result["db_password"] == REDACTED
    assert result["model"] == "gpt-5"


def test_token_counters_are_not_redacted():
    event = {"event": "token_usage", "input_tokens": 10, "access_tokens": 3}

    result = filter_sensitive_data(None, "info", event)

    assert result["input_tokens"] == 10
    assert result["access_tokens"] == 3


def test_pretty_json():
    assert agent_log.pretty_json('{"a": 1}') == '{\n  "a": 1\n}'
    assert agent_log.pretty_json({"city": "Zürich"}) == '{\n  "city": "Zürich"\n}'
    assert agent_log.pretty_json("not json") == "not json"
    assert agent_log.pretty_json({1, 2}) in ("{1, 2}", "{2, 1}")


def test_entries_log_by_kind():
    calls = ToolCalls(calls=[ToolCall(call_id="c1", tool_name="calculator", arguments={"a": 1})])
    response = Response(segments=[TextSegment(content=" hi "), StructuredSegment(content=[1])])

    with patch("agentloop.utils.agent_log.logger") as mock_logger:
        agent_log.entry(calls)
        agent_log.entry(response)

    events = [c[0][0] for c in mock_logger.info.call_args_list]
    assert events == ["tool_call", "output_message", "output_structured"]
    assert mock_logger.info.call_args_list[1][1]["text"] == "hi"


def test_token_usage_event():
    with patch("agentloop.utils.agent_log.logger") as mock_logger:
        agent_log.token_usage(TokenUsage(input_tokens=5))

    kwargs = mock_logger.info.call_args[1]
    assert kwargs["input_tokens"] == 5
    assert kwargs["output_tokens"] is None
