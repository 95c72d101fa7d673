"""
OpenAI adapter - Responses API backend

Each respond() call issues exactly one stateless Responses API request
(store=False): the whole transcript is replayed as input items, and
reasoning items are carried forward through their encrypted content.

Transcript -> input items:
    PromptEntry -> user message (embedded_prompt)
    Reasoning   -> reasoning item with encrypted_content
    ToolCalls   -> one function_call item per call
    ToolOutput  -> function_call_output (text as-is, structured as JSON)
    Response    -> assistant message (text segments only)

Output items -> updates:
    message       -> Response (text segments, or one structured segment)
    function_call -> ToolCalls
    reasoning     -> Reasoning
    usage         -> TokenUsageUpdate
"""

import json
import re
from enum import Enum
from typing import Any, AsyncIterator, Literal, Sequence

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, SecretStr, TypeAdapter

from agentloop.config.exceptions import GenerationOptionsError
from agentloop.domain.errors import (
    ContentRefusalError,
    EmptyMessageContentError,
    StructuredContentParsingError,
)
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
)
from agentloop.domain.updates import AgentUpdate, TokenUsageUpdate, TranscriptUpdate
from agentloop.domain.usage import TokenUsage
from agentloop.llm.base import Adapter, GenerationOptions, is_text_type, type_name
from agentloop.tools.base import AgentTool
from agentloop.utils.logging import get_logger
from agentloop.utils.retry import retry_async

logger = get_logger(__name__)

ENCRYPTED_REASONING = "reasoning.encrypted_content"


class OpenAIModel(str, Enum):
    """Known OpenAI models. Any other model name can be passed as a plain str."""

    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"
    GPT_5_NANO = "gpt-5-nano"
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    O4_MINI = "o4-mini"

    @property
    def is_reasoning(self) -> bool:
        return self in _REASONING_MODELS


_REASONING_MODELS = {
    OpenAIModel.GPT_5,
    OpenAIModel.GPT_5_MINI,
    OpenAIModel.GPT_5_NANO,
    OpenAIModel.O4_MINI,
}

_REASONING_PREFIXES = ("gpt-5", "o1", "o3", "o4")


def model_name(model: OpenAIModel | str) -> str:
    return model.value if isinstance(model, OpenAIModel) else str(model)


def is_reasoning_model(model: OpenAIModel | str) -> bool:
    if isinstance(model, OpenAIModel):
        return model.is_reasoning
    return str(model).startswith(_REASONING_PREFIXES)


def snake_case_name(generating: Any) -> str:
    """WeatherReport -> weather_report, used as the json_schema format name."""
    name = type_name(generating)
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


# ============================================================================
# Options & configuration
# ============================================================================


class OpenAIGenerationOptions(GenerationOptions):
    """Responses API request options. None means "backend default"."""

    include: list[str] | None = None
    max_output_tokens: int | None = Field(default=None, ge=1)
    parallel_tool_calls: bool | None = None
    prompt_cache_key: str | None = None
    reasoning: dict[str, Any] | None = None
    safety_identifier: str | None = None
    service_tier: Literal["auto", "default", "flex", "priority"] | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    tool_choice: str | dict[str, Any] | None = None
    top_logprobs: int | None = Field(default=None, ge=0, le=20)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    truncation: Literal["auto", "disabled"] | None = None

    @classmethod
    def automatic(cls, model: OpenAIModel | str) -> "OpenAIGenerationOptions":
        if is_reasoning_model(model):
            return cls(include=[ENCRYPTED_REASONING])
        return cls()

    def validate_for(self, model: OpenAIModel | str) -> None:
        # Stateless replay of reasoning needs the encrypted content back
        if is_reasoning_model(model) and ENCRYPTED_REASONING not in (self.include or []):
            raise GenerationOptionsError(
                f"Reasoning model '{model_name(model)}' requires '{ENCRYPTED_REASONING}' in include",
                recovery_suggestion=(
                    "Use OpenAIGenerationOptions.automatic(model) or add "
                    f"'{ENCRYPTED_REASONING}' to include"
                ),
            )

    def to_request_params(self, model: OpenAIModel | str) -> dict[str, Any]:
        params = self.model_dump(exclude_none=True)
        if is_reasoning_model(model):
            params.pop("temperature", None)
            params.setdefault("reasoning", {"effort": "low", "summary": "detailed"})
        else:
            params.pop("reasoning", None)
        return params


class OpenAIConfiguration(BaseModel):
    """Client configuration for the OpenAI adapter."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_key: SecretStr | None = Field(default=None, exclude=True)
    base_url: str | None = None
    timeout: float = 60.0
    max_retries: int = 3
    strict_tools: bool = False
    client: Any = Field(default=None, exclude=True)

    @classmethod
    def direct(cls, api_key: str, base_url: str | None = None, **kwargs: Any) -> "OpenAIConfiguration":
        """Talk to OpenAI (or a compatible endpoint) directly with an API key."""
        return cls(api_key=SecretStr(api_key), base_url=base_url, **kwargs)

    @classmethod
    def from_settings(cls) -> "OpenAIConfiguration":
        from agentloop.config import settings

        return cls(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            max_retries=settings.openai_max_retries,
            strict_tools=settings.strict_tool_schemas,
        )

    def create_client(self) -> AsyncOpenAI:
        if self.client is not None:
            return self.client
        # Retries are handled by retry_async, not the SDK
        return AsyncOpenAI(
            api_key=self.api_key.get_secret_value() if self.api_key else None,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )


# ============================================================================
# Adapter
# ============================================================================


def _status(value: Any) -> Status | None:
    try:
        return Status(value) if value is not None else None
    except ValueError:
        return None


def _usage(usage: Any) -> TokenUsage:
    input_details = getattr(usage, "input_tokens_details", None)
    output_details = getattr(usage, "output_tokens_details", None)
    return TokenUsage(
        input_tokens=getattr(usage, "input_tokens", None),
        output_tokens=getattr(usage, "output_tokens", None),
        total_tokens=getattr(usage, "total_tokens", None),
        cached_tokens=getattr(input_details, "cached_tokens", None),
        reasoning_tokens=getattr(output_details, "reasoning_tokens", None),
    )


class OpenAIAdapter(Adapter):
    """
    Adapter for the OpenAI Responses API.

    Args:
        tools: Tools the model may call
        instructions: System instructions
        configuration: Client configuration; defaults to one built from settings
    """

    name = "openai"

    def __init__(
        self,
        tools: Sequence[AgentTool] = (),
        instructions: str = "",
        configuration: OpenAIConfiguration | None = None,
    ):
        configuration = configuration or OpenAIConfiguration.from_settings()
        super().__init__(tools, instructions, configuration)
        self.client = configuration.create_client()
        self._send = retry_async(max_attempts=max(1, configuration.max_retries + 1))(self._send_once)

    @property
    def default_model(self) -> OpenAIModel:
        return OpenAIModel.GPT_5

    def default_options(self, model: OpenAIModel | str) -> OpenAIGenerationOptions:
        return OpenAIGenerationOptions.automatic(model)

    async def respond(
        self,
        prompt: PromptEntry,
        generating: Any,
        model: OpenAIModel | str,
        transcript: Transcript[Any],
        options: GenerationOptions,
    ) -> AsyncIterator[AgentUpdate]:
        options.validate_for(model)

        params = self.build_request(transcript, generating, model, options)
        response = await self._send(params)

        for item in response.output or []:
            item_type = getattr(item, "type", None)
            if item_type == "message":
                yield TranscriptUpdate(entry=self._parse_message(item, generating))
            elif item_type == "function_call":
                yield TranscriptUpdate(entry=self._parse_function_call(item))
            elif item_type == "reasoning":
                yield TranscriptUpdate(entry=self._parse_reasoning(item))
            else:
                logger.warning("unsupported_output_item", item_type=item_type)

        if getattr(response, "usage", None) is not None:
            yield TokenUsageUpdate(usage=_usage(response.usage))

    async def _send_once(self, params: dict[str, Any]) -> Any:
        logger.info(
            "llm_request",
            model=params["model"],
            input_items=len(params["input"]),
            tools_count=len(params.get("tools", [])),
            structured="text" in params,
        )
        try:
            return await self.client.responses.create(**params)
        except Exception as e:
            logger.error(
                "llm_request_failed",
                model=params["model"],
                error=str(e),
                error_type=type(e).__name__,
                input_items=len(params["input"]),
                exc_info=True,
            )
            raise

    # ------------------------------------------------------------------
    # Request
    # ------------------------------------------------------------------

    def build_request(
        self,
        transcript: Transcript[Any],
        generating: Any,
        model: OpenAIModel | str,
        options: GenerationOptions,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": model_name(model),
            "input": self.transcript_to_input(transcript),
            "store": False,
        }
        if self.instructions:
            params["instructions"] = self.instructions
        if self.tools:
            params["tools"] = [
                tool.to_openai_schema(strict=self.configuration.strict_tools) for tool in self.tools
            ]
        if not is_text_type(generating):
            params["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": snake_case_name(generating),
                    "schema": TypeAdapter(generating).json_schema(),
                    "strict": False,
                }
            }
        if isinstance(options, OpenAIGenerationOptions):
            params.update(options.to_request_params(model))
        return params

    def transcript_to_input(self, transcript: Transcript[Any]) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []

        for entry in transcript:
            if isinstance(entry, PromptEntry):
                items.append({"role": "user", "content": entry.embedded_prompt})

            elif isinstance(entry, Reasoning):
                # Reasoning without encrypted content cannot be replayed statelessly
                if entry.encrypted_reasoning:
                    items.append(
                        {
                            "type": "reasoning",
                            "id": entry.id,
                            "summary": [],
                            "encrypted_content": entry.encrypted_reasoning,
                        }
                    )

            elif isinstance(entry, ToolCalls):
                for call in entry.calls:
                    items.append(
                        {
                            "type": "function_call",
                            "call_id": call.call_id,
                            "name": call.tool_name,
                            "arguments": json.dumps(call.arguments),
                        }
                    )

            elif isinstance(entry, ToolOutput):
                if isinstance(entry.segment, TextSegment):
                    output = entry.segment.content
                else:
                    output = json.dumps(entry.segment.content)
                items.append(
                    {"type": "function_call_output", "call_id": entry.call_id, "output": output}
                )

            elif isinstance(entry, Response):
                # Structured segments are not replayed
                text = entry.text
                if text:
                    items.append({"role": "assistant", "content": text})

        return items

    # ------------------------------------------------------------------
    # Response
    # ------------------------------------------------------------------

    def _parse_message(self, message: Any, generating: Any) -> Response:
        contents = list(getattr(message, "content", None) or [])
        status = _status(getattr(message, "status", None)) or Status.COMPLETED

        if is_text_type(generating):
            segments = []
            for content in contents:
                text = getattr(content, "text", None)
                if text is None:
                    text = getattr(content, "refusal", None)
                if text is not None:
                    segments.append(TextSegment(content=text))
            return Response(id=message.id, segments=segments, status=status)

        expected = type_name(generating)
        if not contents:
            raise EmptyMessageContentError(expected)

        content = contents[0]
        if getattr(content, "type", None) == "refusal":
            raise ContentRefusalError(expected, reason=getattr(content, "refusal", None))

        raw = getattr(content, "text", "") or ""
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.error("structured_response_parsing_failed", expected_type=expected, error=str(e))
            raise StructuredContentParsingError(raw, e) from e

        return Response(id=message.id, segments=[StructuredSegment(content=parsed)], status=status)

    def _parse_function_call(self, function_call: Any) -> ToolCalls:
        raw_arguments = getattr(function_call, "arguments", "") or "{}"
        try:
            arguments = json.loads(raw_arguments)
        except ValueError:
            # Left as text; decoding fails loudly when the tool runs
            arguments = raw_arguments

        call = ToolCall(
            id=getattr(function_call, "id", None) or function_call.call_id,
            call_id=function_call.call_id,
            tool_name=function_call.name,
            arguments=arguments,
            status=_status(getattr(function_call, "status", None)) or Status.COMPLETED,
        )
        return ToolCalls(calls=[call])

    def _parse_reasoning(self, reasoning: Any) -> Reasoning:
        summary = [getattr(part, "text", "") for part in getattr(reasoning, "summary", None) or []]
        return Reasoning(
            id=reasoning.id,
            summary=summary,
            encrypted_reasoning=getattr(reasoning, "encrypted_content", None),
            status=_status(getattr(reasoning, "status", None)),
        )


__all__ = [
    "OpenAIAdapter",
    "OpenAIConfiguration",
    "OpenAIGenerationOptions",
    "OpenAIModel",
    "is_reasoning_model",
]
