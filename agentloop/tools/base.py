"""
Tool contract.

An AgentTool is what the model can call: a name, a description, a pydantic
arguments model (its JSON schema is what the backend sees) and an async call().

Typed values cross the transcript boundary as JSON-compatible content. The
helpers here are the only conversions between the two:

    decode_arguments()  raw ToolCall.arguments -> arguments_type instance
    encode_output()     call() result          -> transcript Segment
    decode_output()     ToolOutput.segment     -> output_type value

An optional resolve() projects a typed ToolRun into an application-defined
value; see agentloop.tools.resolver.
"""

from abc import ABC, abstractmethod
from functools import cached_property
import json
from typing import Any, Generic, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, TypeAdapter

from agentloop.domain.transcript import Segment, StructuredSegment, TextSegment
from agentloop.tools.schema import strict_schema

ResolvedT = TypeVar("ResolvedT")


class ToolRun(BaseModel):
    """
    Typed view of one tool invocation.

    output is None while the call has no matching ToolOutput yet.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    tool_name: str
    call_id: str
    arguments: Any
    output: Any | None = None

    @property
    def completed(self) -> bool:
        return self.output is not None


class AgentTool(ABC, Generic[ResolvedT]):
    """
    Base class for tools the model can call.

    Subclasses set the class attributes and implement call():

        class WeatherTool(AgentTool):
            name = "get_weather"
            description = "Current weather for a city"
            arguments_type = WeatherArgs
            output_type = WeatherReport

            async def call(self, arguments: WeatherArgs) -> WeatherReport:
                ...

    call() may raise ToolRunProblem to hand a structured error back to the
    model instead of failing the turn. Any other exception aborts the turn.
    """

    name: str
    description: str = ""
    arguments_type: type[BaseModel]
    output_type: Any = str

    @abstractmethod
    async def call(self, arguments: Any) -> Any:
        """Run the tool with decoded arguments."""
        pass

    def resolve(self, run: ToolRun) -> ResolvedT | None:
        """Project a typed run into the application's resolved type."""
        return None

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON schema of the arguments, without the top-level title."""
        schema = self.arguments_type.model_json_schema()
        schema.pop("title", None)
        return schema

    def to_openai_schema(self, strict: bool = False) -> dict[str, Any]:
        """Function tool definition in Responses API format."""
        parameters = self.parameters
        if strict:
            parameters = strict_schema(parameters)
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "parameters": parameters,
            "strict": strict,
        }

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    @cached_property
    def _output_adapter(self) -> TypeAdapter:
        return TypeAdapter(self.output_type)

    def decode_arguments(self, raw: Any) -> Any:
        """
        Validate raw arguments (JSON text or JSON value). Raises ValidationError.

        Strict schemas mark optional properties nullable, so a null for an
        optional field that does not accept None means "use the default".
        """
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw or "{}")
            except ValueError:
                return self.arguments_type.model_validate_json(raw)
        if isinstance(raw, dict):
            raw = self._drop_null_defaults(raw)
        return self.arguments_type.model_validate(raw or {})

    def _drop_null_defaults(self, raw: dict[str, Any]) -> dict[str, Any]:
        dropped = set()
        for name, field in self.arguments_type.model_fields.items():
            key = field.alias or name
            if field.is_required() or raw.get(key, ...) is not None:
                continue
            if not _admits_none(field.annotation):
                dropped.add(key)
        return {key: value for key, value in raw.items() if key not in dropped}

    def encode_arguments(self, arguments: Any) -> Any:
        if isinstance(arguments, BaseModel):
            return arguments.model_dump(mode="json")
        return self.arguments_type.model_validate(arguments).model_dump(mode="json")

    def encode_output(self, output: Any) -> Segment:
        """Plain strings become text segments, everything else structured JSON."""
        if isinstance(output, str):
            return TextSegment(content=output)
        return StructuredSegment(content=self._output_adapter.dump_python(output, mode="json"))

    def decode_output(self, segment: Segment) -> Any:
        """Validate output content against output_type. Raises ValidationError."""
        return decode_content(self._output_adapter, segment)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


def _admits_none(annotation: Any) -> bool:
    if annotation is None or annotation is Any or annotation is type(None):
        return True
    return any(_admits_none(arg) for arg in get_args(annotation))


def decode_content(adapter: TypeAdapter, segment: Segment) -> Any:
    """
    Decode a segment with a pydantic TypeAdapter.

    Text destined for a non-string type is treated as JSON text.
    """
    if isinstance(segment, TextSegment):
        try:
            return adapter.validate_python(segment.content, strict=True)
        except ValueError:
            return adapter.validate_json(segment.content)
    return adapter.validate_python(segment.content)


__all__ = ["AgentTool", "ToolRun", "ResolvedT", "decode_content"]
