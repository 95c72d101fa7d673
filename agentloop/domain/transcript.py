"""
Transcript data model.

A Transcript is the ordered, append-only record of one conversation:

    PromptEntry -> Reasoning -> ToolCalls -> ToolOutput -> Response -> PromptEntry ...

Insertion order is causal order. Entries are immutable once built; corrections
are new entries. The transcript is generic over the application's context
source type, which only appears inside PromptEntry.context.

Every entry type carries a `type` discriminator so a transcript serializes to
JSON and back without losing which kind of entry each item was.
"""

from enum import Enum
from typing import Annotated, Any, Generic, Iterable, Iterator, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from agentloop.domain.context import ContextT, PromptContext


def new_id() -> str:
    return str(uuid4())


class Status(str, Enum):
    """Backend-reported progress of an entry."""

    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    IN_PROGRESS = "in_progress"


# ============================================================================
# Segments
# ============================================================================


class TextSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    id: str = Field(default_factory=new_id)
    content: str


class StructuredSegment(BaseModel):
    """JSON-compatible content (dict, list, str, number, bool or None)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["structure"] = "structure"
    id: str = Field(default_factory=new_id)
    content: Any = None


Segment = Annotated[TextSegment | StructuredSegment, Field(discriminator="type")]


# ============================================================================
# Entries
# ============================================================================


class PromptEntry(BaseModel, Generic[ContextT]):
    """
    The user's turn.

    input is what the user typed; embedded_prompt is the rendered text that is
    actually sent to the backend (input plus any embedded context).
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["prompt"] = "prompt"
    id: str = Field(default_factory=new_id)
    input: str
    context: PromptContext[ContextT] = Field(default_factory=PromptContext)
    embedded_prompt: str


class Reasoning(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["reasoning"] = "reasoning"
    id: str = Field(default_factory=new_id)
    summary: list[str] = Field(default_factory=list)
    encrypted_reasoning: str | None = None
    status: Status | None = None


class ToolCall(BaseModel):
    """
    One tool invocation requested by the model.

    call_id is the backend correlation key shared with the matching
    ToolOutput; id is this entry's own identity.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    call_id: str
    tool_name: str
    arguments: Any = Field(default_factory=dict)
    status: Status = Status.COMPLETED


class ToolCalls(BaseModel):
    """All tool calls the model requested in one step."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_calls"] = "tool_calls"
    id: str = Field(default_factory=new_id)
    calls: list[ToolCall] = Field(default_factory=list)

    def __iter__(self) -> Iterator[ToolCall]:  # type: ignore[override]
        return iter(self.calls)

    def __len__(self) -> int:
        return len(self.calls)

    def __getitem__(self, index: int) -> ToolCall:
        return self.calls[index]


class ToolOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_output"] = "tool_output"
    id: str = Field(default_factory=new_id)
    call_id: str
    tool_name: str
    segment: Segment
    status: Status = Status.COMPLETED

    @property
    def content(self) -> Any:
        return self.segment.content


class Response(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["response"] = "response"
    id: str = Field(default_factory=new_id)
    segments: list[Segment] = Field(default_factory=list)
    status: Status = Status.COMPLETED

    def text_segments(self) -> list[TextSegment]:
        return [s for s in self.segments if isinstance(s, TextSegment)]

    def structured_segments(self) -> list[StructuredSegment]:
        return [s for s in self.segments if isinstance(s, StructuredSegment)]

    @property
    def text(self) -> str:
        return "\n".join(s.content for s in self.text_segments())


Entry = Annotated[
    PromptEntry | Reasoning | ToolCalls | ToolOutput | Response,
    Field(discriminator="type"),
]


def pending_tool_calls(entries: Iterable[Any]) -> list[ToolCall]:
    """Tool calls among entries that have no ToolOutput with the same call_id."""
    entries = list(entries)
    answered = {e.call_id for e in entries if isinstance(e, ToolOutput)}
    return [
        call
        for e in entries
        if isinstance(e, ToolCalls)
        for call in e.calls
        if call.call_id not in answered
    ]


# ============================================================================
# Transcript
# ============================================================================


class Transcript(BaseModel, Generic[ContextT]):
    """
    Ordered, append-only sequence of entries.

    Supports iteration, len(), index and slice access. Only the owning
    Session appends; everything else treats a transcript as read-only.

    Examples:
        >>> transcript = Transcript()
        >>> transcript.append(PromptEntry(input="Hi", embedded_prompt="Hi"))
        >>> len(transcript)
        1
    """

    entries: list[
        Annotated[
            PromptEntry[ContextT] | Reasoning | ToolCalls | ToolOutput | Response,
            Field(discriminator="type"),
        ]
    ] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Any]:  # type: ignore[override]
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __bool__(self) -> bool:
        return True

    def append(self, entry: Any) -> None:
        self.entries.append(entry)

    def extend(self, entries: Iterable[Any]) -> None:
        self.entries.extend(entries)

    def replace_range(self, start: int, stop: int, entries: Iterable[Any]) -> None:
        """Splice entries into [start, stop). Used by test and simulation tooling."""
        self.entries[start:stop] = list(entries)

    def tool_calls(self) -> Iterator[ToolCall]:
        for entry in self.entries:
            if isinstance(entry, ToolCalls):
                yield from entry.calls

    def tool_outputs(self) -> Iterator[ToolOutput]:
        for entry in self.entries:
            if isinstance(entry, ToolOutput):
                yield entry

    def find_tool_output(self, call_id: str) -> ToolOutput | None:
        """Linear scan for the output correlated with call_id."""
        for output in self.tool_outputs():
            if output.call_id == call_id:
                return output
        return None

    def responses(self) -> Iterator[Response]:
        for entry in self.entries:
            if isinstance(entry, Response):
                yield entry

    def snapshot(self) -> "Transcript[ContextT]":
        """A shallow copy; entries are immutable so this is safe to hand out."""
        return self.__class__(entries=list(self.entries))


__all__ = [
    "Status",
    "TextSegment",
    "StructuredSegment",
    "Segment",
    "PromptEntry",
    "Reasoning",
    "ToolCall",
    "ToolCalls",
    "ToolOutput",
    "Response",
    "Entry",
    "Transcript",
    "new_id",
    "pending_tool_calls",
]
