"""
What an adapter stream carries, and what a turn returns.

    AgentUpdate = TranscriptUpdate | TokenUsageUpdate
"""

from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from agentloop.domain.transcript import Entry
from agentloop.domain.usage import TokenUsage

ContentT = TypeVar("ContentT")


class TranscriptUpdate(BaseModel):
    """A transcript entry to append, in emission order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["transcript"] = "transcript"
    entry: Entry


class TokenUsageUpdate(BaseModel):
    """A token usage report for the current step."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["token_usage"] = "token_usage"
    usage: TokenUsage


AgentUpdate = Annotated[TranscriptUpdate | TokenUsageUpdate, Field(discriminator="kind")]


class AgentResponse(BaseModel, Generic[ContentT]):
    """
    Result of one turn.

    Attributes:
        content: Final text (newline-joined) or decoded structured value
        added_entries: Entries appended during this turn, in order
        usage: Usage aggregated over the turn's steps, None if never reported
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: ContentT
    added_entries: list[Entry] = Field(default_factory=list)
    usage: TokenUsage | None = None

    def entries_of(self, entry_type: type) -> list[Any]:
        return [e for e in self.added_entries if isinstance(e, entry_type)]


__all__ = ["TranscriptUpdate", "TokenUsageUpdate", "AgentUpdate", "AgentResponse"]
