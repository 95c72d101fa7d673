"""
Adapter abstraction layer - backend boundary for one generation step

Responsibilities:
- Translate the transcript into the backend's request format
- Validate generation options against the chosen model before any network call
- Stream back transcript entries and usage reports for ONE step, in the order
  they should be appended

Does NOT handle:
- The step loop (see agentloop.runtime.session)
- Appending to the transcript (the transcript passed in is read-only)
- Retrying failed steps
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Sequence

from pydantic import BaseModel, ConfigDict

from agentloop.domain.transcript import PromptEntry, Transcript
from agentloop.domain.updates import AgentUpdate
from agentloop.tools.base import AgentTool


def is_text_type(generating: Any) -> bool:
    """True when free-form text (rather than structured content) is requested."""
    return generating is None or generating is str


def type_name(generating: Any) -> str:
    return getattr(generating, "__name__", None) or str(generating)


class GenerationOptions(BaseModel):
    """
    Per-request generation options.

    Backends subclass this with their own fields and validation.
    """

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def automatic(cls, model: Any) -> "GenerationOptions":
        """Options that are valid for the given model out of the box."""
        return cls()

    def validate_for(self, model: Any) -> None:
        """
        Validate options for the given model.

        Raises:
            GenerationOptionsError: Options cannot be used with this model
        """
        return None


class Adapter(ABC):
    """
    Backend adapter.

    Args:
        tools: Tools the model may call
        instructions: System instructions sent with every request
        configuration: Backend-specific configuration
    """

    name: str = "adapter"

    def __init__(
        self,
        tools: Sequence[AgentTool] = (),
        instructions: str = "",
        configuration: Any = None,
    ):
        self.tools = list(tools)
        self.instructions = instructions
        self.configuration = configuration

    @property
    def default_model(self) -> Any:
        return None

    def default_options(self, model: Any) -> GenerationOptions:
        return GenerationOptions.automatic(model)

    @abstractmethod
    def respond(
        self,
        prompt: PromptEntry,
        generating: Any,
        model: Any,
        transcript: Transcript[Any],
        options: GenerationOptions,
    ) -> AsyncIterator[AgentUpdate]:
        """
        Run one generation step.

        Args:
            prompt: The current turn's prompt (already in transcript)
            generating: str for text, or a type to decode structured content into
            model: Backend model identifier
            transcript: Conversation so far, read-only
            options: Generation options, validated before any request

        Yields:
            AgentUpdate: Transcript entries and token usage, in order
        """
        pass

    @property
    def tool_names(self) -> list[str]:
        return [t.name for t in self.tools]


__all__ = ["Adapter", "GenerationOptions", "is_text_type", "type_name"]
