"""
Side information attached to a prompt.

PromptContext carries caller-supplied context sources (any application type,
typically a pydantic model or an enum) plus link previews extracted from URLs
in the user's input. Both are handed to the embed function that renders the
final prompt text.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from agentloop.prompt.builder import PromptTag

ContextT = TypeVar("ContextT")


class LinkPreview(BaseModel):
    """Metadata for a URL found in user input."""

    model_config = ConfigDict(frozen=True)

    original_url: str
    url: str  # After redirects
    title: str | None = None

    def to_prompt(self) -> PromptTag:
        """
        Render as <link-preview url="..." original_url="..." title="..." />.

        original_url is only included when a redirect changed the URL.
        """
        attributes = {"url": self.url}
        if self.original_url != self.url:
            attributes["original_url"] = self.original_url
        if self.title is not None:
            attributes["title"] = self.title
        return PromptTag("link-preview", attributes=attributes)


class PromptContext(BaseModel, Generic[ContextT]):
    """Context sources and link previews for one prompt."""

    model_config = ConfigDict(frozen=True)

    sources: list[ContextT] = Field(default_factory=list)
    link_previews: list[LinkPreview] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "PromptContext[Any]":
        return cls()

    def is_empty(self) -> bool:
        return not self.sources and not self.link_previews

    def link_previews_prompt(self) -> PromptTag | None:
        """All link previews wrapped in a <link-previews> tag, or None."""
        if not self.link_previews:
            return None
        return PromptTag("link-previews", *[preview.to_prompt() for preview in self.link_previews])


__all__ = ["ContextT", "LinkPreview", "PromptContext"]
