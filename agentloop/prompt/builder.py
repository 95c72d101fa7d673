"""
Prompt composition as an immutable node tree with a deterministic renderer.

    prompt = Prompt(
        "You are a helpful assistant.",
        PromptSection("Context", PromptTag("document", "...", attributes={"title": "Guide"})),
        user_input,
    )
    text = prompt.render()

Strings, ints, floats and anything exposing to_prompt() can be used as
children; None and nested lists are flattened away.
"""

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class TextNode:
    text: str


@dataclass(frozen=True)
class SectionNode:
    title: str
    children: tuple = ()


@dataclass(frozen=True)
class TagNode:
    name: str
    attributes: tuple[tuple[str, str], ...] = ()
    children: tuple = ()


def _to_nodes(items: Iterable[Any]) -> tuple:
    nodes: list = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, (TextNode, SectionNode, TagNode)):
            nodes.append(item)
        elif isinstance(item, Prompt):
            nodes.extend(item.nodes)
        elif isinstance(item, (PromptSection, PromptTag)):
            nodes.extend(item.to_prompt().nodes)
        elif hasattr(item, "to_prompt"):
            nodes.extend(_to_nodes([item.to_prompt()]))
        elif isinstance(item, (list, tuple)):
            nodes.extend(_to_nodes(item))
        else:
            nodes.append(TextNode(str(item)))
    return tuple(nodes)


class Prompt:
    """An ordered sequence of prompt nodes."""

    def __init__(self, *content: Any):
        self.nodes = _to_nodes(content)

    def __add__(self, other: Any) -> "Prompt":
        return Prompt(self, other)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Prompt) and self.nodes == other.nodes

    def __repr__(self) -> str:
        return f"Prompt({self.render()!r})"

    def render(self) -> str:
        return _render(self.nodes, indent_level=0, heading_level=1).strip()

    def __str__(self) -> str:
        return self.render()


class PromptSection:
    """A markdown-style heading followed by its content."""

    def __init__(self, title: str, *content: Any):
        self.title = title
        self.content = _to_nodes(content)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PromptSection) and (self.title, self.content) == (
            other.title,
            other.content,
        )

    def to_prompt(self) -> Prompt:
        prompt = Prompt()
        prompt.nodes = (SectionNode(self.title, self.content),)
        return prompt


class PromptTag:
    """An XML-like tag wrapping its content; empty tags render self-closing."""

    def __init__(self, name: str, *content: Any, attributes: dict[str, str] | None = None):
        self.name = name
        self.attributes = tuple(sorted((attributes or {}).items()))
        self.content = _to_nodes(content)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PromptTag) and (self.name, self.attributes, self.content) == (
            other.name,
            other.attributes,
            other.content,
        )

    def to_prompt(self) -> Prompt:
        prompt = Prompt()
        prompt.nodes = (TagNode(self.name, self.attributes, self.content),)
        return prompt


def render(content: Any) -> str:
    """Render a prompt, node or plain value to text."""
    if isinstance(content, str):
        return content
    return Prompt(content).render()


# ============================================================================
# Renderer
# ============================================================================


def _render(nodes: tuple, indent_level: int, heading_level: int) -> str:
    rendered = (_render_node(node, indent_level, heading_level) for node in nodes)
    return "\n".join(part for part in rendered if part.strip())


def _render_node(node: Any, indent_level: int, heading_level: int) -> str:
    indent = "  " * max(0, indent_level)

    if isinstance(node, TextNode):
        return indent + node.text

    if isinstance(node, SectionNode):
        header = "#" * min(max(1, heading_level), 6) + " " + node.title
        body = _render(node.children, indent_level, heading_level + 1)
        if not body:
            return indent + header
        return indent + header + "\n" + body + "\n"

    attrs = "".join(f' {key}="{_xml_escape(value)}"' for key, value in node.attributes)
    body = _render(node.children, indent_level + 1, heading_level)
    if not body:
        return f"{indent}<{node.name}{attrs} />"
    return f"{indent}<{node.name}{attrs}>\n{body}\n{indent}</{node.name}>"


def _xml_escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


__all__ = ["Prompt", "PromptSection", "PromptTag", "render"]
