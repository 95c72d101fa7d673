"""
Token usage accounting.

A missing figure is not the same as zero: backends that do not report a
counter leave it as None, and summing keeps it None until some report
provides a value.
"""

from pydantic import BaseModel


def _sum(a: int | None, b: int | None) -> int | None:
    if a is None:
        return b
    if b is None:
        return a
    return a + b


class TokenUsage(BaseModel):
    """Token counts for one step, one turn, or a whole session."""

    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None
    cached_tokens: int | None = None
    reasoning_tokens: int | None = None

    def merge(self, other: "TokenUsage") -> None:
        """Add another report into this one, in place."""
        self.input_tokens = _sum(self.input_tokens, other.input_tokens)
        self.output_tokens = _sum(self.output_tokens, other.output_tokens)
        self.total_tokens = _sum(self.total_tokens, other.total_tokens)
        self.cached_tokens = _sum(self.cached_tokens, other.cached_tokens)
        self.reasoning_tokens = _sum(self.reasoning_tokens, other.reasoning_tokens)

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        merged = self.model_copy()
        merged.merge(other)
        return merged

    @classmethod
    def combine(cls, current: "TokenUsage | None", other: "TokenUsage | None") -> "TokenUsage | None":
        """Merge two optional reports; returns None only if both are None."""
        if current is None:
            return other.model_copy() if other is not None else None
        if other is None:
            return current.model_copy()
        return current + other

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.input_tokens,
                self.output_tokens,
                self.total_tokens,
                self.cached_tokens,
                self.reasoning_tokens,
            )
        )


__all__ = ["TokenUsage"]
