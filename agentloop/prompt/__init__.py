"""
Prompt composition.
"""

from agentloop.prompt.builder import Prompt, PromptSection, PromptTag, render

__all__ = ["Prompt", "PromptSection", "PromptTag", "render"]
