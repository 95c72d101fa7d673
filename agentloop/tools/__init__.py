"""
Tools: the contract the model calls, execution, and typed resolution.
"""

from agentloop.tools.base import AgentTool, ToolRun
from agentloop.tools.decorator import tool
from agentloop.tools.executor import ToolExecutor
from agentloop.tools.local import FunctionTool
from agentloop.tools.resolver import ToolResolver
from agentloop.tools.schema import strict_schema

__all__ = [
    "AgentTool",
    "ToolRun",
    "FunctionTool",
    "tool",
    "ToolExecutor",
    "ToolResolver",
    "strict_schema",
]
