"""
Tool decorator
"""

from typing import Any, Callable

from agentloop.tools.base import ToolRun
from agentloop.tools.local import FunctionTool


def tool(
    func: Callable | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
    resolve: Callable[[ToolRun], Any] | None = None,
):
    """
    Decorator to convert a function into a FunctionTool.

    Usable bare or with options:

        @tool
        def add(a: int, b: int) -> int:
            return a + b

        @tool(name="lookup_city", resolve=CityRun)
        async def lookup(city: str) -> CityInfo:
            ...

    Returns:
        FunctionTool instance
    """

    def wrap(fn: Callable) -> FunctionTool:
        return FunctionTool(fn, name=name, description=description, resolve=resolve)

    if func is not None:
        return wrap(func)
    return wrap


__all__ = ["tool"]
