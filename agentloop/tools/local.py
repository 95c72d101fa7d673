"""
Function tools: plain (sync or async) functions exposed as AgentTools.

The arguments model is derived from the function signature, the output type
from its return annotation and the description from its docstring.
"""

import inspect
from typing import Any, Callable, get_type_hints

from pydantic import BaseModel, create_model

from agentloop.tools.base import AgentTool, ToolRun


class FunctionTool(AgentTool):
    def __init__(
        self,
        func: Callable,
        name: str | None = None,
        description: str | None = None,
        resolve: Callable[[ToolRun], Any] | None = None,
    ):
        self.func = func
        self.name = name or func.__name__
        self.description = description or inspect.getdoc(func) or ""
        self.arguments_type = self._create_arguments_type(func)
        self.output_type = get_type_hints(func).get("return", Any)
        self._resolve = resolve

    def _create_arguments_type(self, func: Callable) -> type[BaseModel]:
        """Dynamically create a Pydantic model from function signature."""
        sig = inspect.signature(func)
        type_hints = get_type_hints(func)

        fields = {}
        for param_name, param in sig.parameters.items():
            if param_name in ("self", "cls"):
                continue

            annotation = type_hints.get(param_name, Any)
            if param.default is inspect.Parameter.empty:
                fields[param_name] = (annotation, ...)
            else:
                fields[param_name] = (annotation, param.default)

        model_name = "".join(part.capitalize() for part in self.name.split("_")) + "Arguments"
        return create_model(model_name, **fields)

    async def call(self, arguments: BaseModel) -> Any:
        kwargs = {name: getattr(arguments, name) for name in type(arguments).model_fields}
        if inspect.iscoroutinefunction(self.func):
            return await self.func(**kwargs)
        return self.func(**kwargs)

    def resolve(self, run: ToolRun) -> Any:
        if self._resolve is None:
            return None
        return self._resolve(run)


__all__ = ["FunctionTool"]
