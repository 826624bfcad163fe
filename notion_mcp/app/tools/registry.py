"""Tool registry and response envelope.

A tool is a name, a description, a pydantic input model and an async
handler. ``ToolRegistry.call`` is the only entry point used by the MCP
server: it validates arguments, runs the handler and always returns a
``ToolResult``. Failures never escape a tool invocation.
"""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from notion_mcp.app.core.logging import get_log_context, get_logger

logger = get_logger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


@dataclass
class ToolResult:
    """Uniform tool response envelope.

    Attributes:
        text: JSON-serialized result, or "Error: <message>" on failure
        is_error: True when the invocation failed
    """

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, payload: Any) -> "ToolResult":
        return cls(text=json.dumps(payload, indent=2, ensure_ascii=False, default=str))

    @classmethod
    def error(cls, exc: BaseException) -> "ToolResult":
        message = str(exc) or "An unknown error occurred"
        return cls(text=f"Error: {message}", is_error=True)


@dataclass
class ToolDefinition:
    """A named, schema-described callable operation."""

    name: str
    description: str
    input_model: Type[BaseModel]
    handler: ToolHandler

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema of the tool arguments, using wire (camelCase) names."""
        return self.input_model.model_json_schema(by_alias=True)


class ToolRegistry:
    """Holds tool definitions and dispatches invocations."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDefinition] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(
        self,
        name: str,
        description: str,
        input_model: Type[BaseModel],
        handler: ToolHandler,
    ) -> ToolDefinition:
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        definition = ToolDefinition(name, description, input_model, handler)
        self._tools[name] = definition
        return definition

    def tool(
        self, name: str, description: str, input_model: Type[BaseModel]
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of ``register``."""

        def decorator(func: ToolHandler) -> ToolHandler:
            self.register(name, description, input_model, func)
            return func

        return decorator

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def list_definitions(self) -> List[ToolDefinition]:
        return list(self._tools.values())

    async def call(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> ToolResult:
        """Invoke a tool and wrap the outcome in a ToolResult.

        Args:
            name: Registered tool name
            arguments: Raw arguments as sent by the MCP client

        Returns:
            Success envelope with the JSON result, or an error envelope
        """
        definition = self._tools.get(name)
        if definition is None:
            return ToolResult(text=f"Error: Unknown tool: {name}", is_error=True)

        try:
            params = definition.input_model.model_validate(arguments or {})
            payload = await definition.handler(params)
            result = ToolResult.success(payload)
        except Exception as e:
            logger.warning(
                f"Tool {name} failed: {type(e).__name__}: {e}",
                extra=get_log_context(tool=name),
            )
            return ToolResult.error(e)

        logger.debug(f"Tool {name} succeeded", extra=get_log_context(tool=name))
        return result
