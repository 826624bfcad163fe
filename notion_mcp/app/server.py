"""MCP server exposing the Notion tool registry."""

from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from notion_mcp.app.core.logging import get_logger
from notion_mcp.app.tools.registry import ToolRegistry, ToolResult

logger = get_logger(__name__)


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    """Convert a ToolResult envelope to the MCP wire type."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server(registry: ToolRegistry, name: str = "notion") -> Server:
    """Create an MCP server whose tools are served from ``registry``.

    Arguments are validated by the registry's pydantic models, so the SDK's
    own JSON Schema validation is turned off to keep one error envelope.
    """
    server: Server = Server(name)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.input_schema(),
            )
            for definition in registry.list_definitions()
        ]

    @server.call_tool(validate_input=False)
    async def call_tool(
        name: str, arguments: Optional[Dict[str, Any]]
    ) -> types.CallToolResult:
        result = await registry.call(name, arguments)
        return to_call_tool_result(result)

    return server


async def run_stdio(server: Server) -> None:
    """Serve ``server`` over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Notion MCP server running on stdio")
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )
