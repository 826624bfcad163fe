"""MCP tool adapter layer for the Notion client."""

from notion_mcp.app.tools.notion_tools import build_registry, register_notion_tools
from notion_mcp.app.tools.registry import ToolDefinition, ToolRegistry, ToolResult

__all__ = [
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "build_registry",
    "register_notion_tools",
]
