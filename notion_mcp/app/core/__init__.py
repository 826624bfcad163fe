"""Core utilities for the Notion MCP server."""

from notion_mcp.app.core.config import Settings, settings
from notion_mcp.app.core.http_client import create_http_client
from notion_mcp.app.core.logging import get_log_context, get_logger, setup_logging

__all__ = [
    "Settings",
    "settings",
    "create_http_client",
    "get_logger",
    "get_log_context",
    "setup_logging",
]
