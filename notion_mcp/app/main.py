"""Command-line entry point for the Notion MCP server."""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from notion_mcp.app.client.notion import NotionClient
from notion_mcp.app.core.config import Settings
from notion_mcp.app.core.logging import get_logger, setup_logging
from notion_mcp.app.exceptions import ConfigurationError
from notion_mcp.app.server import create_server, run_stdio
from notion_mcp.app.tools.notion_tools import build_registry


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="notion-mcp",
        description="Expose a Notion workspace as MCP tools over stdio.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "structured", "json"],
        default=None,
        help="Log output format (default: LOG_FORMAT or text)",
    )
    return parser.parse_args(argv)


async def serve(client: NotionClient, settings: Settings) -> None:
    """Run the MCP server until stdin closes, then release the client."""
    logger = get_logger(__name__)
    registry = build_registry(client)
    server = create_server(registry, name=settings.server_name)
    logger.info(f"Registered {len(registry)} Notion tools")
    try:
        await run_stdio(server)
    finally:
        await client.aclose()
        logger.info("Notion MCP server stopped")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_format)
    logger = get_logger(__name__)

    settings = Settings()
    try:
        client = NotionClient(settings=settings)
    except ConfigurationError as e:
        logger.error(f"Cannot start Notion MCP server: {e}")
        return 1

    try:
        asyncio.run(serve(client, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
