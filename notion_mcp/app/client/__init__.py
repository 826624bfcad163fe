"""Notion API client package.

This package provides:
- Rate-limited Notion client (NotionClient)
- Sliding-window admission control (SlidingWindowRateLimiter)
- Throttling retry policy (ThrottlePolicy)
"""

from notion_mcp.app.client.notion import NotionClient
from notion_mcp.app.client.rate_limit import SlidingWindowRateLimiter
from notion_mcp.app.client.retry import ThrottlePolicy

__all__ = [
    "NotionClient",
    "SlidingWindowRateLimiter",
    "ThrottlePolicy",
]
