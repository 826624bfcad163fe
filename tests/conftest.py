"""Shared fixtures for the Notion MCP test suite."""

import asyncio
import logging
from typing import List

import pytest

from notion_mcp.app.client.rate_limit import SlidingWindowRateLimiter
from notion_mcp.app.core.config import Settings

BASE_URL = "https://api.notion.com/v1"


class FakeClock:
    """Virtual monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        # Let other coroutines run, as a real sleep would
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep a developer's .env and shell credentials out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NOTION_API_KEY", raising=False)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, notion_api_key="secret-token")


@pytest.fixture
def unlimited_limiter() -> SlidingWindowRateLimiter:
    """Limiter that never makes the caller wait."""
    return SlidingWindowRateLimiter(max_requests=10_000, window_seconds=1.0)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    yield
    logger = logging.getLogger("notion_mcp")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
