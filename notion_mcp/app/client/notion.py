"""Notion API client with outbound rate limiting and 429 retry.

Reads the integration token from the NOTION_API_KEY environment variable.
Every attempt (including retries) passes through the sliding-window
limiter first; throttled responses are retried after the server-supplied
Retry-After delay.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from notion_mcp.app.client.models import (
    NotionBlock,
    NotionBlockChildren,
    NotionDatabase,
    NotionPage,
    NotionQueryResult,
    NotionSearchResult,
    NotionUser,
    NotionUserList,
)
from notion_mcp.app.client.rate_limit import SlidingWindowRateLimiter
from notion_mcp.app.client.retry import ThrottlePolicy
from notion_mcp.app.core.config import Settings
from notion_mcp.app.core.http_client import create_http_client
from notion_mcp.app.core.logging import get_log_context, get_logger
from notion_mcp.app.exceptions import (
    ConfigurationError,
    NotionAPIError,
    ThrottleRetriesExhaustedError,
)

logger = get_logger(__name__)

# Methods that may carry a JSON body
_BODY_METHODS = frozenset(("POST", "PATCH"))


def _compact(**fields: Any) -> Dict[str, Any]:
    """Drop arguments that were not provided (None)."""
    return {k: v for k, v in fields.items() if v is not None}


class NotionClient:
    """Async client for the Notion REST API.

    If http_client is provided it is used for all requests and the caller
    owns its lifecycle. Otherwise the client creates one and closes it in
    ``aclose()``.

    Args:
        settings: Settings instance; a fresh one is read from the
            environment when omitted
        http_client: Optional shared httpx.AsyncClient
        rate_limiter: Optional admission controller (built from settings
            when omitted)
        throttle_policy: Optional 429 policy (built from settings when
            omitted)
        sleep: Coroutine used for the 429 backoff wait

    Raises:
        ConfigurationError: If NOTION_API_KEY is not set
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        throttle_policy: Optional[ThrottlePolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or Settings()
        api_key = self.settings.notion_api_key.strip()
        if not api_key:
            raise ConfigurationError(
                "NOTION_API_KEY environment variable is not set. "
                "Create an integration at https://www.notion.so/my-integrations"
            )
        self._api_key = api_key
        self.base_url = self.settings.notion_base_url.rstrip("/")
        self.headers = self._build_headers()

        self.rate_limiter = rate_limiter or SlidingWindowRateLimiter(
            max_requests=self.settings.rate_limit_max_requests,
            window_seconds=self.settings.rate_limit_window_seconds,
            margin_seconds=self.settings.rate_limit_margin_seconds,
        )
        self.throttle_policy = throttle_policy or ThrottlePolicy(
            default_delay=self.settings.throttle_default_retry_after,
            max_retries=self.settings.throttle_max_retries,
        )
        self._sleep = sleep

        self._owns_http_client = http_client is None
        self._http_client = http_client or create_http_client(self.settings)

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Notion-Version": self.settings.notion_version,
        }

    def _get_endpoint_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _send(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]],
        params: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        """Admit, then issue one HTTP attempt."""
        await self.rate_limiter.acquire()

        request_kwargs: Dict[str, Any] = {"headers": self.headers}
        if body is not None and method in _BODY_METHODS:
            request_kwargs["json"] = body
        if params:
            request_kwargs["params"] = params

        started = time.perf_counter()
        response = await self._http_client.request(
            method, self._get_endpoint_url(path), **request_kwargs
        )
        logger.debug(
            f"{method} {path} -> {response.status_code}",
            extra=get_log_context(
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            ),
        )
        return response

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request, retrying while Notion answers 429.

        Returns:
            The decoded JSON response

        Raises:
            NotionAPIError: If the API returns any other non-success status
            ThrottleRetriesExhaustedError: If a retry cap is configured and hit
            httpx.HTTPError: On transport failures
        """
        retries = 0
        while True:
            response = await self._send(method, path, body, params)

            if response.status_code != 429:
                break

            if self.throttle_policy.exhausted(retries):
                logger.warning(
                    f"Giving up on {method} {path} after {retries} throttled retries",
                    extra=get_log_context(
                        method=method, path=path, status_code=429, attempt=retries
                    ),
                )
                raise ThrottleRetriesExhaustedError(
                    retries, response.reason_phrase, _read_body(response)
                )

            delay = self.throttle_policy.parse_retry_after(
                response.headers.get("Retry-After")
            )
            retries += 1
            logger.warning(
                f"Throttled by Notion on {method} {path}, "
                f"retry {retries} in {delay:.2f}s",
                extra=get_log_context(
                    method=method,
                    path=path,
                    status_code=429,
                    attempt=retries,
                    wait_seconds=delay,
                ),
            )
            await self._sleep(delay)

        if not response.is_success:
            error = NotionAPIError(
                response.status_code, response.reason_phrase, _read_body(response)
            )
            logger.warning(
                str(error),
                extra=get_log_context(
                    method=method, path=path, status_code=response.status_code
                ),
            )
            raise error

        return response.json()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(
        self,
        query: Optional[str] = None,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[Dict[str, Any]] = None,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> NotionSearchResult:
        """Search pages and databases shared with the integration."""
        body = _compact(
            query=query,
            filter=filter,
            sort=sort,
            start_cursor=start_cursor,
            page_size=page_size,
        )
        return await self._request("POST", "/search", body)

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------

    async def get_database(self, database_id: str) -> NotionDatabase:
        return await self._request("GET", f"/databases/{database_id}")

    async def query_database(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> NotionQueryResult:
        body = _compact(
            filter=filter, sorts=sorts, start_cursor=start_cursor, page_size=page_size
        )
        return await self._request("POST", f"/databases/{database_id}/query", body)

    async def create_database(
        self,
        parent_page_id: str,
        title: str,
        properties: Dict[str, Any],
    ) -> NotionDatabase:
        """Create a database as a child of an existing page."""
        body = {
            "parent": {"type": "page_id", "page_id": parent_page_id},
            "title": [{"type": "text", "text": {"content": title}}],
            "properties": properties,
        }
        return await self._request("POST", "/databases", body)

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    async def create_page(
        self,
        parent_id: str,
        parent_type: str,
        properties: Dict[str, Any],
        children: Optional[List[Dict[str, Any]]] = None,
    ) -> NotionPage:
        """Create a page under a database (database_id) or page (page_id)."""
        body: Dict[str, Any] = {
            "parent": {"type": parent_type, parent_type: parent_id},
            "properties": properties,
        }
        if children is not None:
            body["children"] = children
        return await self._request("POST", "/pages", body)

    async def get_page(self, page_id: str) -> NotionPage:
        return await self._request("GET", f"/pages/{page_id}")

    async def update_page(
        self,
        page_id: str,
        properties: Optional[Dict[str, Any]] = None,
        archived: Optional[bool] = None,
    ) -> NotionPage:
        body = _compact(properties=properties, archived=archived)
        return await self._request("PATCH", f"/pages/{page_id}", body)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    async def get_block(self, block_id: str) -> NotionBlock:
        return await self._request("GET", f"/blocks/{block_id}")

    async def get_block_children(
        self,
        block_id: str,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> NotionBlockChildren:
        params = _compact(start_cursor=start_cursor, page_size=page_size)
        return await self._request(
            "GET", f"/blocks/{block_id}/children", params=params
        )

    async def append_block_children(
        self,
        block_id: str,
        children: List[Dict[str, Any]],
    ) -> NotionBlockChildren:
        return await self._request(
            "PATCH", f"/blocks/{block_id}/children", {"children": children}
        )

    async def delete_block(self, block_id: str) -> NotionBlock:
        """Archive a block (Notion moves it to the trash)."""
        return await self._request("DELETE", f"/blocks/{block_id}")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_users(
        self,
        start_cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> NotionUserList:
        params = _compact(start_cursor=start_cursor, page_size=page_size)
        return await self._request("GET", "/users", params=params)

    async def get_user(self, user_id: str) -> NotionUser:
        return await self._request("GET", f"/users/{user_id}")


def _read_body(response: httpx.Response) -> str:
    """Best-effort response text; unreadable bodies count as empty."""
    try:
        return response.text
    except (httpx.StreamError, UnicodeDecodeError, LookupError):
        return ""
