"""Tests for the rate-limited Notion client."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from notion_mcp.app.client.notion import NotionClient
from notion_mcp.app.client.rate_limit import SlidingWindowRateLimiter
from notion_mcp.app.client.retry import ThrottlePolicy
from notion_mcp.app.core.config import Settings
from notion_mcp.app.exceptions import (
    ConfigurationError,
    NotionAPIError,
    ThrottleRetriesExhaustedError,
)

BASE_URL = "https://api.notion.com/v1"


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def client(settings, unlimited_limiter, sleep):
    return NotionClient(settings=settings, rate_limiter=unlimited_limiter, sleep=sleep)


def _body(request: httpx.Request):
    return json.loads(request.content)


class TestConstruction:
    """Test credential handling at construction."""

    def test_missing_credential_raises_before_any_request(self):
        """Test construction fails immediately without NOTION_API_KEY."""
        with respx.mock(assert_all_called=False) as mock, patch(
            "notion_mcp.app.client.notion.create_http_client"
        ) as create_client:
            with pytest.raises(ConfigurationError, match="NOTION_API_KEY"):
                NotionClient()

        create_client.assert_not_called()
        assert len(mock.calls) == 0

    def test_blank_credential_is_treated_as_missing(self):
        with pytest.raises(ConfigurationError):
            NotionClient(settings=Settings(_env_file=None, notion_api_key="   "))

    def test_reads_credential_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "env-token")

        client = NotionClient()

        assert client.headers["Authorization"] == "Bearer env-token"

    def test_rate_limiter_built_from_settings(self):
        settings = Settings(
            _env_file=None,
            notion_api_key="k",
            rate_limit_max_requests=5,
            rate_limit_window_seconds=2.0,
        )

        client = NotionClient(settings=settings)

        assert client.rate_limiter.max_requests == 5
        assert client.rate_limiter.window_seconds == 2.0
        assert client.throttle_policy.max_retries is None


class TestRequestExecution:
    """Test URL, headers and body assembly."""

    @pytest.mark.asyncio
    async def test_sends_auth_version_and_content_type_headers(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/users/u1").mock(
                return_value=httpx.Response(200, json={"object": "user", "id": "u1"})
            )
            await client.get_user("u1")

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Notion-Version"] == "2022-06-28"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_get_sends_no_body(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/pages/p1").mock(
                return_value=httpx.Response(200, json={"object": "page", "id": "p1"})
            )
            await client.get_page("p1")

        assert route.calls.last.request.content == b""

    @pytest.mark.asyncio
    async def test_success_returns_payload_verbatim(self, client):
        payload = {"object": "database", "id": "db1", "properties": {"Name": {"title": {}}}}
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/databases/db1").mock(return_value=httpx.Response(200, json=payload))
            result = await client.get_database("db1")

        assert result == payload

    @pytest.mark.asyncio
    async def test_ids_forwarded_verbatim(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/blocks/abc-123_XYZ").mock(
                return_value=httpx.Response(200, json={"object": "block"})
            )
            await client.get_block("abc-123_XYZ")

        assert route.called

    @pytest.mark.asyncio
    async def test_every_attempt_goes_through_limiter(self, settings, sleep):
        limiter = AsyncMock(spec=SlidingWindowRateLimiter)
        client = NotionClient(settings=settings, rate_limiter=limiter, sleep=sleep)
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/users").mock(
                side_effect=[
                    httpx.Response(429),
                    httpx.Response(200, json={"results": []}),
                ]
            )
            await client.list_users()

        assert limiter.acquire.await_count == 2


class TestOptionalFields:
    """Test that omitted arguments are omitted on the wire."""

    @pytest.mark.asyncio
    async def test_search_with_only_query(self, client):
        """Test search body contains solely the query."""
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/search").mock(
                return_value=httpx.Response(200, json={"results": [], "has_more": False})
            )
            await client.search("roadmap")

        assert _body(route.calls.last.request) == {"query": "roadmap"}

    @pytest.mark.asyncio
    async def test_search_with_all_fields(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/search").mock(
                return_value=httpx.Response(200, json={"results": []})
            )
            await client.search(
                "q",
                filter={"property": "object", "value": "page"},
                sort={"direction": "descending", "timestamp": "last_edited_time"},
                start_cursor="cur",
                page_size=10,
            )

        assert _body(route.calls.last.request) == {
            "query": "q",
            "filter": {"property": "object", "value": "page"},
            "sort": {"direction": "descending", "timestamp": "last_edited_time"},
            "start_cursor": "cur",
            "page_size": 10,
        }

    @pytest.mark.asyncio
    async def test_query_database_body(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/databases/db1/query").mock(
                return_value=httpx.Response(200, json={"results": []})
            )
            await client.query_database("db1", sorts=[{"property": "Name", "direction": "ascending"}])

        assert _body(route.calls.last.request) == {
            "sorts": [{"property": "Name", "direction": "ascending"}]
        }

    @pytest.mark.asyncio
    async def test_update_page_sends_explicit_false(self, client):
        """Test archived=False is sent because it was provided."""
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.patch("/pages/p1").mock(
                return_value=httpx.Response(200, json={"id": "p1", "archived": False})
            )
            await client.update_page("p1", archived=False)

        assert _body(route.calls.last.request) == {"archived": False}

    @pytest.mark.asyncio
    async def test_block_children_query_params(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/blocks/b1/children").mock(
                return_value=httpx.Response(200, json={"results": []})
            )
            await client.get_block_children("b1", start_cursor="cur", page_size=50)

        params = route.calls.last.request.url.params
        assert params["start_cursor"] == "cur"
        assert params["page_size"] == "50"

    @pytest.mark.asyncio
    async def test_list_users_without_params_has_no_query(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/users").mock(
                return_value=httpx.Response(200, json={"results": []})
            )
            await client.list_users()

        assert route.calls.last.request.url.query == b""


class TestMutations:
    """Test body construction of mutating operations."""

    @pytest.mark.asyncio
    async def test_create_database_body(self, client):
        properties = {"Name": {"title": {}}}
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/databases").mock(
                return_value=httpx.Response(200, json={"object": "database", "id": "db2"})
            )
            await client.create_database("page-1", "Tasks", properties)

        assert _body(route.calls.last.request) == {
            "parent": {"type": "page_id", "page_id": "page-1"},
            "title": [{"type": "text", "text": {"content": "Tasks"}}],
            "properties": properties,
        }

    @pytest.mark.asyncio
    async def test_create_page_in_database(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/pages").mock(
                return_value=httpx.Response(200, json={"object": "page", "id": "p2"})
            )
            await client.create_page("db1", "database_id", {"Name": {"title": []}})

        assert _body(route.calls.last.request) == {
            "parent": {"type": "database_id", "database_id": "db1"},
            "properties": {"Name": {"title": []}},
        }

    @pytest.mark.asyncio
    async def test_create_page_with_children(self, client):
        children = [{"object": "block", "type": "paragraph", "paragraph": {"rich_text": []}}]
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/pages").mock(
                return_value=httpx.Response(200, json={"object": "page"})
            )
            await client.create_page("p1", "page_id", {}, children)

        assert _body(route.calls.last.request)["children"] == children

    @pytest.mark.asyncio
    async def test_append_block_children(self, client):
        children = [{"type": "divider", "divider": {}}]
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.patch("/blocks/b1/children").mock(
                return_value=httpx.Response(200, json={"results": children})
            )
            await client.append_block_children("b1", children)

        assert _body(route.calls.last.request) == {"children": children}

    @pytest.mark.asyncio
    async def test_delete_block_uses_delete_without_body(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.delete("/blocks/b1").mock(
                return_value=httpx.Response(200, json={"id": "b1", "archived": True})
            )
            result = await client.delete_block("b1")

        assert route.calls.last.request.content == b""
        assert result["archived"] is True


class TestThrottling:
    """Test 429 handling."""

    @pytest.mark.asyncio
    async def test_retries_after_server_supplied_delay(self, client, sleep):
        """Test a 429 with Retry-After: 2 waits 2s and then returns the 200 payload."""
        payload = {"object": "list", "results": [{"id": "x"}], "has_more": False}
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/search").mock(
                side_effect=[
                    httpx.Response(429, headers={"Retry-After": "2"}),
                    httpx.Response(200, json=payload),
                ]
            )
            result = await client.search("q")

        assert result == payload
        assert route.call_count == 2
        sleep.assert_awaited_once_with(2.0)

    @pytest.mark.asyncio
    async def test_default_delay_without_retry_after(self, client, sleep):
        """Test a 429 without Retry-After waits 1 second."""
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/pages/p1").mock(
                side_effect=[
                    httpx.Response(429),
                    httpx.Response(200, json={"id": "p1"}),
                ]
            )
            await client.get_page("p1")

        sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_retry_resends_identical_request(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/databases/db1/query").mock(
                side_effect=[
                    httpx.Response(429, headers={"Retry-After": "0"}),
                    httpx.Response(200, json={"results": []}),
                ]
            )
            await client.query_database("db1", filter={"property": "Done"}, page_size=5)

        first, second = (call.request for call in route.calls)
        assert first.method == second.method == "POST"
        assert first.url == second.url
        assert first.content == second.content

    @pytest.mark.asyncio
    async def test_uncapped_retries_keep_going(self, client, sleep):
        responses = [
            httpx.Response(429, headers={"Retry-After": "0.1"}) for _ in range(25)
        ]
        responses.append(httpx.Response(200, json={"id": "u1"}))
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/users/u1").mock(side_effect=responses)
            result = await client.get_user("u1")

        assert result == {"id": "u1"}
        assert route.call_count == 26
        assert sleep.await_count == 25

    @pytest.mark.asyncio
    async def test_capped_retries_raise(self, settings, unlimited_limiter, sleep):
        client = NotionClient(
            settings=settings,
            rate_limiter=unlimited_limiter,
            throttle_policy=ThrottlePolicy(max_retries=2),
            sleep=sleep,
        )
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/users").mock(
                return_value=httpx.Response(429, text="rate_limited")
            )
            with pytest.raises(ThrottleRetriesExhaustedError) as exc_info:
                await client.list_users()

        assert route.call_count == 3
        assert exc_info.value.status_code == 429
        assert exc_info.value.retries == 2
        assert "rate_limited" in str(exc_info.value)


class TestErrors:
    """Test non-429 failures."""

    @pytest.mark.asyncio
    async def test_non_success_raises_with_status_and_body(self, client, sleep):
        """Test a 404 surfaces status and body and is not retried."""
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/pages/missing").mock(
                return_value=httpx.Response(404, text="not_found")
            )
            with pytest.raises(NotionAPIError) as exc_info:
                await client.get_page("missing")

        error = exc_info.value
        assert "404" in str(error)
        assert "not_found" in str(error)
        assert error.status_code == 404
        assert error.status_text == "Not Found"
        assert error.body == "not_found"
        assert route.call_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_server_error_not_retried(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/search").mock(return_value=httpx.Response(503, text=""))
            with pytest.raises(NotionAPIError, match=r"503 Service Unavailable"):
                await client.search()

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/users").mock(side_effect=httpx.ConnectError("connection refused"))
            with pytest.raises(httpx.ConnectError, match="connection refused"):
                await client.list_users()

    @pytest.mark.asyncio
    async def test_undecodable_body_propagates(self, client):
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/users/u1").mock(return_value=httpx.Response(200, text="<html>"))
            with pytest.raises(ValueError):
                await client.get_user("u1")


class TestLifecycle:
    """Test HTTP client ownership."""

    @pytest.mark.asyncio
    async def test_closes_owned_client(self, settings):
        async with NotionClient(settings=settings) as client:
            http_client = client._http_client

        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_leaves_shared_client_open(self, settings):
        shared = httpx.AsyncClient()
        try:
            async with NotionClient(settings=settings, http_client=shared):
                pass
            assert not shared.is_closed
        finally:
            await shared.aclose()
