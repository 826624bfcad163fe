"""HTTP client construction for outbound Notion calls."""

from typing import Optional

import httpx

from notion_mcp.app.core.config import Settings, settings as default_settings


def create_http_client(
    settings: Optional[Settings] = None, **kwargs
) -> httpx.AsyncClient:
    """Create a new HTTP client with granular timeouts and pool limits.

    The returned client should be closed when done:
        async with create_http_client() as client:
            ...

    Args:
        settings: Settings to read defaults from (module settings if omitted)
        **kwargs: Override default settings. Can include:
            - timeout: Single timeout value (overrides all granular timeouts)
            - connect_timeout, read_timeout, write_timeout, pool_timeout
            - max_connections, max_keepalive_connections, keepalive_expiry
            - transport: Custom httpx transport (tests)

    Returns:
        A new httpx.AsyncClient instance.
    """
    cfg = settings or default_settings

    timeout_override = kwargs.get("timeout")
    if timeout_override is not None:
        timeout = httpx.Timeout(timeout_override)
    else:
        timeout = httpx.Timeout(
            cfg.httpx_timeout,
            connect=kwargs.get("connect_timeout", cfg.httpx_connect_timeout),
            read=kwargs.get("read_timeout", cfg.httpx_read_timeout),
            write=kwargs.get("write_timeout", cfg.httpx_write_timeout),
            pool=kwargs.get("pool_timeout", cfg.httpx_pool_timeout),
        )

    limits = httpx.Limits(
        max_connections=kwargs.get("max_connections", cfg.httpx_max_connections),
        max_keepalive_connections=kwargs.get(
            "max_keepalive_connections", cfg.httpx_max_keepalive_connections
        ),
        keepalive_expiry=kwargs.get("keepalive_expiry", cfg.httpx_keepalive_expiry),
    )

    config = {"timeout": timeout, "limits": limits}
    if "transport" in kwargs:
        config["transport"] = kwargs["transport"]
    return httpx.AsyncClient(**config)
