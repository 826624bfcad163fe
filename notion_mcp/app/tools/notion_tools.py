"""Notion tool definitions.

Each tool maps one-to-one onto a NotionClient method and shapes the
decoded response for the calling agent.
"""

from typing import Any, Dict

from notion_mcp.app.client.notion import NotionClient
from notion_mcp.app.tools.registry import ToolRegistry
from notion_mcp.app.tools.schemas import (
    AppendBlockChildrenInput,
    CreateDatabaseInput,
    CreatePageInput,
    DeleteBlockInput,
    GetBlockChildrenInput,
    GetBlockInput,
    GetDatabaseInput,
    GetPageInput,
    GetUserInput,
    ListUsersInput,
    QueryDatabaseInput,
    SearchInput,
    UpdatePageInput,
)


def _listing(result: Dict[str, Any], key: str = "results", cursor: bool = True) -> Dict[str, Any]:
    items = result.get("results", [])
    summary: Dict[str, Any] = {"total": len(items), "hasMore": result.get("has_more", False)}
    if cursor:
        summary["nextCursor"] = result.get("next_cursor")
    summary[key] = items
    return summary


def register_notion_tools(registry: ToolRegistry, client: NotionClient) -> ToolRegistry:
    """Register every Notion tool on ``registry`` backed by ``client``."""

    # ============================================================
    # Search
    # ============================================================

    @registry.tool(
        "notion_search",
        "Search across all pages and databases in the workspace.",
        SearchInput,
    )
    async def notion_search(params: SearchInput) -> Dict[str, Any]:
        result = await client.search(
            params.query, params.filter, params.sort, params.start_cursor, params.page_size
        )
        return _listing(result)

    # ============================================================
    # Databases
    # ============================================================

    @registry.tool(
        "notion_get_database", "Get database schema and details.", GetDatabaseInput
    )
    async def notion_get_database(params: GetDatabaseInput) -> Dict[str, Any]:
        return await client.get_database(params.database_id)

    @registry.tool(
        "notion_query_database",
        "Query database entries with optional filters and sorting.",
        QueryDatabaseInput,
    )
    async def notion_query_database(params: QueryDatabaseInput) -> Dict[str, Any]:
        result = await client.query_database(
            params.database_id,
            params.filter,
            params.sorts,
            params.start_cursor,
            params.page_size,
        )
        return _listing(result)

    @registry.tool(
        "notion_create_database",
        "Create a new database inside a page.",
        CreateDatabaseInput,
    )
    async def notion_create_database(params: CreateDatabaseInput) -> Dict[str, Any]:
        result = await client.create_database(
            params.parent_page_id, params.title, params.properties
        )
        return {"success": True, "database": result}

    # ============================================================
    # Pages
    # ============================================================

    @registry.tool(
        "notion_create_page",
        "Create a new page in a database or as a child of another page.",
        CreatePageInput,
    )
    async def notion_create_page(params: CreatePageInput) -> Dict[str, Any]:
        result = await client.create_page(
            params.parent_id, params.parent_type, params.properties, params.children
        )
        return {"success": True, "page": result}

    @registry.tool("notion_get_page", "Get page properties and metadata.", GetPageInput)
    async def notion_get_page(params: GetPageInput) -> Dict[str, Any]:
        return await client.get_page(params.page_id)

    @registry.tool(
        "notion_update_page",
        "Update page properties or archive a page.",
        UpdatePageInput,
    )
    async def notion_update_page(params: UpdatePageInput) -> Dict[str, Any]:
        result = await client.update_page(
            params.page_id, params.properties, params.archived
        )
        return {"success": True, "page": result}

    # ============================================================
    # Blocks
    # ============================================================

    @registry.tool("notion_get_block", "Get a block by ID.", GetBlockInput)
    async def notion_get_block(params: GetBlockInput) -> Dict[str, Any]:
        return await client.get_block(params.block_id)

    @registry.tool(
        "notion_get_block_children",
        "Get child blocks of a block or page.",
        GetBlockChildrenInput,
    )
    async def notion_get_block_children(params: GetBlockChildrenInput) -> Dict[str, Any]:
        result = await client.get_block_children(
            params.block_id, params.start_cursor, params.page_size
        )
        return _listing(result, key="blocks")

    @registry.tool(
        "notion_append_block_children",
        "Append content blocks to a page or block.",
        AppendBlockChildrenInput,
    )
    async def notion_append_block_children(params: AppendBlockChildrenInput) -> Dict[str, Any]:
        result = await client.append_block_children(params.block_id, params.children)
        return {"success": True, "blocks": result.get("results", [])}

    @registry.tool(
        "notion_delete_block", "Delete (archive) a block.", DeleteBlockInput
    )
    async def notion_delete_block(params: DeleteBlockInput) -> Dict[str, Any]:
        result = await client.delete_block(params.block_id)
        return {"success": True, "archived": result.get("archived"), "block": result}

    # ============================================================
    # Users
    # ============================================================

    @registry.tool(
        "notion_list_users", "List all users in the workspace.", ListUsersInput
    )
    async def notion_list_users(params: ListUsersInput) -> Dict[str, Any]:
        result = await client.list_users(params.start_cursor, params.page_size)
        return _listing(result, key="users", cursor=False)

    @registry.tool("notion_get_user", "Get user details by ID.", GetUserInput)
    async def notion_get_user(params: GetUserInput) -> Dict[str, Any]:
        return await client.get_user(params.user_id)

    return registry


def build_registry(client: NotionClient) -> ToolRegistry:
    """Create a registry with all Notion tools registered."""
    return register_notion_tools(ToolRegistry(), client)
