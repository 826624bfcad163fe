"""Input models for the Notion MCP tools.

Field names on the wire are camelCase; Python attributes are snake_case.
Filters, sorts, properties and block children are forwarded to Notion
as-is and are only checked for being objects/arrays.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

PAGE_SIZE_DESCRIPTION = "Number of results per page (max 100)"


class ToolInput(BaseModel):
    """Base for tool inputs: camelCase aliases, unknown fields dropped."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ============================================================
# Search
# ============================================================

class SearchInput(ToolInput):
    query: Optional[str] = Field(default=None, description="Search query text")
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Filter object, e.g. { property: 'object', value: 'page' }",
    )
    sort: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Sort object, e.g. { direction: 'descending', timestamp: 'last_edited_time' }",
    )
    start_cursor: Optional[str] = Field(
        default=None,
        alias="startCursor",
        description="Pagination cursor from previous response",
    )
    page_size: Optional[int] = Field(
        default=None, alias="pageSize", description=PAGE_SIZE_DESCRIPTION
    )


# ============================================================
# Databases
# ============================================================

class GetDatabaseInput(ToolInput):
    database_id: str = Field(alias="databaseId", description="Notion database ID")


class QueryDatabaseInput(ToolInput):
    database_id: str = Field(
        alias="databaseId", description="Notion database ID to query"
    )
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Notion filter object for querying database entries",
    )
    sorts: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Array of sort objects, e.g. [{ property: 'Name', direction: 'ascending' }]",
    )
    start_cursor: Optional[str] = Field(
        default=None,
        alias="startCursor",
        description="Pagination cursor from previous response",
    )
    page_size: Optional[int] = Field(
        default=None, alias="pageSize", description=PAGE_SIZE_DESCRIPTION
    )


class CreateDatabaseInput(ToolInput):
    parent_page_id: str = Field(
        alias="parentPageId",
        description="Parent page ID where the database will be created",
    )
    title: str = Field(description="Database title")
    properties: Dict[str, Any] = Field(
        description="Database property schema, e.g. { 'Name': { title: {} }, 'Tags': { multi_select: { options: [] } } }",
    )


# ============================================================
# Pages
# ============================================================

class CreatePageInput(ToolInput):
    parent_id: str = Field(
        alias="parentId", description="Parent ID (database ID or page ID)"
    )
    parent_type: str = Field(
        alias="parentType", description="Parent type: 'database_id' or 'page_id'"
    )
    properties: Dict[str, Any] = Field(
        description="Page properties matching the parent database schema"
    )
    children: Optional[List[Dict[str, Any]]] = Field(
        default=None, description="Array of block objects for page content"
    )


class GetPageInput(ToolInput):
    page_id: str = Field(alias="pageId", description="Notion page ID")


class UpdatePageInput(ToolInput):
    page_id: str = Field(alias="pageId", description="Page ID to update")
    properties: Optional[Dict[str, Any]] = Field(
        default=None, description="Updated page properties"
    )
    archived: Optional[bool] = Field(
        default=None, description="Set to true to archive (delete) the page"
    )


# ============================================================
# Blocks
# ============================================================

class GetBlockInput(ToolInput):
    block_id: str = Field(alias="blockId", description="Notion block ID")


class GetBlockChildrenInput(ToolInput):
    block_id: str = Field(
        alias="blockId", description="Parent block ID to get children from"
    )
    start_cursor: Optional[str] = Field(
        default=None, alias="startCursor", description="Pagination cursor"
    )
    page_size: Optional[int] = Field(
        default=None, alias="pageSize", description=PAGE_SIZE_DESCRIPTION
    )


class AppendBlockChildrenInput(ToolInput):
    block_id: str = Field(
        alias="blockId", description="Parent block ID to append children to"
    )
    children: List[Dict[str, Any]] = Field(
        description="Array of block objects to append"
    )


class DeleteBlockInput(ToolInput):
    block_id: str = Field(
        alias="blockId", description="Block ID to delete (archive)"
    )


# ============================================================
# Users
# ============================================================

class ListUsersInput(ToolInput):
    start_cursor: Optional[str] = Field(
        default=None, alias="startCursor", description="Pagination cursor"
    )
    page_size: Optional[int] = Field(
        default=None, alias="pageSize", description=PAGE_SIZE_DESCRIPTION
    )


class GetUserInput(ToolInput):
    user_id: str = Field(alias="userId", description="Notion user ID")
