"""Response shapes returned by the Notion API.

The client hands decoded JSON back untouched; these TypedDicts only
describe the fields callers rely on.
"""

from typing import Any, Dict, List, Optional, TypedDict


class NotionList(TypedDict):
    object: str
    results: List[Dict[str, Any]]
    has_more: bool
    next_cursor: Optional[str]


class NotionSearchResult(NotionList):
    pass


class NotionQueryResult(NotionList):
    pass


class NotionDatabase(TypedDict):
    object: str
    id: str
    title: List[Dict[str, Any]]
    properties: Dict[str, Any]
    created_time: str
    last_edited_time: str


class NotionPage(TypedDict):
    object: str
    id: str
    properties: Dict[str, Any]
    created_time: str
    last_edited_time: str
    archived: bool


class NotionBlock(TypedDict):
    object: str
    id: str
    type: str
    created_time: str
    last_edited_time: str
    has_children: bool
    archived: bool


class NotionBlockChildren(TypedDict):
    object: str
    results: List[NotionBlock]
    has_more: bool
    next_cursor: Optional[str]


class NotionUser(TypedDict):
    object: str
    id: str
    type: str
    name: str
    avatar_url: Optional[str]


class NotionUserList(TypedDict):
    object: str
    results: List[NotionUser]
    has_more: bool
    next_cursor: Optional[str]
