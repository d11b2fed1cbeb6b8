"""Pagination request and response schemas.

This module provides two response styles around the same cursors:

1. Relay Connection pattern:
   - Edges pairing each node with its cursor
   - PageInfo with navigation metadata
   - Total count of the underlying result set

2. Simple REST style:
   - Just items, cursors, and a has_more flag

Tokens are carried as plain strings and passed through unmodified.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from relay_cursors.core.pagination.cursor import Cursor, CursorKind
    from relay_cursors.core.pagination.providers import CursorProvider

T = TypeVar("T")


class PageRequest(BaseModel):
    """Relay ``first``/``after`` pagination request.

    Usually built from the arguments of a query resolver and handed on to
    service calls and cursor providers.

    Attributes:
        first: Number of items to return (None for all remaining items)
        after: Token of the item to start after (exclusive)
    """

    first: int | None = Field(
        default=None,
        ge=0,
        description="Number of items to return",
    )
    after: str | None = Field(
        default=None,
        description="Cursor to start pagination from (exclusive)",
    )

    model_config = {"frozen": True}

    @classmethod
    def create(cls, first: int | None = None, after: Cursor | None = None) -> PageRequest:
        """Build a request from a typed cursor.

        Example:
            request = PageRequest.create(10, OffsetCursor(9))
        """
        return cls(first=first, after=after.encode() if after is not None else None)

    def parsed_cursor(self, kind: CursorKind) -> Any:
        """Decode ``after`` as a cursor of ``kind``.

        Returns:
            The decoded cursor, or None when no ``after`` was given.

        Raises:
            CursorError: If ``after`` is not a valid token of ``kind``.
        """
        if self.after is None:
            return None
        return kind.decode(self.after)


class PageInfo(BaseModel):
    """Pagination metadata following the Relay specification.

    Attributes:
        has_previous_page: Whether there are items before the current page
        has_next_page: Whether there are items after the current page
        start_cursor: Cursor of the first item in this page
        end_cursor: Cursor of the last item in this page
    """

    has_previous_page: bool = Field(
        description="Whether previous items exist"
    )
    has_next_page: bool = Field(
        description="Whether more items exist"
    )
    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )


class Edge(BaseModel, Generic[T]):
    """Edge wrapper pairing an item with its cursor.

    Attributes:
        node: The actual data item
        cursor: Cursor for this specific item
    """

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")


class Connection(BaseModel, Generic[T]):
    """Relay connection for cursor pagination.

    Usage:
        connection = Connection[Location].build(
            nodes=page,
            total_count=len(all_locations),
            provider=OffsetCursorProvider(),
            page_request=PageRequest(first=first, after=after),
        )

    Attributes:
        count: Total number of items in the underlying result set
        edges: List of Edge objects containing nodes and cursors
        page_info: Navigation metadata
    """

    count: int = Field(
        ge=0,
        description="Total number of items",
    )
    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(
        description="Pagination metadata",
    )

    @classmethod
    def build(
        cls,
        nodes: Sequence[T],
        total_count: int,
        provider: CursorProvider[T],
        page_request: PageRequest | None = None,
    ) -> Connection[T]:
        """Build a connection, generating every cursor from ``provider``.

        Args:
            nodes: Items of the current page, in order
            total_count: Total number of items across all pages
            provider: Cursor provider for the items
            page_request: The request that produced this page

        Returns:
            Connection with edges and page info filled in
        """
        # Import here to avoid circular imports
        from relay_cursors.core.pagination.providers import PaginationMetadata

        metadata = PaginationMetadata(total_count=total_count, page_request=page_request)
        edges = [
            {
                "node": node,
                "cursor": provider.cursor_for_item(metadata, index, node).encode(),
            }
            for index, node in enumerate(nodes)
        ]
        return cls(
            count=total_count,
            edges=edges,
            page_info=provider.page_info(metadata, nodes),
        )

    @property
    def nodes(self) -> list[T]:
        """Get just the nodes without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to simple REST-style pagination."""
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.count,
        )


class CursorPage(BaseModel, Generic[T]):
    """Simple REST-style cursor pagination response.

    Attributes:
        items: List of data items
        next_cursor: Cursor for the next page (None if no more)
        prev_cursor: Cursor for the previous page (None if at start)
        has_more: Whether more items exist after this page
        total_count: Total count (optional)
    """

    items: list[T] = Field(
        default_factory=list,
        description="List of items",
    )
    next_cursor: str | None = Field(
        default=None,
        description="Cursor to fetch next page",
    )
    prev_cursor: str | None = Field(
        default=None,
        description="Cursor to fetch previous page",
    )
    has_more: bool = Field(
        default=False,
        description="Whether more items exist",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count (optional)",
    )


__all__ = [
    "Connection",
    "CursorPage",
    "Edge",
    "PageInfo",
    "PageRequest",
]
