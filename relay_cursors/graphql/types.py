"""GraphQL types for Relay pagination.

Mirrors relay_cursors.core.pagination.schemas.PageInfo as a Strawberry type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

if TYPE_CHECKING:
    from relay_cursors.core.pagination import PageInfo


@strawberry.type(description="Pagination metadata following GraphQL Relay specification")
class PageInfoType:
    """GraphQL Relay PageInfo for cursor-based pagination."""

    has_previous_page: bool = strawberry.field(description="Whether previous items exist")
    has_next_page: bool = strawberry.field(description="Whether more items exist")
    start_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the last item",
    )

    @classmethod
    def from_model(cls, page_info: PageInfo) -> PageInfoType:
        """Build from the pydantic PageInfo returned by a cursor provider."""
        return cls(
            has_previous_page=page_info.has_previous_page,
            has_next_page=page_info.has_next_page,
            start_cursor=page_info.start_cursor,
            end_cursor=page_info.end_cursor,
        )


__all__ = ["PageInfoType"]
