"""Cursor providers.

A cursor provider derives the cursor of every item in a page, and the page's
``PageInfo``, so resolvers do not have to build them by hand.

- ``OffsetCursorProvider``: items are positions in a stable sequence.
- ``KeyedCursorProvider``: items carry their own sort key, as in DynamoDB or
  other NoSQL stores that hand back opaque continuation keys.

Offset cursors are prone to off-by-one errors: ``after`` means *after*, so
the first item of a page that follows cursor ``n`` sits at offset ``n + 1``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from relay_cursors.core.pagination.cursor import (
    OFFSET_CURSOR,
    Cursor,
    CursorKind,
    KeyCursor,
    OffsetCursor,
)
from relay_cursors.core.pagination.schemas import PageInfo, PageRequest
from relay_cursors.core.pagination.token import StrategyTag

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationMetadata:
    """What a provider knows about the result set it builds cursors for.

    Attributes:
        total_count: Total number of items in the result set.
        page_request: The request that produced the page, if any.
    """

    total_count: int
    page_request: PageRequest | None = None


class CursorProvider(ABC, Generic[T]):
    """Generates cursors and page info for a page of items."""

    @abstractmethod
    def cursor_for_item(self, metadata: PaginationMetadata, index: int, item: T) -> Cursor:
        """Build the cursor for the item at ``index`` within the page."""

    @abstractmethod
    def page_info(self, metadata: PaginationMetadata, items: Sequence[T]) -> PageInfo:
        """Build the ``PageInfo`` for the page."""

    def _boundary_cursors(
        self,
        metadata: PaginationMetadata,
        items: Sequence[T],
    ) -> tuple[str | None, str | None]:
        if not items:
            return None, None
        last = len(items) - 1
        return (
            self.cursor_for_item(metadata, 0, items[0]).encode(),
            self.cursor_for_item(metadata, last, items[last]).encode(),
        )


class OffsetCursorProvider(CursorProvider[Any]):
    """Cursor provider for offset pagination.

    Item cursors count from the item after ``after`` (or from zero on the
    first page). A page has a next page when ``first`` was requested and
    the page ends before ``total_count``.

    Invalid ``after`` tokens raise the codec error; they are never treated
    as the first page.
    """

    def __init__(self, kind: CursorKind = OFFSET_CURSOR) -> None:
        if kind.strategy is not StrategyTag.OFFSET:
            msg = f"OffsetCursorProvider needs an offset cursor kind, got {kind.name!r}"
            raise ValueError(msg)
        self.kind = kind

    def start_offset(self, metadata: PaginationMetadata) -> int:
        """Offset of the first item in the page."""
        if metadata.page_request is None:
            return 0
        after = metadata.page_request.parsed_cursor(self.kind)
        return 0 if after is None else after.offset + 1

    def cursor_for_item(self, metadata: PaginationMetadata, index: int, item: Any) -> OffsetCursor:
        return OffsetCursor(self.start_offset(metadata) + index)

    def page_info(self, metadata: PaginationMetadata, items: Sequence[Any]) -> PageInfo:
        start = self.start_offset(metadata)
        request = metadata.page_request

        # no `first` means the whole remaining result set was requested
        has_next_page = (
            request is not None
            and request.first is not None
            and start + request.first < metadata.total_count
        )
        start_cursor, end_cursor = self._boundary_cursors(metadata, items)

        logger.debug(
            "Built offset page info",
            extra={"start_offset": start, "page_size": len(items), "total_count": metadata.total_count},
        )
        return PageInfo(
            has_previous_page=start > 0,
            has_next_page=has_next_page,
            start_cursor=start_cursor,
            end_cursor=end_cursor,
        )


class KeyedCursorProvider(CursorProvider[T]):
    """Cursor provider for keyed (NoSQL-style) pagination.

    Each item's cursor is its own sort key, read with ``key_fn`` or, when
    omitted, from the kind's named key shape.

    If an ``after`` was provided, there is assumed to be a previous page.
    If any items were returned, there is assumed to be a next page: only an
    empty page is final, as with opaque continuation keys from web-scale
    stores. Frontends that expect the last page to report
    ``has_next_page=False`` need to account for this.
    """

    def __init__(
        self,
        kind: CursorKind,
        key_fn: Callable[[T], Any] | None = None,
    ) -> None:
        if kind.strategy is not StrategyTag.BY_KEY:
            msg = f"KeyedCursorProvider needs a keyed cursor kind, got {kind.name!r}"
            raise ValueError(msg)
        self.kind = kind
        self.key_fn = key_fn

    def cursor_for_item(self, metadata: PaginationMetadata, index: int, item: T) -> KeyCursor:
        if self.key_fn is not None:
            return self.kind.cursor(self.key_fn(item))
        return self.kind.from_row(item)

    def page_info(self, metadata: PaginationMetadata, items: Sequence[T]) -> PageInfo:
        request = metadata.page_request
        has_previous_page = (
            request is not None and request.parsed_cursor(self.kind) is not None
        )
        start_cursor, end_cursor = self._boundary_cursors(metadata, items)
        return PageInfo(
            has_previous_page=has_previous_page,
            has_next_page=bool(items),
            start_cursor=start_cursor,
            end_cursor=end_cursor,
        )


__all__ = [
    "CursorProvider",
    "KeyedCursorProvider",
    "OffsetCursorProvider",
    "PaginationMetadata",
]
