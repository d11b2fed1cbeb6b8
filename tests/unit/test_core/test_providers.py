"""Unit tests for cursor providers."""
from __future__ import annotations

import pytest
from pydantic import BaseModel

from relay_cursors.core.exceptions import MalformedTokenError, StrategyMismatchError
from relay_cursors.core.pagination import (
    OFFSET_CURSOR,
    KeyCursor,
    KeyedCursorProvider,
    KeyShape,
    OffsetCursor,
    OffsetCursorProvider,
    PageRequest,
    PaginationMetadata,
    key_cursor_kind,
)


class Location(BaseModel):
    name: str


LOCATIONS = [Location(name=f"Location {i}") for i in range(13)]

LOCATION_CURSOR = key_cursor_kind("LocationCursor", KeyShape.named(("name", str)))


def _page(start: int, first: int) -> list[Location]:
    return LOCATIONS[start : start + first]


# ──────────────────────────────────────────────────────────────
# Test OffsetCursorProvider
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestOffsetCursorProvider:
    """Tests for offset cursor generation and page info."""

    def test_no_request(self):
        """Without a request the page covers everything from offset zero."""
        provider = OffsetCursorProvider()
        items = LOCATIONS[:2]
        metadata = PaginationMetadata(total_count=2)

        page_info = provider.page_info(metadata, items)

        assert page_info.has_previous_page is False
        assert page_info.has_next_page is False
        assert page_info.start_cursor == OffsetCursor(0).encode()
        assert page_info.end_cursor == OffsetCursor(1).encode()

    def test_first_page_with_more(self):
        """A first page shorter than the total should report a next page."""
        provider = OffsetCursorProvider()
        metadata = PaginationMetadata(total_count=13, page_request=PageRequest(first=5))

        page_info = provider.page_info(metadata, _page(0, 5))

        assert page_info.has_previous_page is False
        assert page_info.has_next_page is True
        assert page_info.end_cursor == OffsetCursor(4).encode()

    def test_first_without_after_covering_everything(self):
        """A page reaching the end should not report a next page."""
        provider = OffsetCursorProvider()
        metadata = PaginationMetadata(total_count=5, page_request=PageRequest(first=5))

        assert provider.page_info(metadata, LOCATIONS[:5]).has_next_page is False

    def test_walk_all_pages(self):
        """Following end cursors should visit every item exactly once."""
        provider = OffsetCursorProvider()
        seen: list[int] = []
        after: str | None = None
        pages = 0

        while True:
            request = PageRequest(first=5, after=after)
            metadata = PaginationMetadata(total_count=len(LOCATIONS), page_request=request)
            start = provider.start_offset(metadata)
            items = _page(start, 5)
            page_info = provider.page_info(metadata, items)
            seen.extend(
                provider.cursor_for_item(metadata, index, item).offset
                for index, item in enumerate(items)
            )
            pages += 1
            assert page_info.has_previous_page is (pages > 1)
            if not page_info.has_next_page:
                break
            after = page_info.end_cursor

        assert pages == 3
        assert seen == list(range(13))

    def test_second_page_starts_after_cursor(self):
        """The item after cursor n should sit at offset n + 1."""
        provider = OffsetCursorProvider()
        request = PageRequest.create(5, OffsetCursor(4))
        metadata = PaginationMetadata(total_count=13, page_request=request)

        page_info = provider.page_info(metadata, _page(5, 5))

        assert provider.start_offset(metadata) == 5
        assert page_info.start_cursor == OffsetCursor(5).encode()
        assert page_info.end_cursor == OffsetCursor(9).encode()
        assert page_info.has_previous_page is True
        assert page_info.has_next_page is True

    def test_last_page(self):
        """The last page should report no next page."""
        provider = OffsetCursorProvider()
        request = PageRequest.create(5, OffsetCursor(9))
        metadata = PaginationMetadata(total_count=13, page_request=request)

        page_info = provider.page_info(metadata, _page(10, 5))

        assert page_info.has_next_page is False
        assert page_info.end_cursor == OffsetCursor(12).encode()

    def test_empty_page(self):
        """An empty page should have no boundary cursors."""
        provider = OffsetCursorProvider()
        metadata = PaginationMetadata(total_count=0, page_request=PageRequest(first=5))

        page_info = provider.page_info(metadata, [])

        assert page_info.start_cursor is None
        assert page_info.end_cursor is None
        assert page_info.has_next_page is False

    def test_invalid_after_raises(self):
        """A garbage after token should raise instead of restarting at zero."""
        provider = OffsetCursorProvider()
        metadata = PaginationMetadata(
            total_count=13,
            page_request=PageRequest(first=5, after="not-a-real-token!!"),
        )

        with pytest.raises(MalformedTokenError):
            provider.page_info(metadata, _page(0, 5))

    def test_key_token_as_after_raises(self):
        """A key token passed as an offset after should be a mismatch."""
        provider = OffsetCursorProvider()
        request = PageRequest.create(5, KeyCursor.of("Location 4"))
        metadata = PaginationMetadata(total_count=13, page_request=request)

        with pytest.raises(StrategyMismatchError):
            provider.start_offset(metadata)

    def test_requires_offset_kind(self):
        """An offset provider cannot be built for a keyed kind."""
        with pytest.raises(ValueError):
            OffsetCursorProvider(LOCATION_CURSOR)

    def test_default_kind(self):
        """The provider should default to OFFSET_CURSOR."""
        assert OffsetCursorProvider().kind is OFFSET_CURSOR


# ──────────────────────────────────────────────────────────────
# Test KeyedCursorProvider
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestKeyedCursorProvider:
    """Tests for keyed cursor generation and page info."""

    def test_cursor_from_row(self):
        """Item cursors should come from the named shape fields."""
        provider = KeyedCursorProvider(LOCATION_CURSOR)
        metadata = PaginationMetadata(total_count=13)

        cursor = provider.cursor_for_item(metadata, 0, Location(name="Lumiere"))

        assert cursor == KeyCursor.of("Lumiere")
        assert LOCATION_CURSOR.decode(cursor.encode()) == cursor

    def test_cursor_from_key_fn(self):
        """key_fn should override reading the row."""
        kind = key_cursor_kind("UpperCursor", [str])
        provider = KeyedCursorProvider(kind, key_fn=lambda item: item.name.upper())

        cursor = provider.cursor_for_item(PaginationMetadata(total_count=1), 0, Location(name="a"))

        assert cursor == KeyCursor.of("A")

    def test_first_page(self):
        """Without after there is no previous page; items imply a next page."""
        provider = KeyedCursorProvider(LOCATION_CURSOR)
        metadata = PaginationMetadata(total_count=13, page_request=PageRequest(first=2))
        items = [Location(name="Lumiere"), Location(name="Zelda")]

        page_info = provider.page_info(metadata, items)

        assert page_info.has_previous_page is False
        assert page_info.has_next_page is True
        assert page_info.start_cursor == LOCATION_CURSOR.encode("Lumiere")
        assert page_info.end_cursor == LOCATION_CURSOR.encode("Zelda")

    def test_page_after_cursor(self):
        """A valid after token should imply a previous page."""
        provider = KeyedCursorProvider(LOCATION_CURSOR)
        request = PageRequest(first=2, after=LOCATION_CURSOR.encode("Lumiere"))
        metadata = PaginationMetadata(total_count=13, page_request=request)

        page_info = provider.page_info(metadata, [Location(name="Zelda")])

        assert page_info.has_previous_page is True

    def test_empty_page_is_final(self):
        """Only an empty page should report no next page."""
        provider = KeyedCursorProvider(LOCATION_CURSOR)
        request = PageRequest(first=2, after=LOCATION_CURSOR.encode("Zelda"))
        metadata = PaginationMetadata(total_count=13, page_request=request)

        page_info = provider.page_info(metadata, [])

        assert page_info.has_next_page is False
        assert page_info.start_cursor is None
        assert page_info.end_cursor is None

    def test_offset_after_raises(self):
        """An offset token passed as a keyed after should be a mismatch."""
        provider = KeyedCursorProvider(LOCATION_CURSOR)
        request = PageRequest.create(2, OffsetCursor(3))
        metadata = PaginationMetadata(total_count=13, page_request=request)

        with pytest.raises(StrategyMismatchError):
            provider.page_info(metadata, [])

    def test_requires_keyed_kind(self):
        """A keyed provider cannot be built for an offset kind."""
        with pytest.raises(ValueError):
            KeyedCursorProvider(OFFSET_CURSOR)
