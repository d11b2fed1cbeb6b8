"""Opaque, versioned cursors for Relay-style pagination.

Cursors encode a position in a result set as an opaque, URL-safe token:

- Offset cursors: a zero-based position in a stably ordered sequence
- Key cursors: one or more sort-key values, for stores with no stable offset

Tokens carry their strategy, so a cursor issued by an offset field is never
accepted by a keyed field (and vice versa):

    ITEM_CURSOR = key_cursor_kind("ItemCursor", KeyShape.of(str, date))

    token = ITEM_CURSOR.encode(("user_8f3a", date(2024, 1, 5)))
    ITEM_CURSOR.decode(token)      # KeyCursor(values=("user_8f3a", ...))
    OFFSET_CURSOR.decode(token)    # raises StrategyMismatchError

Clients pass tokens back unchanged.
"""

from relay_cursors.core.pagination.cursor import (
    OFFSET_CURSOR,
    Cursor,
    CursorKind,
    KeyCursor,
    OffsetCursor,
    decode_cursor,
    key_cursor_kind,
    offset_cursor_kind,
)
from relay_cursors.core.pagination.providers import (
    CursorProvider,
    KeyedCursorProvider,
    OffsetCursorProvider,
    PaginationMetadata,
)
from relay_cursors.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    PageInfo,
    PageRequest,
)
from relay_cursors.core.pagination.strategies import (
    ByKeyStrategy,
    CursorStrategy,
    KeyShape,
    OffsetStrategy,
    strategy_for,
)
from relay_cursors.core.pagination.token import StrategyTag, decode_token, encode_token

__all__ = [
    "OFFSET_CURSOR",
    # Strategies
    "ByKeyStrategy",
    # Relay schemas
    "Connection",
    # Cursors
    "Cursor",
    "CursorKind",
    "CursorPage",
    # Providers
    "CursorProvider",
    "CursorStrategy",
    "Edge",
    "KeyCursor",
    "KeyShape",
    "KeyedCursorProvider",
    "OffsetCursor",
    "OffsetCursorProvider",
    "OffsetStrategy",
    "PageInfo",
    "PageRequest",
    "PaginationMetadata",
    # Token format
    "StrategyTag",
    "decode_cursor",
    "decode_token",
    "encode_token",
    "key_cursor_kind",
    "offset_cursor_kind",
    "strategy_for",
]
