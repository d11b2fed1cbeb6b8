"""Opaque, stable pagination cursors for Relay-style connections."""

from relay_cursors.core.exceptions import (
    CursorError,
    CursorErrorKind,
    InvalidKeyShapeError,
    InvalidOffsetError,
    InvalidPayloadError,
    MalformedTokenError,
    StrategyMismatchError,
    UnknownStrategyError,
)
from relay_cursors.core.pagination import (
    OFFSET_CURSOR,
    Connection,
    Cursor,
    CursorKind,
    CursorPage,
    Edge,
    KeyCursor,
    KeyedCursorProvider,
    KeyShape,
    OffsetCursor,
    OffsetCursorProvider,
    PageInfo,
    PageRequest,
    StrategyTag,
    decode_cursor,
    key_cursor_kind,
    offset_cursor_kind,
)

__version__ = "0.4.0"

__all__ = [
    "OFFSET_CURSOR",
    "Connection",
    "Cursor",
    "CursorError",
    "CursorErrorKind",
    "CursorKind",
    "CursorPage",
    "Edge",
    "InvalidKeyShapeError",
    "InvalidOffsetError",
    "InvalidPayloadError",
    "KeyCursor",
    "KeyShape",
    "KeyedCursorProvider",
    "MalformedTokenError",
    "OffsetCursor",
    "OffsetCursorProvider",
    "PageInfo",
    "PageRequest",
    "StrategyMismatchError",
    "StrategyTag",
    "UnknownStrategyError",
    "decode_cursor",
    "key_cursor_kind",
    "offset_cursor_kind",
]
