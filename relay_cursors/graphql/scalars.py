"""Custom GraphQL scalars for cursor kinds.

Each cursor kind becomes its own opaque string scalar:
- Serializes a cursor to its token
- Parses a token into a decoded cursor of that kind

Decode failures surface to clients as a generic "Invalid Cursor" message;
byte-level detail stays in the server logs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import strawberry

from relay_cursors.core.exceptions import CursorError

if TYPE_CHECKING:
    from relay_cursors.core.pagination import Cursor, CursorKind


def cursor_scalar(kind: CursorKind, description: str | None = None) -> Any:
    """Create a Strawberry scalar for a cursor kind.

    Args:
        kind: Cursor kind the scalar accepts and emits.
        description: Optional schema description.

    Returns:
        A scalar usable as a field or argument annotation.

    Example:
        LocationCursor = cursor_scalar(offset_cursor_kind("LocationCursor"))

        @strawberry.field
        def locations(self, first: int | None = None, after: LocationCursor | None = None) -> ...
    """
    cursor_type = kind.cursor_type

    def serialize(value: Cursor) -> str:
        if not isinstance(value, cursor_type):
            msg = f"{kind.name} cannot serialize {type(value).__name__}"
            raise TypeError(msg)
        return value.encode()

    def parse_value(value: Any) -> Cursor:
        try:
            return kind.decode(value)
        except CursorError as e:
            raise ValueError(e.title) from e

    return strawberry.scalar(
        cursor_type,
        name=kind.name,
        description=description or f"Opaque {kind.strategy.label} pagination cursor",
        serialize=serialize,
        parse_value=parse_value,
    )


__all__ = ["cursor_scalar"]
