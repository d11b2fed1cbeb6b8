"""Typed cursors and cursor kinds.

Cursors are immutable values bound to one strategy:

    cursor = OffsetCursor(42)
    token = cursor.encode()
    assert OffsetCursor.decode(token) == cursor

    cursor = KeyCursor(("user_8f3a", "2024-01-05"))
    KeyCursor.decode(cursor.encode())          # KeyCursor(values=(...))
    OffsetCursor.decode(cursor.encode())       # raises StrategyMismatchError

A ``CursorKind`` binds a name, a strategy and a key shape once, at the
pagination field that issues the cursors:

    USER_CURSOR = key_cursor_kind(
        "UserCursor",
        KeyShape.named(("created_at", datetime), ("id", str)),
    )
    token = USER_CURSOR.from_row(user).encode()
    cursor = USER_CURSOR.decode(after)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import InitVar, dataclass
from functools import total_ordering
from typing import TYPE_CHECKING, Any, ClassVar

from relay_cursors.core.exceptions import StrategyMismatchError
from relay_cursors.core.pagination.strategies import (
    ByKeyStrategy,
    KeyScalar,
    KeyShape,
    KeyValues,
    OffsetStrategy,
    ScalarType,
    scalar_type_of,
)
from relay_cursors.core.pagination.token import StrategyTag, decode_token, encode_token
from relay_cursors.core.pagination.validators import reject

if TYPE_CHECKING:
    from relay_cursors.core.settings import CursorSettings


class Cursor(ABC):
    """Common contract of all typed cursors."""

    strategy: ClassVar[StrategyTag]

    @property
    @abstractmethod
    def payload(self) -> Any:
        """The position payload this cursor carries."""

    @abstractmethod
    def encode(self, *, settings: CursorSettings | None = None) -> str:
        """Encode the cursor into an opaque token."""


@dataclass(frozen=True, order=True)
class OffsetCursor(Cursor):
    """Cursor at a zero-based offset in a stably ordered sequence.

    Attributes:
        offset: Position of the item, 0 <= offset <= 2**63 - 1.
        settings: Settings the offset is validated under (not stored).
    """

    offset: int
    settings: InitVar[CursorSettings | None] = None

    strategy: ClassVar[StrategyTag] = StrategyTag.OFFSET

    def __post_init__(self, settings: CursorSettings | None) -> None:
        OffsetStrategy(settings).validate(self.offset)

    @property
    def payload(self) -> int:
        return self.offset

    def encode(self, *, settings: CursorSettings | None = None) -> str:
        data = OffsetStrategy(settings).serialize(self.offset)
        return encode_token(self.strategy, data)

    @classmethod
    def decode(cls, token: str, *, settings: CursorSettings | None = None) -> OffsetCursor:
        """Decode a token that must hold an offset cursor."""
        return decode_cursor(token, StrategyTag.OFFSET, settings=settings)

    def next(self, step: int = 1) -> OffsetCursor:
        """Cursor ``step`` items further along."""
        return OffsetCursor(self.offset + step)


@total_ordering
@dataclass(frozen=True, eq=False)
class KeyCursor(Cursor):
    """Cursor at a sort-key position, for stores with no stable offset.

    Equality, hashing and ordering use each value together with its key
    type, so two cursors are equal exactly when they encode to the same
    token: ``KeyCursor.of(1)``, ``KeyCursor.of(True)`` and
    ``KeyCursor.of(1.0)`` are all distinct. The shape is metadata and does
    not take part.

    Attributes:
        values: Ordered sort-key values. Aware datetimes are held in UTC.
        shape: Declared key shape the values were checked against.
        settings: Settings the values are validated under (not stored).
    """

    values: KeyValues
    shape: KeyShape | None = None
    settings: InitVar[CursorSettings | None] = None

    strategy: ClassVar[StrategyTag] = StrategyTag.BY_KEY

    def __post_init__(self, settings: CursorSettings | None) -> None:
        values = ByKeyStrategy(self.shape, settings).validate(self.values)
        object.__setattr__(self, "values", values)

    @classmethod
    def of(
        cls,
        *values: KeyScalar,
        shape: KeyShape | None = None,
        settings: CursorSettings | None = None,
    ) -> KeyCursor:
        """Build a key cursor from positional values."""
        return cls(values, shape=shape, settings=settings)

    @property
    def payload(self) -> KeyValues:
        return self.values

    @property
    def sort_key(self) -> tuple[tuple[ScalarType, bool, KeyScalar], ...]:
        """Values tagged with their key type, as compared and hashed."""
        return tuple(_typed_value(value) for value in self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyCursor):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, KeyCursor):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash(self.sort_key)

    def encode(self, *, settings: CursorSettings | None = None) -> str:
        data = ByKeyStrategy(self.shape, settings).serialize(self.values)
        return encode_token(self.strategy, data)

    @classmethod
    def decode(
        cls,
        token: str,
        shape: KeyShape | None = None,
        *,
        settings: CursorSettings | None = None,
    ) -> KeyCursor:
        """Decode a token that must hold a key cursor of ``shape``."""
        return decode_cursor(token, StrategyTag.BY_KEY, shape=shape, settings=settings)

    def as_dict(self) -> dict[str, KeyScalar]:
        """Map field names to values; requires a named shape."""
        if self.shape is None or self.shape.names is None:
            msg = "as_dict() needs a key shape with field names"
            raise ValueError(msg)
        return dict(zip(self.shape.names, self.values, strict=True))


def _typed_value(value: KeyScalar) -> tuple[ScalarType, bool, KeyScalar]:
    # naive and aware datetimes never compare, so awareness sorts first
    code = scalar_type_of(value)
    aware = code is ScalarType.DATETIME and value.utcoffset() is not None
    return code, aware, value


def decode_cursor(
    token: str,
    expect: StrategyTag,
    *,
    shape: KeyShape | None = None,
    settings: CursorSettings | None = None,
) -> Any:
    """Decode a token, insisting on the strategy the caller expects.

    Args:
        token: Client-supplied token, passed through unmodified.
        expect: Strategy of the pagination field receiving the token.
        shape: Expected key shape for ``BY_KEY`` cursors.
        settings: Optional settings override.

    Returns:
        ``OffsetCursor`` or ``KeyCursor``.

    Raises:
        MalformedTokenError: Token is not a well-formed frame.
        UnknownStrategyError: Token tag names no known strategy.
        StrategyMismatchError: Token belongs to a different strategy.
        InvalidOffsetError: Offset payload is invalid.
        InvalidKeyShapeError: Key payload does not match ``shape``.
    """
    tag, data = decode_token(token, settings=settings)
    if tag is not expect:
        raise reject(
            StrategyMismatchError(expected=expect.label, actual=tag.label),
            settings,
        )

    match tag:
        case StrategyTag.OFFSET:
            return OffsetCursor(OffsetStrategy(settings).deserialize(data), settings)
        case StrategyTag.BY_KEY:
            values = ByKeyStrategy(shape, settings).deserialize(data)
            return KeyCursor(values, shape=shape, settings=settings)


@dataclass(frozen=True)
class CursorKind:
    """A named binding of strategy and key shape.

    Use ``offset_cursor_kind`` and ``key_cursor_kind`` to declare one per
    pagination field. A kind never changes the wire format; it only fixes
    which tokens the field accepts.
    """

    name: str
    strategy: StrategyTag
    shape: KeyShape | None = None

    def __post_init__(self) -> None:
        if self.strategy is StrategyTag.OFFSET and self.shape is not None:
            msg = f"offset cursor kind {self.name!r} cannot declare a key shape"
            raise ValueError(msg)

    @property
    def cursor_type(self) -> type[Cursor]:
        match self.strategy:
            case StrategyTag.OFFSET:
                return OffsetCursor
            case StrategyTag.BY_KEY:
                return KeyCursor

    def cursor(self, value: Any, *, settings: CursorSettings | None = None) -> Any:
        """Build a validated cursor of this kind from a domain value.

        Offset kinds take an int. Key kinds take a sequence of key values,
        or a single scalar for one-field keys.
        """
        match self.strategy:
            case StrategyTag.OFFSET:
                return OffsetCursor(value, settings)
            case StrategyTag.BY_KEY:
                if isinstance(value, str | bytes) or not isinstance(value, Sequence):
                    value = (value,)
                return KeyCursor(tuple(value), shape=self.shape, settings=settings)

    def encode(self, value: Any, *, settings: CursorSettings | None = None) -> str:
        """Build and encode a cursor of this kind in one step."""
        return self.cursor(value, settings=settings).encode(settings=settings)

    def decode(self, token: str, *, settings: CursorSettings | None = None) -> Any:
        """Decode a token issued for this kind."""
        return decode_cursor(token, self.strategy, shape=self.shape, settings=settings)

    def from_row(self, row: Any) -> KeyCursor:
        """Create a key cursor from the named shape fields of a row.

        Example:
            cursor = USER_CURSOR.from_row(user)  # reads user.created_at, user.id
        """
        if self.strategy is not StrategyTag.BY_KEY:
            msg = f"cursor kind {self.name!r} is not keyed"
            raise ValueError(msg)
        if self.shape is None or self.shape.names is None:
            msg = f"cursor kind {self.name!r} needs a named key shape to read rows"
            raise ValueError(msg)
        return KeyCursor(
            tuple(getattr(row, name) for name in self.shape.names),
            shape=self.shape,
        )


def offset_cursor_kind(name: str = "OffsetCursor") -> CursorKind:
    """Declare an offset cursor kind."""
    return CursorKind(name=name, strategy=StrategyTag.OFFSET)


def key_cursor_kind(
    name: str,
    shape: KeyShape | Sequence[type] | None = None,
) -> CursorKind:
    """Declare a keyed cursor kind.

    Args:
        name: Kind name, also used as the GraphQL scalar name.
        shape: Key shape, or a sequence of field types. ``None`` accepts any
            well-formed key.
    """
    if shape is not None and not isinstance(shape, KeyShape):
        shape = KeyShape.of(*shape)
    return CursorKind(name=name, strategy=StrategyTag.BY_KEY, shape=shape)


OFFSET_CURSOR = offset_cursor_kind()


__all__ = [
    "OFFSET_CURSOR",
    "Cursor",
    "CursorKind",
    "KeyCursor",
    "OffsetCursor",
    "decode_cursor",
    "key_cursor_kind",
    "offset_cursor_kind",
]
