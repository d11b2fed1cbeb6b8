"""Cursor strategies.

A strategy turns a position payload into frame bytes and back:

- ``OffsetStrategy``: a zero-based integer position in a stable sequence,
  stored as an 8-byte big-endian unsigned integer.
- ``ByKeyStrategy``: one or more ordered sort-key scalars for stores with no
  stable numeric offset. The payload is length-prefixed field by field:

      field count (2 bytes)
      repeated: type code (1 byte) | length (4 bytes) | value (length bytes)

  Length prefixes make keys containing delimiter-like bytes unambiguous and
  make truncation detectable.

The set of strategies is closed; ``strategy_for`` dispatches on the tag.
"""

from __future__ import annotations

import math
import struct
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import IntEnum
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import UUID

from relay_cursors.core.exceptions import (
    InvalidKeyShapeError,
    InvalidOffsetError,
    InvalidPayloadError,
    UnknownStrategyError,
)
from relay_cursors.core.pagination.token import StrategyTag
from relay_cursors.core.pagination.validators import (
    MAX_OFFSET,
    ensure_field_count,
    ensure_finite,
    ensure_int64,
    ensure_offset,
    ensure_utc,
    reject,
)
from relay_cursors.core.settings import get_cursor_settings

if TYPE_CHECKING:
    from relay_cursors.core.settings import CursorSettings

type KeyScalar = str | bytes | int | float | bool | UUID | datetime | date
type KeyValues = tuple[KeyScalar, ...]

_OFFSET = struct.Struct(">Q")
_FIELD_COUNT = struct.Struct(">H")
_FIELD_HEADER = struct.Struct(">BI")
_DOUBLE = struct.Struct(">d")
_INT64_SIZE = 8


class ScalarType(IntEnum):
    """Type codes for key fields."""

    STR = 1
    BYTES = 2
    INT = 3
    FLOAT = 4
    BOOL = 5
    UUID = 6
    DATETIME = 7
    DATE = 8


_SHAPE_TYPES: dict[type, ScalarType] = {
    str: ScalarType.STR,
    bytes: ScalarType.BYTES,
    int: ScalarType.INT,
    float: ScalarType.FLOAT,
    bool: ScalarType.BOOL,
    UUID: ScalarType.UUID,
    datetime: ScalarType.DATETIME,
    date: ScalarType.DATE,
}


def scalar_type_of(value: Any) -> ScalarType | None:
    """Classify a key value, or return None when it is not a key scalar."""
    # order matters: bool before int, datetime before date
    match value:
        case bool():
            return ScalarType.BOOL
        case int():
            return ScalarType.INT
        case float():
            return ScalarType.FLOAT
        case str():
            return ScalarType.STR
        case bytes():
            return ScalarType.BYTES
        case UUID():
            return ScalarType.UUID
        case datetime():
            return ScalarType.DATETIME
        case date():
            return ScalarType.DATE
        case _:
            return None


@dataclass(frozen=True)
class KeyShape:
    """Ordered field types (and optional names) of a key cursor.

    The codec has no schema of its own, so the caller declares the shape it
    sorted by and decoding checks the token against it field for field.

    Example:
        shape = KeyShape.named(("created_at", datetime), ("id", str))
        shape = KeyShape.of(str, str)
    """

    types: tuple[type, ...]
    names: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if not self.types:
            msg = "key shape needs at least one field"
            raise ValueError(msg)
        unsupported = [t for t in self.types if t not in _SHAPE_TYPES]
        if unsupported:
            msg = f"unsupported key field types: {unsupported}"
            raise ValueError(msg)
        if self.names is not None:
            if len(self.names) != len(self.types):
                msg = "key shape names and types differ in length"
                raise ValueError(msg)
            if len(set(self.names)) != len(self.names):
                msg = f"duplicate key field names: {self.names}"
                raise ValueError(msg)

    @classmethod
    def of(cls, *types: type) -> KeyShape:
        """Build an unnamed shape from field types."""
        return cls(types=tuple(types))

    @classmethod
    def named(cls, *fields: tuple[str, type]) -> KeyShape:
        """Build a named shape from (name, type) pairs."""
        return cls(
            types=tuple(t for _, t in fields),
            names=tuple(name for name, _ in fields),
        )

    @property
    def codes(self) -> tuple[ScalarType, ...]:
        return tuple(_SHAPE_TYPES[t] for t in self.types)

    def __len__(self) -> int:
        return len(self.types)


class CursorStrategy[P](ABC):
    """Capability set every cursor strategy provides.

    Subclasses validate a payload, serialize it to bytes and deserialize it
    back. Settings are resolved lazily so cursor kinds declared at import
    time follow the current configuration.
    """

    tag: ClassVar[StrategyTag]

    def __init__(self, settings: CursorSettings | None = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> CursorSettings:
        return self._settings or get_cursor_settings()

    @abstractmethod
    def validate(self, payload: Any) -> P:
        """Check payload invariants, raising ``InvalidPayloadError``."""

    @abstractmethod
    def serialize(self, payload: P) -> bytes:
        """Serialize a validated payload to bytes."""

    @abstractmethod
    def deserialize(self, data: bytes) -> P:
        """Rebuild a payload from bytes, raising the strategy's decode error."""


class OffsetStrategy(CursorStrategy[int]):
    """Offset payloads as 8-byte big-endian unsigned integers."""

    tag = StrategyTag.OFFSET

    def validate(self, payload: Any) -> int:
        return ensure_offset(payload, self.settings)

    def serialize(self, payload: int) -> bytes:
        return _OFFSET.pack(self.validate(payload))

    def deserialize(self, data: bytes) -> int:
        if len(data) != _OFFSET.size:
            raise reject(
                InvalidOffsetError(
                    detail=f"offset payload must be {_OFFSET.size} bytes, got {len(data)}",
                    extra={"payload_size": len(data)},
                ),
                self.settings,
            )
        (offset,) = _OFFSET.unpack(data)
        if offset > MAX_OFFSET:
            raise reject(
                InvalidOffsetError(detail=f"offset exceeds {MAX_OFFSET}"),
                self.settings,
            )
        return offset


class ByKeyStrategy(CursorStrategy[KeyValues]):
    """Ordered key payloads with per-field type codes and length prefixes.

    Args:
        shape: Expected key shape. When omitted, any well-formed key is
            accepted and field types come from the token itself.
        settings: Optional settings override.
    """

    tag = StrategyTag.BY_KEY

    def __init__(
        self,
        shape: KeyShape | None = None,
        settings: CursorSettings | None = None,
    ) -> None:
        super().__init__(settings)
        self.shape = shape

    def validate(self, payload: Any) -> KeyValues:
        if isinstance(payload, str | bytes) or not isinstance(payload, Sequence):
            raise reject(
                InvalidPayloadError(
                    detail="key values must be a sequence of scalars",
                    extra={"value_type": type(payload).__name__},
                ),
                self.settings,
            )
        values = tuple(payload)
        ensure_field_count(len(values), self.settings)
        if self.shape is not None and len(values) != len(self.shape):
            raise reject(
                InvalidPayloadError(
                    detail=f"expected {len(self.shape)} key fields, got {len(values)}",
                    extra={"field_count": len(values)},
                ),
                self.settings,
            )

        normalized: list[KeyScalar] = []
        for index, value in enumerate(values):
            code = scalar_type_of(value)
            if code is None:
                raise reject(
                    InvalidPayloadError(
                        detail=f"key field {index} has unsupported type {type(value).__name__}",
                        extra={"field": index, "value_type": type(value).__name__},
                    ),
                    self.settings,
                )
            if self.shape is not None and code != self.shape.codes[index]:
                raise reject(
                    InvalidPayloadError(
                        detail=(
                            f"key field {index} must be {self.shape.codes[index].name.lower()}, "
                            f"got {code.name.lower()}"
                        ),
                        extra={"field": index},
                    ),
                    self.settings,
                )
            if code is ScalarType.INT:
                ensure_int64(value, index, self.settings)
            elif code is ScalarType.FLOAT:
                ensure_finite(value, index, self.settings)
            elif code is ScalarType.STR:
                try:
                    value.encode("utf-8")
                except UnicodeEncodeError as e:
                    raise reject(
                        InvalidPayloadError(
                            detail=f"key field {index} is not encodable as UTF-8",
                            extra={"field": index},
                        ),
                        self.settings,
                    ) from e
            elif code is ScalarType.DATETIME:
                value = ensure_utc(value, index, self.settings)
            normalized.append(value)
        return tuple(normalized)

    def serialize(self, payload: KeyValues) -> bytes:
        values = self.validate(payload)
        parts = [_FIELD_COUNT.pack(len(values))]
        for value in values:
            code = scalar_type_of(value)
            data = _pack_scalar(code, value)
            parts.append(_FIELD_HEADER.pack(code, len(data)))
            parts.append(data)
        return b"".join(parts)

    def deserialize(self, data: bytes) -> KeyValues:
        if len(data) < _FIELD_COUNT.size:
            raise self._shape_error("key payload is truncated")
        (count,) = _FIELD_COUNT.unpack_from(data, 0)
        ensure_field_count(count, self.settings, InvalidKeyShapeError)
        if self.shape is not None and count != len(self.shape):
            raise self._shape_error(
                f"expected {len(self.shape)} key fields, got {count}",
                field_count=count,
            )

        values: list[KeyScalar] = []
        pos = _FIELD_COUNT.size
        for index in range(count):
            if pos + _FIELD_HEADER.size > len(data):
                raise self._shape_error("key payload is truncated", field=index)
            raw_code, length = _FIELD_HEADER.unpack_from(data, pos)
            pos += _FIELD_HEADER.size

            try:
                code = ScalarType(raw_code)
            except ValueError:
                raise self._shape_error(
                    f"key field {index} has unknown type code {raw_code}",
                    field=index,
                ) from None
            if self.shape is not None and code != self.shape.codes[index]:
                raise self._shape_error(
                    f"key field {index} is {code.name.lower()}, "
                    f"expected {self.shape.codes[index].name.lower()}",
                    field=index,
                )

            end = pos + length
            if end > len(data):
                raise self._shape_error("key payload is truncated", field=index)
            try:
                values.append(_unpack_scalar(code, data[pos:end]))
            except (ValueError, struct.error) as e:
                raise self._shape_error(
                    f"key field {index} does not hold a valid {code.name.lower()}: {e}",
                    field=index,
                ) from e
            pos = end

        if pos != len(data):
            raise self._shape_error(
                f"key payload has {len(data) - pos} trailing bytes",
            )
        return tuple(values)

    def _shape_error(self, detail: str, **extra: int) -> InvalidKeyShapeError:
        return reject(InvalidKeyShapeError(detail=detail, extra=extra), self.settings)


def _pack_scalar(code: ScalarType, value: KeyScalar) -> bytes:
    """Serialize one key value. Equal values always pack to equal bytes."""
    match code:
        case ScalarType.STR:
            return value.encode("utf-8")
        case ScalarType.BYTES:
            return bytes(value)
        case ScalarType.INT:
            return int(value).to_bytes(_INT64_SIZE, "big", signed=True)
        case ScalarType.FLOAT:
            # -0.0 == 0.0, so both pack as 0.0
            return _DOUBLE.pack(value + 0.0)
        case ScalarType.BOOL:
            return b"\x01" if value else b"\x00"
        case ScalarType.UUID:
            return value.bytes
        case ScalarType.DATETIME:
            return value.isoformat().encode("ascii")
        case ScalarType.DATE:
            return value.isoformat().encode("ascii")


def _unpack_scalar(code: ScalarType, data: bytes) -> KeyScalar:
    """Deserialize one key value, raising ValueError on any invalid bytes."""
    match code:
        case ScalarType.STR:
            return data.decode("utf-8")
        case ScalarType.BYTES:
            return bytes(data)
        case ScalarType.INT:
            if len(data) != _INT64_SIZE:
                msg = f"expected {_INT64_SIZE} bytes, got {len(data)}"
                raise ValueError(msg)
            return int.from_bytes(data, "big", signed=True)
        case ScalarType.FLOAT:
            (number,) = _DOUBLE.unpack(data)
            if not math.isfinite(number):
                msg = "float is not finite"
                raise ValueError(msg)
            if _DOUBLE.pack(number + 0.0) != data:
                msg = "float is not canonically encoded"
                raise ValueError(msg)
            return number
        case ScalarType.BOOL:
            if data not in (b"\x00", b"\x01"):
                msg = "bool must be a single 0 or 1 byte"
                raise ValueError(msg)
            return data == b"\x01"
        case ScalarType.UUID:
            return UUID(bytes=bytes(data))
        case ScalarType.DATETIME:
            text = data.decode("ascii")
            moment = datetime.fromisoformat(text)
            # aware datetimes are always stored in UTC
            offset = moment.utcoffset()
            if moment.isoformat() != text or offset not in (None, timedelta(0)):
                msg = "datetime is not canonically encoded"
                raise ValueError(msg)
            return moment
        case ScalarType.DATE:
            text = data.decode("ascii")
            day = date.fromisoformat(text)
            if day.isoformat() != text:
                msg = "date is not canonically encoded"
                raise ValueError(msg)
            return day


def strategy_for(
    tag: StrategyTag,
    shape: KeyShape | None = None,
    settings: CursorSettings | None = None,
) -> CursorStrategy[Any]:
    """Return the strategy for a tag.

    Args:
        tag: Strategy tag.
        shape: Key shape, used by ``BY_KEY`` only.
        settings: Optional settings override.
    """
    match tag:
        case StrategyTag.OFFSET:
            return OffsetStrategy(settings)
        case StrategyTag.BY_KEY:
            return ByKeyStrategy(shape, settings)
        case _:
            raise reject(UnknownStrategyError(int(tag)), settings)


__all__ = [
    "ByKeyStrategy",
    "CursorStrategy",
    "KeyScalar",
    "KeyShape",
    "KeyValues",
    "OffsetStrategy",
    "ScalarType",
    "scalar_type_of",
    "strategy_for",
]
