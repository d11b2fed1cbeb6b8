"""Shared payload validation for cursor strategies.

Every strategy funnels its checks through these helpers so that each failure
maps onto one of the fixed error kinds in ``relay_cursors.core.exceptions``
and is logged the same way.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from relay_cursors.core.exceptions import CursorError, InvalidPayloadError
from relay_cursors.core.settings import get_cursor_settings

if TYPE_CHECKING:
    from relay_cursors.core.settings import CursorSettings

logger = logging.getLogger(__name__)

MAX_OFFSET = 2**63 - 1
MIN_INT64 = -(2**63)
MAX_INT64 = 2**63 - 1


def reject[E: CursorError](error: E, settings: CursorSettings | None = None) -> E:
    """Log a rejected cursor and hand the error back for raising.

    Token contents are never logged, only the error kind and its
    structural context.

    Example:
        raise reject(MalformedTokenError(detail="empty token"))
    """
    settings = settings or get_cursor_settings()
    if settings.log_rejections:
        logger.debug(
            "Rejected cursor: %s",
            error.detail,
            extra={"cursor_error": error.type, **error.extra},
        )
    return error


def ensure_offset(value: Any, settings: CursorSettings | None = None) -> int:
    """Validate an offset payload.

    Args:
        value: Candidate offset.
        settings: Optional settings override.

    Returns:
        The offset, unchanged.

    Raises:
        InvalidPayloadError: If the value is not an int in [0, 2**63 - 1].
    """
    # bool is an int subclass but never a position
    if isinstance(value, bool) or not isinstance(value, int):
        raise reject(
            InvalidPayloadError(
                detail=f"offset must be an integer, got {type(value).__name__}",
                extra={"value_type": type(value).__name__},
            ),
            settings,
        )
    if value < 0:
        raise reject(
            InvalidPayloadError(
                detail=f"offset must be non-negative, got {value}",
                extra={"offset": value},
            ),
            settings,
        )
    if value > MAX_OFFSET:
        raise reject(
            InvalidPayloadError(
                detail=f"offset exceeds {MAX_OFFSET}",
                extra={"offset": value},
            ),
            settings,
        )
    return value


def ensure_int64(value: int, index: int, settings: CursorSettings | None = None) -> int:
    """Validate that a key integer fits in a signed 64-bit range."""
    if not MIN_INT64 <= value <= MAX_INT64:
        raise reject(
            InvalidPayloadError(
                detail=f"key field {index} does not fit in a signed 64-bit integer",
                extra={"field": index},
            ),
            settings,
        )
    return value


def ensure_finite(value: float, index: int, settings: CursorSettings | None = None) -> float:
    """Validate that a key float is finite (NaN never compares equal)."""
    if not math.isfinite(value):
        raise reject(
            InvalidPayloadError(
                detail=f"key field {index} must be a finite float, got {value!r}",
                extra={"field": index},
            ),
            settings,
        )
    return value


def ensure_utc(value: datetime, index: int, settings: CursorSettings | None = None) -> datetime:
    """Normalize an aware key datetime to UTC; naive datetimes pass unchanged."""
    if value.utcoffset() is None:
        return value
    try:
        return value.astimezone(UTC)
    except OverflowError as e:
        raise reject(
            InvalidPayloadError(
                detail=f"key field {index} is out of range once converted to UTC",
                extra={"field": index},
            ),
            settings,
        ) from e


def ensure_field_count(
    count: int,
    settings: CursorSettings | None = None,
    error_cls: type[CursorError] = InvalidPayloadError,
) -> int:
    """Validate the number of fields in a key payload.

    Args:
        count: Number of key fields.
        settings: Optional settings override.
        error_cls: Error to raise; construction uses ``InvalidPayloadError``,
            decoding uses ``InvalidKeyShapeError``.
    """
    settings = settings or get_cursor_settings()
    if count < 1:
        raise reject(error_cls(detail="key cursor needs at least one field"), settings)
    if count > settings.max_key_fields:
        raise reject(
            error_cls(
                detail=(
                    f"key cursor has {count} fields, "
                    f"maximum is {settings.max_key_fields}"
                ),
                extra={"field_count": count},
            ),
            settings,
        )
    return count


__all__ = [
    "MAX_INT64",
    "MAX_OFFSET",
    "MIN_INT64",
    "ensure_field_count",
    "ensure_finite",
    "ensure_int64",
    "ensure_offset",
    "reject",
]
