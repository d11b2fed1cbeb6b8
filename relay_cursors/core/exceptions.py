"""Cursor error taxonomy.

Every decode path reports exactly one of a small, fixed set of error kinds.
The exceptions follow RFC 7807 Problem Details so an API layer can turn any
of them into a client-facing "invalid cursor" response.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class CursorErrorKind(StrEnum):
    """Fixed set of cursor error kinds."""

    INVALID_PAYLOAD = "invalid-payload"
    MALFORMED_TOKEN = "malformed-token"
    UNKNOWN_STRATEGY = "unknown-strategy"
    STRATEGY_MISMATCH = "strategy-mismatch"
    INVALID_OFFSET = "invalid-offset"
    INVALID_KEY_SHAPE = "invalid-key-shape"


class CursorError(Exception):
    """Base cursor exception.

    All cursor failures inherit from this class, which is not raised
    directly: each subclass sets ``kind``. The ``detail`` and ``extra``
    attributes carry internal diagnostics; ``title`` is safe to show to a
    client.

    Attributes:
        kind: The error kind from the fixed taxonomy.
        status_code: HTTP status code an API layer should respond with.
        detail: Human-readable, internal error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, client-safe summary of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise MalformedTokenError(
            detail="token contains characters outside the URL-safe alphabet",
            extra={"length": 18},
        )
    """

    kind: CursorErrorKind

    def __init__(
        self,
        detail: str,
        *,
        status_code: int = 400,
        title: str = "Invalid Cursor",
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize cursor exception.

        Args:
            detail: Human-readable error message.
            status_code: HTTP status code.
            title: Client-safe summary of the problem.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.status_code = status_code
        self.type = self.kind.value
        self.title = title
        self.extra = extra or {}
        super().__init__(detail)

    def to_problem_detail(self) -> dict[str, Any]:
        """Render a client-safe problem document.

        Internal ``detail`` and ``extra`` are left out so byte-level
        information never reaches the client.
        """
        return {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
        }


class InvalidPayloadError(CursorError):
    """Raised when a domain value violates payload invariants before encoding.

    Example:
        raise InvalidPayloadError(detail="offset must be non-negative, got -1")
    """

    kind = CursorErrorKind.INVALID_PAYLOAD


class MalformedTokenError(CursorError):
    """Raised when a token string violates the token format."""

    kind = CursorErrorKind.MALFORMED_TOKEN


class UnknownStrategyError(CursorError):
    """Raised when a token's strategy tag matches no known strategy."""

    kind = CursorErrorKind.UNKNOWN_STRATEGY

    def __init__(self, tag: int, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            detail=f"unknown cursor strategy tag: {tag}",
            extra={"tag": tag, **(extra or {})},
        )
        self.tag = tag


class StrategyMismatchError(CursorError):
    """Raised when a valid token belongs to a different strategy.

    Distinct from ``MalformedTokenError`` so callers can tell garbage input
    apart from a valid cursor issued for a different field.
    """

    kind = CursorErrorKind.STRATEGY_MISMATCH

    def __init__(
        self,
        expected: str,
        actual: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=f"expected a {expected} cursor, got a {actual} cursor",
            extra={"expected": expected, "actual": actual, **(extra or {})},
        )
        self.expected = expected
        self.actual = actual


class InvalidOffsetError(CursorError):
    """Raised when offset payload bytes do not form a valid offset."""

    kind = CursorErrorKind.INVALID_OFFSET


class InvalidKeyShapeError(CursorError):
    """Raised when a key payload does not match the expected key shape."""

    kind = CursorErrorKind.INVALID_KEY_SHAPE


__all__ = [
    "CursorError",
    "CursorErrorKind",
    "InvalidKeyShapeError",
    "InvalidOffsetError",
    "InvalidPayloadError",
    "MalformedTokenError",
    "StrategyMismatchError",
    "UnknownStrategyError",
]
