"""Cursor token format.

A token is an opaque string that encodes a binary frame:

    version (1 byte) | strategy tag (1 byte) | payload (n bytes)

The frame is rendered with the URL-safe base64 alphabet and the ``=``
padding stripped, so tokens contain only ``A-Z a-z 0-9 - _`` and can be
placed in a query parameter or a JSON string without escaping.

Example (an offset cursor at position 42):
    frame:  01 01 00 00 00 00 00 00 00 2a
    token:  AQEAAAAAAAAAKg

Encoding is canonical: every frame has exactly one token, and decoding
rejects any other spelling of the same bytes.
"""

from __future__ import annotations

import base64
import binascii
import re
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from relay_cursors.core.exceptions import MalformedTokenError, UnknownStrategyError
from relay_cursors.core.pagination.validators import reject
from relay_cursors.core.settings import get_cursor_settings

if TYPE_CHECKING:
    from relay_cursors.core.settings import CursorSettings

TOKEN_VERSION = 1
HEADER_SIZE = 2

_TOKEN_ALPHABET = re.compile(r"[A-Za-z0-9_-]+")


class StrategyTag(IntEnum):
    """Closed set of cursor strategies, stored as the frame's tag byte."""

    OFFSET = 1
    BY_KEY = 2

    @property
    def label(self) -> str:
        """Lowercase name used in error messages and logs."""
        return self.name.lower()


def encode_token(tag: StrategyTag, payload: bytes) -> str:
    """Encode a strategy tag and payload into an opaque token.

    Args:
        tag: Strategy that produced the payload.
        payload: Serialized payload bytes.

    Returns:
        URL-safe token string without padding.
    """
    frame = bytes((TOKEN_VERSION, tag)) + bytes(payload)
    return base64.urlsafe_b64encode(frame).rstrip(b"=").decode("ascii")


def decode_token(
    token: Any,
    *,
    settings: CursorSettings | None = None,
) -> tuple[StrategyTag, bytes]:
    """Decode a token into its strategy tag and payload bytes.

    Args:
        token: Token string as received from a client.
        settings: Optional settings override.

    Returns:
        Tuple of (strategy tag, payload bytes).

    Raises:
        MalformedTokenError: If the token is not a well-formed frame.
        UnknownStrategyError: If the tag byte is not a known strategy.
    """
    settings = settings or get_cursor_settings()
    frame = _decode_frame(token, settings)

    version = frame[0]
    if version != TOKEN_VERSION:
        raise reject(
            MalformedTokenError(
                detail=f"unsupported token version {version}",
                extra={"version": version},
            ),
            settings,
        )

    raw_tag = frame[1]
    try:
        tag = StrategyTag(raw_tag)
    except ValueError:
        raise reject(UnknownStrategyError(raw_tag), settings) from None

    return tag, frame[HEADER_SIZE:]


def _decode_frame(token: Any, settings: CursorSettings) -> bytes:
    """Turn a token string back into frame bytes, rejecting any malformation."""
    if not isinstance(token, str):
        raise reject(
            MalformedTokenError(
                detail=f"token must be a string, got {type(token).__name__}",
                extra={"value_type": type(token).__name__},
            ),
            settings,
        )
    if not token:
        raise reject(MalformedTokenError(detail="token is empty"), settings)

    length = len(token)
    if length > settings.max_token_length:
        raise reject(
            MalformedTokenError(
                detail=f"token is longer than {settings.max_token_length} characters",
                extra={"length": length},
            ),
            settings,
        )
    if not _TOKEN_ALPHABET.fullmatch(token):
        raise reject(
            MalformedTokenError(
                detail="token contains characters outside the URL-safe alphabet",
                extra={"length": length},
            ),
            settings,
        )
    # one leftover character can never carry a whole byte
    if length % 4 == 1:
        raise reject(
            MalformedTokenError(detail="token is truncated", extra={"length": length}),
            settings,
        )

    padded = token + "=" * (-length % 4)
    try:
        frame = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise reject(
            MalformedTokenError(
                detail=f"token is not valid base64: {e}",
                extra={"length": length},
            ),
            settings,
        ) from e

    if base64.urlsafe_b64encode(frame).rstrip(b"=").decode("ascii") != token:
        raise reject(
            MalformedTokenError(
                detail="token is not canonically encoded",
                extra={"length": length},
            ),
            settings,
        )
    if len(frame) < HEADER_SIZE:
        raise reject(
            MalformedTokenError(detail="token is too short", extra={"length": length}),
            settings,
        )
    return frame


__all__ = [
    "HEADER_SIZE",
    "TOKEN_VERSION",
    "StrategyTag",
    "decode_token",
    "encode_token",
]
