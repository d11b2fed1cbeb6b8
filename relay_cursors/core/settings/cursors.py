"""Cursor codec settings.

Environment variables use CURSOR_ prefix.
Example: CURSOR_MAX_TOKEN_LENGTH=2048, CURSOR_MAX_KEY_FIELDS=8
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CursorSettings(BaseSettings):
    """Cursor codec configuration settings.

    These limits bound the work a decode may do on client-supplied input.
    They never change the wire format: a token accepted under one setting
    decodes to the same payload under any other setting that accepts it.

    Attributes:
        max_token_length: Longest token string accepted by the decoder.
        max_key_fields: Maximum number of fields in a key payload.
        log_rejections: Log rejected tokens at DEBUG level.

    Example:
        settings = CursorSettings(max_key_fields=4)
    """

    max_token_length: int = Field(
        default=4096,
        ge=16,
        le=1_048_576,
        description="Maximum accepted token length in characters",
    )
    max_key_fields: int = Field(
        default=16,
        ge=1,
        le=255,
        description="Maximum number of fields in a key cursor",
    )
    log_rejections: bool = Field(
        default=True,
        description="Log rejected tokens at DEBUG level (token contents are never logged)",
    )

    model_config = SettingsConfigDict(
        env_prefix="CURSOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
