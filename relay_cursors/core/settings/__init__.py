"""Pydantic Settings v2 configuration for the cursor codec.

Import settings via the cached loader:
    from relay_cursors.core.settings import get_cursor_settings

    settings = get_cursor_settings()
    print(settings.max_key_fields)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .cursors import CursorSettings
from .loader import clear_all_caches, get_cursor_settings

__all__ = [
    "CursorSettings",
    "clear_all_caches",
    "get_cursor_settings",
]
