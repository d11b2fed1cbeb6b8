"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process.

Testing:
    In tests, clear the cache to force reload:
    get_cursor_settings.cache_clear()

    Or pass explicit settings to the codec functions:
    decode_token(token, settings=CursorSettings(max_token_length=64))
"""

from __future__ import annotations

from functools import lru_cache

from .cursors import CursorSettings


@lru_cache(maxsize=1)
def get_cursor_settings() -> CursorSettings:
    """Get cached cursor codec settings.

    Returns:
        Validated and frozen CursorSettings instance.
    """
    return CursorSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    In production, prefer process restarts over cache clearing.
    """
    get_cursor_settings.cache_clear()
