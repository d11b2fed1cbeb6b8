"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate tests from CURSOR_* environment variables
    - Cursor Fixtures: reusable cursor kinds and key shapes
"""

from __future__ import annotations

import os
from datetime import datetime

import pytest

from relay_cursors.core.pagination import KeyShape, key_cursor_kind
from relay_cursors.core.settings import clear_all_caches


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop CURSOR_* variables and reset cached settings around each test."""
    for name in list(os.environ):
        if name.upper().startswith("CURSOR_"):
            monkeypatch.delenv(name, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Cursor Fixtures
# ============================================================================


@pytest.fixture
def user_shape() -> KeyShape:
    """Key shape of a (created_at, id) sort order."""
    return KeyShape.named(("created_at", datetime), ("id", str))


@pytest.fixture
def user_cursor_kind(user_shape: KeyShape):
    """Keyed cursor kind for users sorted by (created_at, id)."""
    return key_cursor_kind("UserCursor", user_shape)
