"""Shared test fixtures and configuration.

Sets up fake environment variables before any planner imports,
and provides common fixtures like a temp settings DB.
"""

import os

# Patch env vars BEFORE any planner imports
os.environ.setdefault("DATA_BASE_URL", "http://planner.test/")
os.environ.setdefault("LMP_DATE", "2025-10-20")
os.environ.setdefault("GITHUB_API_URL", "https://api.github.test")

import pytest


@pytest.fixture
def settings_db(tmp_path):
    """Return a SettingsDB instance backed by a temp file."""
    from planner.data.db import SettingsDB
    return SettingsDB(db_path=str(tmp_path / "test_planner.db"))
