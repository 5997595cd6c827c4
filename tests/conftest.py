"""
Pytest fixtures and configuration for the test suite.

Each test gets its own SQLite file under ``tmp_path``: the shared
``settings`` instance is pointed at it and the migrations are applied
before the test runs.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path so tests can import the package without installing it
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from playlist_share_api.app.core.config import settings  # noqa: E402
from playlist_share_api.app.core.db import get_connection, init_db  # noqa: E402

from factories import add_catalog, add_user  # noqa: E402


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Fresh, migrated database file for one test."""
    path = tmp_path / "test.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def conn(db_path):
    connection = get_connection()
    yield connection
    connection.close()


@pytest.fixture
def songs(conn):
    """Twelve seeded songs, ulids ``SONG0001`` .. ``SONG0012``."""
    return add_catalog(conn)


@pytest.fixture
def users(conn):
    """Owner ``alice``, listener ``bob`` and ``mallory``, who is banned."""
    add_user(conn, "alice", "Alice")
    add_user(conn, "bob", "Bob")
    add_user(conn, "mallory", "Mallory", is_ban=True)
    return ["alice", "bob", "mallory"]


@pytest.fixture
def anonymous():
    return settings.anonymous_account
