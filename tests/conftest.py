"""Shared test fixtures and configuration.

Sets up fake environment variables so src.config doesn't sys.exit(),
and provides common fixtures like temp DBs and parsed chores.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "fake-token-for-tests")
os.environ.setdefault("LLM_API_KEY", "")
os.environ.setdefault("LLM_PROVIDER", "anthropic")
os.environ.setdefault("ALLOWED_USER_IDS", "12345")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("TIMEZONE", "UTC")

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_choreplan.db")


@pytest.fixture
def catalog_db(tmp_db_path):
    """Return a CatalogDB instance backed by a temp file."""
    from src.data.db import CatalogDB
    return CatalogDB(db_path=tmp_db_path)


@pytest.fixture
def credential_store(tmp_db_path):
    """Return a CredentialStore instance backed by a temp file."""
    from src.data.db import CredentialStore
    return CredentialStore(db_path=tmp_db_path)


@pytest.fixture
def sample_response():
    """A typical well-formed LLM reply."""
    return (
        "- Dishwashing (🧼): Daily, Evening\n"
        "- Laundry (🧺): Weekly, Saturday, Morning\n"
        "- Vacuuming (💨): Twice a week, Wednesday, Friday, Afternoon\n"
        "- Grocery Shopping (🛒): Weekly, Sunday, 10:00 AM\n"
    )
