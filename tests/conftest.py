"""Shared test fixtures for customvalues."""

import os
import tempfile
from collections.abc import Generator

import pytest

from customvalues import BlobValueStore, CustomValuesDB, InvertedTableStore


def _psycopg_available() -> bool:
    """Check if psycopg is installed."""
    try:
        import psycopg  # noqa: F401

        return True
    except ImportError:
        return False


def _postgresql_connectable(url: str) -> bool:
    """Check if we can connect to PostgreSQL."""
    if not _psycopg_available():
        return False
    try:
        from customvalues.core.connection import DatabaseConnection

        conn = DatabaseConnection(url)
        result = conn.test_connection()
        conn.close()
        return result
    except Exception:
        return False


@pytest.fixture
def postgresql_url() -> str:
    """Get PostgreSQL URL from environment or use default.

    Skips the test when psycopg or the server is unavailable.
    """
    url = os.environ.get("TEST_DATABASE_URL") or "postgresql://localhost/customvalues_test"

    if not _psycopg_available():
        pytest.skip("psycopg not installed")
    if not _postgresql_connectable(url):
        pytest.skip(f"Cannot connect to PostgreSQL at {url}")

    return url


@pytest.fixture
def memory_db() -> Generator[CustomValuesDB, None, None]:
    """Create a CustomValuesDB instance with SQLite in-memory."""
    database = CustomValuesDB("sqlite:///:memory:")
    yield database
    database.close()


@pytest.fixture
def blob_store(memory_db: CustomValuesDB) -> BlobValueStore:
    return memory_db.blobs


@pytest.fixture
def inverted_store(memory_db: CustomValuesDB) -> InvertedTableStore:
    return memory_db.inverted


@pytest.fixture
def sqlite_file_url() -> Generator[str, None, None]:
    """SQLite database file shared by several connections."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield f"sqlite:///{db_path}"
    if os.path.exists(db_path):
        os.remove(db_path)


@pytest.fixture
def pg_db(postgresql_url: str) -> Generator[CustomValuesDB, None, None]:
    """Create a CustomValuesDB instance with PostgreSQL, dropping its tables afterwards."""
    database = CustomValuesDB(postgresql_url)
    yield database
    from customvalues.schema.models import Base

    Base.metadata.drop_all(database.gateway.connection.engine)
    database.close()
