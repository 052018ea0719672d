import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from solsign.config.settings import Settings
from solsign.database.connection import close_pool, get_connection, init_pool
from solsign.database.schema import init_schema

_CLEANUP_SQL = {
    "user_verifications": "DELETE FROM user_verifications WHERE wallet_address = %s",
    "liveness_checks": "DELETE FROM liveness_checks WHERE user_id = %s",
    "document_transactions": "DELETE FROM document_transactions WHERE tx_hash = %s",
}


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "solsign_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1")
        init_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[tuple[str, str]], None, None]:
    cleanup: list[tuple[str, str]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table, key in cleanup:
                cur.execute(_CLEANUP_SQL[table], (key,))
        conn.commit()


@pytest.fixture
def wallet(integration_cleanup: list[tuple[str, str]]) -> str:
    """A fresh 32-character wallet address removed from all tables afterwards."""
    address = uuid.uuid4().hex
    integration_cleanup.append(("user_verifications", address))
    integration_cleanup.append(("liveness_checks", address))
    return address
