"""
Shared test setup
=================
An in-memory SQLite engine stands in for the hosted database. It is
swapped in before ``main`` is imported so the app's repositories bind
to it; every test starts with empty tables.
"""
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

_engine = create_engine(
    "sqlite://",
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)

# ── Swap the DB before import ────────────────────────────────────────────
with patch("sqlalchemy.create_engine", return_value=_engine):
    from main import app  # noqa: E402

from constructflow.core.database import ensure_schema  # noqa: E402

ensure_schema(_engine)

TABLES = ("team_members", "snapshots", "projects")


@pytest.fixture(autouse=True)
def clean_database():
    with _engine.begin() as conn:
        for table in TABLES:
            conn.execute(text(f"DELETE FROM {table}"))
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def engine():
    return _engine
