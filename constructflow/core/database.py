# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine singleton and schema bootstrap."""
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine

from constructflow.core.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    pool_size=settings.POOL_SIZE,
    max_overflow=settings.MAX_OVERFLOW,
    pool_recycle=settings.POOL_RECYCLE,
)

# Portable DDL: runs unchanged on PostgreSQL and SQLite.
SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS team_members (
        id VARCHAR(36) PRIMARY KEY,
        name TEXT NOT NULL,
        role TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        avatar_url TEXT,
        fallback TEXT,
        created_at VARCHAR(40) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS snapshots (
        id VARCHAR(36) PRIMARY KEY,
        schema_version INTEGER NOT NULL DEFAULT 1,
        payload TEXT NOT NULL,
        created_at VARCHAR(40) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id VARCHAR(36) PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        created_at VARCHAR(40) NOT NULL
    )
    """,
)


# Columns added after a table first shipped; CREATE TABLE IF NOT EXISTS
# leaves an existing table untouched, so these are added when missing.
ADDED_COLUMNS = (
    ("snapshots", "schema_version", "INTEGER NOT NULL DEFAULT 1"),
)


def ensure_schema(bind: Engine) -> None:
    with bind.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))
        inspector = inspect(conn)
        for table, column, ddl_type in ADDED_COLUMNS:
            existing = {c["name"] for c in inspector.get_columns(table)}
            if column not in existing:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl_type}"))


def verify_connection(bind: Engine) -> None:
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))
