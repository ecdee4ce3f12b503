# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for snapshots (append-only)."""
import json
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from constructflow.core.errors import BackendError
from constructflow.core.logging import get_logger
from constructflow.metrics import BACKEND_ERRORS
from constructflow.repositories import as_iso

logger = get_logger(__name__)

SNAPSHOT_COLS = "id, schema_version, payload, created_at"


def _row_to_snapshot(row) -> Dict[str, Any]:
    payload = row["payload"]
    return {
        "id": str(row["id"]),
        "schemaVersion": row["schema_version"] or 1,
        "payload": json.loads(payload) if isinstance(payload, (str, bytes)) else payload,
        "created_at": as_iso(row["created_at"]),
    }


class SnapshotRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def insert_snapshot(self, snapshot_id: str, schema_version: int,
                        payload: Any, created_at: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    text("""
                        INSERT INTO snapshots (id, schema_version, payload, created_at)
                        VALUES (:id, :schema_version, :payload, :created_at)
                    """),
                    {
                        "id": snapshot_id,
                        "schema_version": schema_version,
                        "payload": json.dumps(payload),
                        "created_at": created_at,
                    },
                )
        except SQLAlchemyError as exc:
            logger.error("[snapshot POST] database error: %s", exc)
            BACKEND_ERRORS.labels(resource="snapshot", operation="create").inc()
            raise BackendError("Failed to save snapshot", detail=str(exc)) from exc

    def list_latest(self, limit: int) -> List[Dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"""
                        SELECT {SNAPSHOT_COLS} FROM snapshots
                        ORDER BY created_at DESC, id DESC
                        LIMIT :limit
                    """),
                    {"limit": limit},
                ).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("[snapshot GET] database error: %s", exc)
            BACKEND_ERRORS.labels(resource="snapshot", operation="list").inc()
            raise BackendError("Failed to load snapshots", detail=str(exc)) from exc
        return [_row_to_snapshot(r) for r in rows]

    def latest(self) -> Optional[Dict[str, Any]]:
        rows = self.list_latest(1)
        return rows[0] if rows else None
