# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for team members."""
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from constructflow.core.errors import BackendError, DeleteFailed
from constructflow.core.logging import get_logger
from constructflow.metrics import BACKEND_ERRORS
from constructflow.repositories import as_iso

logger = get_logger(__name__)

MEMBER_COLS = "id, name, role, email, phone, avatar_url, fallback, created_at"


def _row_to_member(row) -> Dict[str, Any]:
    """Map a ``team_members`` row to the camel-cased external shape."""
    return {
        "id": str(row["id"]),
        "name": row["name"],
        "role": row["role"],
        "email": row["email"],
        "phone": row["phone"],
        "avatarUrl": row["avatar_url"],
        "fallback": row["fallback"],
        "created_at": as_iso(row["created_at"]),
    }


class TeamRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_members(self) -> List[Dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM team_members ORDER BY created_at ASC, id ASC")
                ).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("[team list] database error: %s", exc)
            BACKEND_ERRORS.labels(resource="team", operation="list").inc()
            raise BackendError("Failed to load team members", detail=str(exc)) from exc
        return [_row_to_member(r) for r in rows]

    # ── Write ──────────────────────────────────────────────────────────

    def insert_member(self, member_id: str, fields: Dict[str, Any],
                      created_at: str) -> Dict[str, Any]:
        params = dict(fields, id=member_id, created_at=created_at)
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    text("""
                        INSERT INTO team_members
                            (id, name, role, email, phone, avatar_url, fallback, created_at)
                        VALUES
                            (:id, :name, :role, :email, :phone, :avatar_url, :fallback, :created_at)
                    """),
                    params,
                )
                row = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM team_members WHERE id = :id"),
                    {"id": member_id},
                ).mappings().first()
        except SQLAlchemyError as exc:
            logger.error("[team create] database error: %s", exc)
            BACKEND_ERRORS.labels(resource="team", operation="create").inc()
            raise BackendError("Failed to create team member", detail=str(exc)) from exc
        if not row:
            raise BackendError("Failed to create team member")
        return _row_to_member(row)

    def replace_member(self, member_id: str,
                       fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Rewrite every mutable column; ``None`` when no row has that id."""
        params = dict(fields, id=member_id)
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    text("""
                        UPDATE team_members
                        SET name = :name, role = :role, email = :email, phone = :phone,
                            avatar_url = :avatar_url, fallback = :fallback
                        WHERE id = :id
                    """),
                    params,
                )
                if result.rowcount == 0:
                    return None
                row = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM team_members WHERE id = :id"),
                    {"id": member_id},
                ).mappings().first()
        except SQLAlchemyError as exc:
            logger.error("[team update] database error id=%s: %s", member_id, exc)
            BACKEND_ERRORS.labels(resource="team", operation="update").inc()
            raise BackendError("Failed to update team member", detail=str(exc)) from exc
        return _row_to_member(row) if row else None

    def delete_member(self, member_id: str) -> int:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    text("DELETE FROM team_members WHERE id = :id"), {"id": member_id}
                )
        except SQLAlchemyError as exc:
            logger.error("[team delete] database error id=%s: %s", member_id, exc)
            BACKEND_ERRORS.labels(resource="team", operation="delete").inc()
            raise DeleteFailed("Failed to delete team member", detail=str(exc)) from exc
        return result.rowcount
