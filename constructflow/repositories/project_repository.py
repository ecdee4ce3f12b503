# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for projects."""
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from constructflow.core.errors import BackendError
from constructflow.core.logging import get_logger
from constructflow.metrics import BACKEND_ERRORS
from constructflow.repositories import as_iso

logger = get_logger(__name__)

PROJECT_COLS = "id, name, description, created_at"

FAILURES = {
    "list": "Failed to load projects",
    "load": "Failed to load project",
    "create": "Failed to create project",
    "update": "Failed to update project",
    "delete": "Failed to delete project",
}


def _row_to_project(row) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "name": row["name"],
        "description": row["description"] or "",
        "created_at": as_iso(row["created_at"]),
    }


class ProjectRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def _fail(self, operation: str, exc: SQLAlchemyError):
        logger.error("[projects %s] database error: %s", operation, exc)
        BACKEND_ERRORS.labels(resource="project", operation=operation).inc()
        return BackendError(FAILURES[operation], detail=str(exc))

    def list_projects(self) -> List[Dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {PROJECT_COLS} FROM projects ORDER BY created_at ASC, id ASC")
                ).mappings().all()
        except SQLAlchemyError as exc:
            raise self._fail("list", exc) from exc
        return [_row_to_project(r) for r in rows]

    def get_project(self, project_id: str) -> Optional[Dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT {PROJECT_COLS} FROM projects WHERE id = :id"),
                    {"id": project_id},
                ).mappings().first()
        except SQLAlchemyError as exc:
            raise self._fail("load", exc) from exc
        return _row_to_project(row) if row else None

    def insert_project(self, project_id: str, name: str, description: str,
                       created_at: str) -> Dict[str, Any]:
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    text("""
                        INSERT INTO projects (id, name, description, created_at)
                        VALUES (:id, :name, :description, :created_at)
                    """),
                    {"id": project_id, "name": name,
                     "description": description, "created_at": created_at},
                )
        except SQLAlchemyError as exc:
            raise self._fail("create", exc) from exc
        return {"id": project_id, "name": name,
                "description": description, "created_at": created_at}

    def update_project(self, project_id: str, updates: List[str],
                       params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            with self._engine.begin() as conn:
                if updates:
                    conn.execute(
                        text(f"UPDATE projects SET {', '.join(updates)} WHERE id = :id"),
                        dict(params, id=project_id),
                    )
                row = conn.execute(
                    text(f"SELECT {PROJECT_COLS} FROM projects WHERE id = :id"),
                    {"id": project_id},
                ).mappings().first()
        except SQLAlchemyError as exc:
            raise self._fail("update", exc) from exc
        return _row_to_project(row) if row else None

    def delete_project(self, project_id: str) -> int:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    text("DELETE FROM projects WHERE id = :id"), {"id": project_id}
                )
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc
        return result.rowcount
