# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for projects."""
import uuid
from typing import Any, Dict, List, Optional

from constructflow.core.clock import Clock, system_clock, to_iso
from constructflow.core.errors import NotFoundError
from constructflow.core.logging import get_logger
from constructflow.metrics import PROJECT_MUTATIONS
from constructflow.repositories.project_repository import ProjectRepository

logger = get_logger(__name__)

DEFAULT_NAME = "Untitled project"
NOT_FOUND = "Project not found"


class ProjectService:
    def __init__(self, repo: ProjectRepository, clock: Clock = system_clock):
        self._repo = repo
        self._clock = clock

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._repo.list_projects()

    def get_project(self, project_id: str) -> Dict[str, Any]:
        project = self._repo.get_project(project_id)
        if project is None:
            raise NotFoundError(NOT_FOUND)
        return project

    def create_project(self, name: Optional[str] = None,
                       description: Optional[str] = None) -> Dict[str, Any]:
        project_id = str(uuid.uuid4())
        project = self._repo.insert_project(
            project_id, name or DEFAULT_NAME, description or "", to_iso(self._clock()),
        )
        PROJECT_MUTATIONS.labels(operation="create").inc()
        logger.info("Project created id=%s", project_id)
        return project

    def update_project(self, project_id: str, name: Optional[str] = None,
                       description: Optional[str] = None) -> Dict[str, Any]:
        updates: List[str] = []
        params: Dict[str, Any] = {}
        if name is not None:
            updates.append("name = :name")
            params["name"] = name
        if description is not None:
            updates.append("description = :description")
            params["description"] = description

        project = self._repo.update_project(project_id, updates, params)
        if project is None:
            raise NotFoundError(NOT_FOUND)
        PROJECT_MUTATIONS.labels(operation="update").inc()
        logger.info("Project updated id=%s fields=%s", project_id, sorted(params))
        return project

    def delete_project(self, project_id: str) -> None:
        if self._repo.delete_project(project_id) == 0:
            raise NotFoundError(NOT_FOUND)
        PROJECT_MUTATIONS.labels(operation="delete").inc()
        logger.info("Project deleted id=%s", project_id)
