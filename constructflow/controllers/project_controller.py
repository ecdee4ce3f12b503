# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: project CRUD."""
from typing import List

from fastapi import APIRouter, Depends
from starlette.responses import Response

from constructflow.core.dependencies import get_project_service
from constructflow.schemas import ProjectIn, ProjectOut
from constructflow.services.project_service import ProjectService

router = APIRouter(prefix="/api", tags=["Projects"])


@router.get("/projects", response_model=List[ProjectOut])
def list_projects(service: ProjectService = Depends(get_project_service)):
    return [ProjectOut(**p) for p in service.list_projects()]


@router.get("/projects/{project_id}", response_model=ProjectOut)
def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return ProjectOut(**service.get_project(project_id))


@router.post("/projects", status_code=201, response_model=ProjectOut)
def create_project(body: ProjectIn = None,
                   service: ProjectService = Depends(get_project_service)):
    body = body or ProjectIn()
    return ProjectOut(**service.create_project(body.name, body.description))


@router.patch("/projects/{project_id}", response_model=ProjectOut)
def update_project(project_id: str, body: ProjectIn,
                   service: ProjectService = Depends(get_project_service)):
    return ProjectOut(**service.update_project(project_id, body.name, body.description))


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    service.delete_project(project_id)
    return Response(status_code=204)
