# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: team member CRUD."""
from fastapi import APIRouter, Depends

from constructflow.core.dependencies import get_team_service
from constructflow.schemas import (
    OkResponse, TeamList, TeamMemberEnvelope, TeamMemberIn, TeamMemberOut,
)
from constructflow.services.team_service import TeamService

router = APIRouter(prefix="/api", tags=["Team"])


@router.get("/team", response_model=TeamList)
def list_team(service: TeamService = Depends(get_team_service)):
    return TeamList(team=[TeamMemberOut(**m) for m in service.list_members()])


@router.post("/team", response_model=TeamMemberEnvelope)
def create_team_member(body: TeamMemberIn,
                       service: TeamService = Depends(get_team_service)):
    member = service.create_member(body.model_dump())
    return TeamMemberEnvelope(member=TeamMemberOut(**member))


@router.put("/team/{member_id}", response_model=TeamMemberEnvelope)
def update_team_member(member_id: str, body: TeamMemberIn,
                       service: TeamService = Depends(get_team_service)):
    member = service.update_member(member_id, body.model_dump())
    return TeamMemberEnvelope(member=TeamMemberOut(**member))


@router.delete("/team/{member_id}", response_model=OkResponse)
def delete_team_member(member_id: str,
                       service: TeamService = Depends(get_team_service)):
    service.delete_member(member_id)
    return OkResponse()
