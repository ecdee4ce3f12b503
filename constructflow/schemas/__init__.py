# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# ── Team ─────────────────────────────────────────────────────────────────
class TeamMemberIn(BaseModel):
    """Body of POST /api/team and PUT /api/team/{id}.

    Everything is optional at the schema level so that a missing name or
    role surfaces as the 400 raised by the service, not a 422.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatarUrl: Optional[str] = None
    fallback: Optional[str] = None


class TeamMemberOut(BaseModel):
    id: str
    name: str
    role: str
    email: Optional[str]
    phone: Optional[str]
    avatarUrl: Optional[str]
    fallback: Optional[str]


class TeamList(BaseModel):
    team: List[TeamMemberOut]


class TeamMemberEnvelope(BaseModel):
    member: TeamMemberOut


class OkResponse(BaseModel):
    ok: bool = True


# ── Snapshots ────────────────────────────────────────────────────────────
class SnapshotIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    payload: Any = None
    schemaVersion: int = Field(1, ge=1)


class SnapshotOut(BaseModel):
    id: str
    schemaVersion: int
    payload: Any
    created_at: str


class SnapshotList(BaseModel):
    ok: bool = True
    count: int
    data: List[SnapshotOut]


class SnapshotCreated(BaseModel):
    ok: bool = True
    snapshotId: str
    created_at: str


# ── Projects ─────────────────────────────────────────────────────────────
class ProjectIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None


class ProjectOut(BaseModel):
    id: str
    name: str
    description: str
    created_at: str
