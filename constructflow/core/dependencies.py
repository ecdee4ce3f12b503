# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""FastAPI dependency injection wiring."""
from constructflow.core.database import engine
from constructflow.repositories.project_repository import ProjectRepository
from constructflow.repositories.snapshot_repository import SnapshotRepository
from constructflow.repositories.team_repository import TeamRepository
from constructflow.services.project_service import ProjectService
from constructflow.services.report_service import ReportService
from constructflow.services.snapshot_service import SnapshotService
from constructflow.services.team_service import TeamService

_team_service = TeamService(TeamRepository(engine))
_snapshot_service = SnapshotService(SnapshotRepository(engine))
_project_service = ProjectService(ProjectRepository(engine))
_report_service = ReportService(_snapshot_service)


def get_engine():
    return engine


def get_team_service() -> TeamService:
    return _team_service


def get_snapshot_service() -> SnapshotService:
    return _snapshot_service


def get_project_service() -> ProjectService:
    return _project_service


def get_report_service() -> ReportService:
    return _report_service
