# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Financial reports computed from the project list in the latest snapshot."""
from typing import Any, Dict, List

from constructflow.core.errors import NotFoundError
from constructflow.services import financials
from constructflow.services.snapshot_service import SnapshotService


class ReportService:
    def __init__(self, snapshots: SnapshotService):
        self._snapshots = snapshots

    def _projects(self) -> List[Any]:
        latest = self._snapshots.latest()
        payload = latest["payload"] if latest else None
        projects = payload.get("projects") if isinstance(payload, dict) else None
        if not isinstance(projects, list):
            raise NotFoundError("No snapshot with projects found")
        return projects

    def profit_loss(self) -> Dict[str, Any]:
        return financials.profit_loss(self._projects())

    def budget(self) -> Dict[str, Any]:
        return financials.budget_summary(self._projects())

    def project_status(self) -> List[Dict[str, Any]]:
        return financials.project_status(self._projects())
