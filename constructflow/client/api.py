# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP client for the ConstructFlow API.

Every failure, whether transport or non-2xx status, surfaces as
``ResourceClientError`` with a fixed message naming the operation.
There is no retry.
"""
from typing import Any, Dict, List, Optional

import httpx

from constructflow.core.config import settings
from constructflow.core.logging import get_logger

logger = get_logger(__name__)


class ResourceClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ResourceClient:
    def __init__(self, base_url: Optional[str] = None,
                 http_client: Optional[httpx.Client] = None,
                 api_key: Optional[str] = None,
                 timeout: Optional[float] = None):
        self._base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout or settings.API_TIMEOUT)
        self._headers = {"Accept": "application/json"}
        if api_key:
            self._headers["X-API-Key"] = api_key

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ResourceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, failure: str,
                 json: Any = None) -> httpx.Response:
        try:
            resp = self._client.request(
                method, f"{self._base_url}{path}", json=json, headers=self._headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s unreachable: %s", method, path, exc)
            raise ResourceClientError(failure) from exc
        if not resp.is_success:
            logger.warning("%s %s returned %s", method, path, resp.status_code)
            raise ResourceClientError(failure, status_code=resp.status_code)
        return resp

    # ── Projects ───────────────────────────────────────────────────────

    def fetch_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/projects", "Failed to fetch projects").json()

    def fetch_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/projects/{project_id}", "Failed to fetch project").json()

    def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/projects", "Failed to create project", json=data).json()

    def update_project(self, project_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            "PATCH", f"/api/projects/{project_id}", "Failed to update project", json=data,
        ).json()

    def delete_project(self, project_id: str) -> bool:
        # 204, no body
        self._request("DELETE", f"/api/projects/{project_id}", "Failed to delete project")
        return True

    # ── Team ───────────────────────────────────────────────────────────

    def list_team(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/team", "Failed to fetch team members").json()["team"]

    def create_team_member(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/team", "Failed to create team member", json=data,
        ).json()["member"]

    def update_team_member(self, member_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(
            "PUT", f"/api/team/{member_id}", "Failed to update team member", json=data,
        ).json()["member"]

    def delete_team_member(self, member_id: str) -> bool:
        return self._request(
            "DELETE", f"/api/team/{member_id}", "Failed to delete team member",
        ).json()["ok"]

    # ── Snapshots ──────────────────────────────────────────────────────

    def list_snapshots(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/snapshot", "Failed to fetch snapshots").json()["data"]

    def save_snapshot(self, payload: Any, schema_version: int = 1) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/snapshot", "Failed to save snapshot",
            json={"schemaVersion": schema_version, "payload": payload},
        ).json()

    # ── Reports ────────────────────────────────────────────────────────

    def profit_loss_report(self) -> Dict[str, Any]:
        return self._request("GET", "/api/reports/profit-loss", "Failed to fetch profit and loss").json()

    def budget_report(self) -> Dict[str, Any]:
        return self._request("GET", "/api/reports/budget", "Failed to fetch budget report").json()

    def project_status_report(self) -> List[Dict[str, Any]]:
        return self._request(
            "GET", "/api/reports/project-status", "Failed to fetch project status",
        ).json()["data"]
