# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business rules for team members: validation and full-record replacement."""
import uuid
from typing import Any, Dict, List

from constructflow.core.clock import Clock, system_clock, to_iso
from constructflow.core.errors import NotFoundError, ValidationError
from constructflow.core.logging import get_logger
from constructflow.metrics import TEAM_MUTATIONS
from constructflow.repositories.team_repository import TeamRepository

logger = get_logger(__name__)

REQUIRED_MESSAGE = "Name and role are required"


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a create/update body and map it to table columns.

    Optional fields that are omitted become NULL; updates never merge.
    """
    if _blank(data.get("name")) or _blank(data.get("role")):
        raise ValidationError(REQUIRED_MESSAGE)
    return {
        "name": data["name"].strip(),
        "role": data["role"].strip(),
        "email": data.get("email"),
        "phone": data.get("phone"),
        "avatar_url": data.get("avatarUrl"),
        "fallback": data.get("fallback"),
    }


class TeamService:
    def __init__(self, repo: TeamRepository, clock: Clock = system_clock):
        self._repo = repo
        self._clock = clock

    def list_members(self) -> List[Dict[str, Any]]:
        return self._repo.list_members()

    def create_member(self, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = to_columns(data)
        member_id = str(uuid.uuid4())
        member = self._repo.insert_member(member_id, columns, to_iso(self._clock()))
        TEAM_MUTATIONS.labels(operation="create").inc()
        logger.info("Team member created id=%s role=%s", member_id, columns["role"])
        return member

    def update_member(self, member_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = to_columns(data)
        member = self._repo.replace_member(member_id, columns)
        if member is None:
            raise NotFoundError("Team member not found")
        TEAM_MUTATIONS.labels(operation="update").inc()
        logger.info("Team member updated id=%s", member_id)
        return member

    def delete_member(self, member_id: str) -> None:
        affected = self._repo.delete_member(member_id)
        TEAM_MUTATIONS.labels(operation="delete").inc()
        logger.info("Team member delete id=%s affected=%s", member_id, affected)
