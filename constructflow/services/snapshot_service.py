# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Append-only snapshot store with latest-N retrieval."""
import uuid
from typing import Any, Dict, List, Optional

from constructflow.core.clock import Clock, system_clock, to_iso
from constructflow.core.errors import MissingPayload
from constructflow.core.logging import get_logger
from constructflow.metrics import SNAPSHOTS_CREATED
from constructflow.repositories.snapshot_repository import SnapshotRepository

logger = get_logger(__name__)

SNAPSHOT_LIST_LIMIT = 20
CURRENT_SCHEMA_VERSION = 1


class SnapshotService:
    def __init__(self, repo: SnapshotRepository, clock: Clock = system_clock):
        self._repo = repo
        self._clock = clock

    def create_snapshot(self, payload: Any,
                        schema_version: int = CURRENT_SCHEMA_VERSION) -> Dict[str, Any]:
        # The payload is opaque; only its presence is checked.
        if payload is None:
            raise MissingPayload()
        snapshot_id = str(uuid.uuid4())
        created_at = to_iso(self._clock())
        self._repo.insert_snapshot(snapshot_id, schema_version, payload, created_at)
        SNAPSHOTS_CREATED.inc()
        logger.info("Snapshot stored id=%s schema_version=%s", snapshot_id, schema_version)
        return {"snapshotId": snapshot_id, "created_at": created_at}

    def list_recent(self) -> List[Dict[str, Any]]:
        return self._repo.list_latest(SNAPSHOT_LIST_LIMIT)

    def latest(self) -> Optional[Dict[str, Any]]:
        return self._repo.latest()
