# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: snapshots. Every answer carries the ``ok`` flag."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError
from starlette.concurrency import run_in_threadpool

from constructflow.core.dependencies import get_snapshot_service
from constructflow.core.errors import MissingPayload, ServiceError
from constructflow.core.logging import get_logger
from constructflow.schemas import SnapshotCreated, SnapshotIn, SnapshotList, SnapshotOut
from constructflow.services.snapshot_service import SnapshotService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Snapshots"])


def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error})


@router.get("/snapshot", response_model=SnapshotList)
def list_snapshots(service: SnapshotService = Depends(get_snapshot_service)):
    try:
        snapshots = service.list_recent()
        return SnapshotList(count=len(snapshots), data=[SnapshotOut(**s) for s in snapshots])
    except ServiceError as exc:
        return _failure(exc.status_code, exc.message)
    except Exception:
        logger.exception("[snapshot GET] unexpected error")
        return _failure(500, "Failed to load snapshots")


@router.post("/snapshot", response_model=SnapshotCreated)
async def create_snapshot(request: Request,
                          service: SnapshotService = Depends(get_snapshot_service)):
    try:
        body = await request.json()
    except ValueError:
        return _failure(400, "Invalid JSON body")
    if not isinstance(body, dict):
        return _failure(400, MissingPayload.default_message)
    try:
        envelope = SnapshotIn.model_validate(body)
    except SchemaError:
        return _failure(400, "schemaVersion must be a positive integer")
    try:
        result = await run_in_threadpool(
            service.create_snapshot, envelope.payload, envelope.schemaVersion,
        )
        return SnapshotCreated(**result)
    except ServiceError as exc:
        return _failure(exc.status_code, exc.message)
    except Exception:
        logger.exception("[snapshot POST] unexpected error")
        return _failure(500, "Failed to save snapshot")
