# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
ConstructFlow API
=================
Backend for the construction-project dashboard: team members, projects,
append-only snapshots of the dashboard state, and chart-ready financial
reports computed from the latest snapshot.

    GET/POST        /api/team
    PUT/DELETE      /api/team/{id}
    GET/POST        /api/snapshot
    GET/POST        /api/projects
    GET/PATCH/DEL   /api/projects/{id}
    GET             /api/reports/{profit-loss,budget,project-status}

Port: 4000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from constructflow.controllers import (
    project_controller,
    report_controller,
    snapshot_controller,
    system_controller,
    team_controller,
)
from constructflow.core.config import settings
from constructflow.core.database import engine, ensure_schema
from constructflow.core.errors import ServiceError
from constructflow.core.logging import get_logger
from constructflow.middleware import MetricsMiddleware, MutationPolicyMiddleware, RequestIDMiddleware

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    try:
        ensure_schema(engine)
        logger.info("Database schema verified")
    except Exception:
        logger.warning("Could not verify schema: DB may not be ready yet")
    yield
    engine.dispose()
    logger.info("Shutting down: connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="ConstructFlow API",
    description="Team, project and snapshot persistence for the construction dashboard.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(MutationPolicyMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail or exc.message)
    content = {"error": exc.message}
    if exc.detail:
        content["detail"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "detail": str(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


app.include_router(system_controller.router)
app.include_router(team_controller.router)
app.include_router(snapshot_controller.router)
app.include_router(project_controller.router)
app.include_router(report_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=4000, log_level="info")
