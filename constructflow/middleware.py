# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP Middleware: request ID propagation, Prometheus metrics, mutation policy."""
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from constructflow.core.config import settings
from constructflow.metrics import HTTP_ERRORS, POLICY_REJECTIONS, REQUEST_COUNT, REQUEST_LATENCY

SKIP_PATHS = ("/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def _endpoint_label(request: Request) -> str:
    """Route template of the matched route, so ids never become label values."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start
        if request.url.path not in SKIP_PATHS:
            endpoint = _endpoint_label(request)
            REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=str(response.status_code)).inc()
            REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(duration)
            if response.status_code >= 400:
                HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=str(response.status_code)).inc()
        return response


class MutationPolicyMiddleware(BaseHTTPMiddleware):
    """Only a known principal may write under /api/; reads are never checked."""

    def __init__(self, app, api_keys=None):
        super().__init__(app)
        self._api_keys = settings.API_KEYS if api_keys is None else set(api_keys)

    async def dispatch(self, request: Request, call_next):
        if (
            not self._api_keys
            or request.method not in settings.MUTATING_METHODS
            or not request.url.path.startswith("/api/")
        ):
            return await call_next(request)
        api_key = request.headers.get("X-API-Key")
        if not api_key:
            POLICY_REJECTIONS.labels(reason="missing_key").inc()
            return JSONResponse(
                status_code=401,
                content={"error": "Missing API key. Provide X-API-Key header."},
            )
        if api_key not in self._api_keys:
            POLICY_REJECTIONS.labels(reason="invalid_key").inc()
            return JSONResponse(status_code=403, content={"error": "Invalid API key."})
        return await call_next(request)
