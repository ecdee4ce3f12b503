# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the ConstructFlow API."""
from prometheus_client import Counter, Histogram

TEAM_MUTATIONS = Counter(
    "team_member_mutations_total", "Team member writes", ["operation"]
)
PROJECT_MUTATIONS = Counter(
    "project_mutations_total", "Project writes", ["operation"]
)
SNAPSHOTS_CREATED = Counter(
    "snapshots_created_total", "Total snapshots stored"
)
BACKEND_ERRORS = Counter(
    "backend_errors_total", "Failed database calls", ["resource", "operation"]
)
POLICY_REJECTIONS = Counter(
    "policy_rejections_total", "Mutating requests rejected by the policy check", ["reason"]
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
