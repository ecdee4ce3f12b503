# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Client side of the dashboard: session flag, view guard, API accessor."""
from constructflow.client.api import ResourceClient, ResourceClientError
from constructflow.client.guard import (
    DASHBOARD_ROUTE, LOGIN_ROUTE, AccessDecision, ProtectedView,
    check_access, entry_route, protected,
)
from constructflow.client.session import (
    AuthUser, MemorySessionProvider, SessionProvider, SessionStore,
    demo_login, demo_signup,
)
from constructflow.client.storage import LocalStorage

__all__ = [
    "AccessDecision", "AuthUser", "DASHBOARD_ROUTE", "LOGIN_ROUTE", "LocalStorage",
    "MemorySessionProvider", "ProtectedView", "ResourceClient", "ResourceClientError",
    "SessionProvider", "SessionStore", "check_access", "demo_login", "demo_signup",
    "entry_route", "protected",
]
