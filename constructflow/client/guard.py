# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Redirect logic for protected views and the root entry route.

The check is a single synchronous read per mount; a mounted view is
never revalidated.
"""
import functools
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel

from constructflow.client.session import AuthUser, SessionProvider

LOGIN_ROUTE = "/login"
DASHBOARD_ROUTE = "/dashboard"

T = TypeVar("T")
Navigate = Callable[[str], None]


class AccessDecision(BaseModel):
    user: Optional[AuthUser] = None
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.user is not None


def check_access(provider: SessionProvider) -> AccessDecision:
    user = provider.get()
    if user is None:
        return AccessDecision(redirect_to=LOGIN_ROUTE)
    return AccessDecision(user=user)


def entry_route(provider: SessionProvider) -> str:
    return DASHBOARD_ROUTE if check_access(provider).allowed else LOGIN_ROUTE


class ProtectedView:
    def __init__(self, provider: SessionProvider, navigate: Navigate):
        self._provider = provider
        self._navigate = navigate

    def mount(self, view: Callable[[AuthUser], T]) -> Optional[T]:
        """Render ``view`` with the session user, or redirect and render nothing."""
        decision = check_access(self._provider)
        if not decision.allowed:
            self._navigate(decision.redirect_to)
            return None
        return view(decision.user)


def protected(provider: SessionProvider, navigate: Navigate):
    guard = ProtectedView(provider, navigate)

    def decorator(view: Callable[[AuthUser], T]) -> Callable[[], Optional[T]]:
        @functools.wraps(view)
        def wrapper() -> Optional[T]:
            return guard.mount(view)
        return wrapper

    return decorator
