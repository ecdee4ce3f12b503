# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Session store
=============
The session is a capability flag, not a security boundary: a parseable
user record under one storage key means "logged in". Nothing expires and
nothing is verified server-side, so anyone able to write the key can
forge a session.

Callers depend on the ``SessionProvider`` protocol (get / set / clear) and
receive the provider explicitly, so the local-storage implementation can
later be swapped for a server-verified one.
"""
import uuid
from typing import Any, Dict, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as SchemaError

from constructflow.client.storage import LocalStorage
from constructflow.core.config import settings
from constructflow.core.logging import get_logger

logger = get_logger(__name__)


class AuthUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    email: str
    role: Optional[str] = None


UserLike = Union[AuthUser, Dict[str, Any]]


class SessionProvider(Protocol):
    def get(self) -> Optional[AuthUser]: ...

    def set(self, user: AuthUser) -> None: ...

    def clear(self) -> None: ...


def _coerce(user: UserLike) -> AuthUser:
    return user if isinstance(user, AuthUser) else AuthUser.model_validate(user)


class SessionStore:
    """Session provider backed by client-local storage.

    ``storage=None`` models a context without persistent storage (e.g. a
    render before hydration): reads return ``None`` and writes are no-ops.
    """

    def __init__(self, storage: Optional[LocalStorage], key: str = settings.SESSION_STORAGE_KEY):
        self._storage = storage
        self._key = key

    def get_current_user(self) -> Optional[AuthUser]:
        if self._storage is None:
            return None
        try:
            raw = self._storage.get_item(self._key)
            if not raw:
                return None
            return AuthUser.model_validate_json(raw)
        except (OSError, ValueError, SchemaError) as exc:
            logger.error("Failed to parse auth user from storage: %s", exc)
            return None

    def set_current_user(self, user: Optional[UserLike]) -> None:
        if self._storage is None:
            return
        try:
            if user:
                self._storage.set_item(self._key, _coerce(user).model_dump_json(exclude_none=True))
            else:
                self._storage.remove_item(self._key)
        except OSError as exc:
            logger.error("Failed to write auth user to storage: %s", exc)

    def is_logged_in(self) -> bool:
        return self.get_current_user() is not None

    def log_out(self) -> None:
        self.set_current_user(None)

    # SessionProvider
    def get(self) -> Optional[AuthUser]:
        return self.get_current_user()

    def set(self, user: AuthUser) -> None:
        self.set_current_user(user)

    def clear(self) -> None:
        self.log_out()


class MemorySessionProvider:
    """In-process provider; the session lives as long as the object."""

    def __init__(self, user: Optional[UserLike] = None):
        self._user = _coerce(user) if user else None

    def get(self) -> Optional[AuthUser]:
        return self._user

    def set(self, user: AuthUser) -> None:
        self._user = _coerce(user)

    def clear(self) -> None:
        self._user = None


# ── Demo auth ─────────────────────────────────────────────────────────────
# Any credentials are accepted; the password is never stored.

def _require_email(email: str) -> str:
    email = (email or "").strip()
    if not email:
        raise ValueError("email is required")
    return email


def demo_login(provider: SessionProvider, email: str, password: str = "") -> AuthUser:
    email = _require_email(email)
    user = AuthUser(id=str(uuid.uuid4()), name=email.split("@")[0] or email, email=email)
    provider.set(user)
    logger.info("Demo login email=%s", email)
    return user


def demo_signup(provider: SessionProvider, name: str, email: str, password: str = "") -> AuthUser:
    email = _require_email(email)
    user = AuthUser(
        id=str(uuid.uuid4()),
        name=(name or "").strip() or email.split("@")[0] or email,
        email=email,
    )
    provider.set(user)
    logger.info("Demo signup email=%s", email)
    return user
