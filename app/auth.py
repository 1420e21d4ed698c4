"""
Admin Authentication
====================
Shared-secret admin auth for the backfill tool.

API callers send `Authorization: Bearer <ADMIN_SECRET>`. Browser users log in
once through the form and carry an `admin_token` cookie holding a session
token from the in-memory session store.
"""

import enum
import hmac
import logging
import secrets
import threading
from typing import Optional

from cachetools import TTLCache
from fastapi import Depends, Request

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

SESSION_COOKIE = "admin_token"
NOT_CONFIGURED_MESSAGE = "Admin access not configured. Set ADMIN_SECRET env var."


class AuthStatus(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"


class SessionStore:
    """Session tokens with a fixed lifetime. Lost on restart."""

    def __init__(self, ttl_seconds: int, maxsize: int = 1000):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        self._lock = threading.Lock()

    def create(self) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._cache[token] = True
        return token

    def is_valid(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            return self._cache.get(token, False)

    def revoke(self, token: Optional[str]):
        if not token:
            return
        with self._lock:
            self._cache.pop(token, None)


def secret_matches(candidate: Optional[str], settings: Settings) -> bool:
    if not settings.admin_secret or not candidate:
        return False
    return hmac.compare_digest(candidate.encode(), settings.admin_secret.encode())


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


class AdminAuthError(Exception):
    """Admin request rejected. Rendered as {"error": message} by the app's handler."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def verify_admin(request: Request, settings: Settings, sessions: SessionStore):
    """
    Raise AdminAuthError unless the request carries admin credentials.
    503 when no secret is configured, 401 otherwise.
    """
    if not settings.admin_secret:
        raise AdminAuthError(NOT_CONFIGURED_MESSAGE, status_code=503)

    if secret_matches(_bearer_token(request), settings):
        return

    if sessions.is_valid(request.cookies.get(SESSION_COOKIE)):
        return

    raise AdminAuthError("Unauthorized", status_code=401)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.admin_sessions


async def require_admin(
    request: Request,
    settings: Settings = Depends(get_settings),
    sessions: SessionStore = Depends(get_session_store),
):
    """FastAPI dependency guarding the admin API."""
    verify_admin(request, settings, sessions)


class AdminSession:
    """
    Authentication state for one browser session.

    Starts UNAUTHENTICATED. login() moves through CHECKING while the secret is
    verified and ends AUTHENTICATED or back at UNAUTHENTICATED.
    """

    def __init__(self, settings: Settings, sessions: SessionStore, token: Optional[str] = None):
        self._settings = settings
        self._sessions = sessions
        self.token: Optional[str] = None
        self.status = AuthStatus.UNAUTHENTICATED
        if sessions.is_valid(token):
            self.token = token
            self.status = AuthStatus.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED

    def login(self, secret: str) -> bool:
        self.status = AuthStatus.CHECKING
        if secret_matches(secret, self._settings):
            self.token = self._sessions.create()
            self.status = AuthStatus.AUTHENTICATED
            logger.info("Admin login succeeded")
            return True
        self.token = None
        self.status = AuthStatus.UNAUTHENTICATED
        logger.warning("Admin login rejected")
        return False

    def logout(self):
        self._sessions.revoke(self.token)
        self.token = None
        self.status = AuthStatus.UNAUTHENTICATED


def get_admin_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    sessions: SessionStore = Depends(get_session_store),
) -> AdminSession:
    return AdminSession(settings, sessions, request.cookies.get(SESSION_COOKIE))
