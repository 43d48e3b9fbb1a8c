from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from .auth_store import TokenStore
from .clients.auth import AuthClient
from .events import SessionEvents, SessionInvalidated
from .exceptions import ActionNotPermittedError, ApiError
from .http_client import HttpClient, RequestContext
from .models import Identity, Role, SessionData
from .ui_errors import to_user_facing_error

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class LoginResult:
    success: bool
    message: str
    identity: Identity | None = None
    error: ApiError | None = None
    trace_id: str | None = None


class SessionStore:
    """Owns the login/logout/revalidate state machine and the capability predicates.

    Transitions:
        UNAUTHENTICATED -> AUTHENTICATING   (restore with a persisted token, login)
        AUTHENTICATING  -> AUTHENTICATED    (who-am-I accepted the token)
        AUTHENTICATING  -> UNAUTHENTICATED  (any failure; persisted token discarded)
        any             -> UNAUTHENTICATED  (logout, authorization failure of the current epoch)

    ``epoch`` increases every time a session is established. Authorization failures are
    tagged with the epoch their request was sent under, so a late failure from an older
    session cannot tear down a newer one. ``_attempt`` increases on every login, restore
    and logout, so a logout issued while a login is in flight wins over its late result.
    """

    def __init__(
        self,
        http: HttpClient,
        token_store: TokenStore,
        events: SessionEvents,
        *,
        env_name: str | None = None,
        on_invalid_session: Callable[[str], None] | None = None,
    ) -> None:
        self._auth = AuthClient(http=http)
        self._token_store = token_store
        self._env_name = env_name
        self._on_invalid_session = on_invalid_session
        self._status = SessionStatus.UNAUTHENTICATED
        self._identity: Identity | None = None
        self._token: str | None = None
        self._epoch = 0
        self._attempt = 0
        http.add_request_hook(self._attach_credentials)
        self._unsubscribe = events.subscribe(self._on_session_invalidated)

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def identity(self) -> Identity | None:
        return self._identity if self.is_authenticated() else None

    @property
    def token(self) -> str | None:
        return self._token if self.is_authenticated() else None

    @property
    def epoch(self) -> int:
        return self._epoch

    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def is_admin(self) -> bool:
        return self.is_authenticated() and self._identity is not None and self._identity.role is Role.ADMIN

    def require_authenticated(self, action: str) -> Identity:
        if not self.is_authenticated() or self._identity is None:
            raise ActionNotPermittedError(
                code="AUTHENTICATION_REQUIRED",
                message=f"Sign in to {action}",
                details={"action": action},
            )
        return self._identity

    def require_admin(self, action: str) -> Identity:
        identity = self.require_authenticated(action)
        if identity.role is not Role.ADMIN:
            raise ActionNotPermittedError(
                code="PERMISSION_DENIED",
                message=f"Administrator role required to {action}",
                details={"action": action, "role": identity.role.value},
            )
        return identity

    async def restore(self) -> bool:
        """Revalidate a persisted token once; any failure discards it."""
        stored = self._token_store.load()
        if stored is None:
            return False
        attempt = self._begin_attempt()
        logger.info("session_restore_attempt")
        try:
            identity = await self._auth.me(own_failures=True, token=stored.token)
        except ApiError as exc:
            logger.warning("session_restore_failed", extra={"code": exc.code, "trace_id": exc.trace_id})
            if attempt == self._attempt:
                self._token_store.clear()
                self._reset()
            return False
        if attempt != self._attempt:
            return False
        self._establish(stored.token, identity)
        logger.info("session_restored", extra={"user_id": identity.id, "role": identity.role.value})
        return True

    async def login(self, username: str, password: str) -> LoginResult:
        if self._status is SessionStatus.AUTHENTICATING:
            error = ApiError(code="LOGIN_IN_PROGRESS", message="A sign-in is already in progress")
            return LoginResult(success=False, message=error.message, error=error)

        self._token_store.clear()
        attempt = self._begin_attempt()
        logger.info("login_attempt", extra={"username": username})
        try:
            issued = await self._auth.signin(username, password)
        except ApiError as exc:
            return self._login_failed(attempt, exc)
        if attempt != self._attempt:
            return self._login_superseded()

        self._token_store.save(SessionData(token=issued.token, env_name=self._env_name, saved_at=_now()))
        try:
            identity = await self._auth.me(own_failures=True, token=issued.token)
        except ApiError as exc:
            return self._login_failed(attempt, exc)
        if attempt != self._attempt:
            return self._login_superseded()

        self._establish(issued.token, identity)
        logger.info("login_success", extra={"username": identity.username, "role": identity.role.value})
        return LoginResult(success=True, message="Login successful", identity=identity)

    def logout(self, reason: str = "user_logout") -> None:
        self._attempt += 1
        self._token_store.clear()
        self._reset()
        logger.info("logout", extra={"reason": reason})

    def close(self) -> None:
        self._unsubscribe()

    def _begin_attempt(self) -> int:
        self._attempt += 1
        self._status = SessionStatus.AUTHENTICATING
        self._identity = None
        self._token = None
        return self._attempt

    def _establish(self, token: str, identity: Identity) -> None:
        self._token = token
        self._identity = identity
        self._epoch += 1
        self._status = SessionStatus.AUTHENTICATED
        self._token_store.save(
            SessionData(token=token, profile=identity, env_name=self._env_name, saved_at=_now())
        )

    def _reset(self) -> None:
        self._status = SessionStatus.UNAUTHENTICATED
        self._identity = None
        self._token = None

    def _login_failed(self, attempt: int, exc: ApiError) -> LoginResult:
        if attempt != self._attempt:
            return self._login_superseded()
        self._token_store.clear()
        self._reset()
        logger.warning("login_failure", extra={"code": exc.code, "status_code": exc.status_code, "trace_id": exc.trace_id})
        message = to_user_facing_error(exc).message
        return LoginResult(success=False, message=message, error=exc, trace_id=exc.trace_id)

    @staticmethod
    def _login_superseded() -> LoginResult:
        logger.info("login_superseded")
        error = ApiError(code="LOGIN_SUPERSEDED", message="Sign-in was cancelled")
        return LoginResult(success=False, message=error.message, error=error)

    def _attach_credentials(self, context: RequestContext) -> None:
        if context.meta.get("anonymous"):
            return
        token = context.meta.get("token") or self.token
        if token:
            context.headers["Authorization"] = f"Bearer {token}"
        context.meta.setdefault("session_epoch", self._epoch)

    def _on_session_invalidated(self, event: SessionInvalidated) -> None:
        if self._status is not SessionStatus.AUTHENTICATED:
            logger.info("session_invalidation_ignored", extra={"reason": self._status.value, "path": event.path})
            return
        if event.epoch != self._epoch:
            logger.info(
                "session_invalidation_ignored",
                extra={"reason": "stale_epoch", "event_epoch": event.epoch, "epoch": self._epoch},
            )
            return
        self.logout(reason="authorization_failure")
        logger.warning(
            "session_invalidated",
            extra={"status_code": event.status_code, "path": event.path, "trace_id": event.trace_id},
        )
        if self._on_invalid_session is not None:
            self._on_invalid_session("authorization_failure")


def _now() -> datetime:
    return datetime.now(timezone.utc)
