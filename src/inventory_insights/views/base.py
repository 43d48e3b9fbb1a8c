from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..aggregation import DataIntegrityAnomaly
from ..exceptions import ActionNotPermittedError, ApiError, AuthorizationError, NetworkError
from ..http_client import HttpClient
from ..log import log_action
from ..models import Identity
from ..notifications import NotificationCenter
from ..session import SessionStore
from ..ui_errors import UserFacingError, to_user_facing_error
from ..validation import ValidationError, ValidationIssue
from .sequencing import RequestSequencer
from .view_state import ViewState, resolve_state

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    success: bool
    message: str
    data: T | None = None
    error: UserFacingError | None = None
    issues: tuple[ValidationIssue, ...] = ()


class BaseView(ABC):
    """Shared plumbing for orchestrators: capability checks, stale-result guard, failure reporting.

    Fetch failures never escape ``load``; they end up in ``state``/``error`` (and, for
    network failures, in the notification center). Mutations are gated by the session
    store before anything is sent and report their outcome as an ``ActionResult``.
    """

    module = "view"
    title = "View"
    admin_only = False

    def __init__(self, http: HttpClient, session: SessionStore, notifications: NotificationCenter) -> None:
        self.http = http
        self.session = session
        self.notifications = notifications
        self.sequencer = RequestSequencer()
        self.error: UserFacingError | None = None
        self.last_failure: ApiError | None = None
        self.anomalies: list[DataIntegrityAnomaly] = []
        self.state = resolve_state(can_view=self.can_view(), is_loading=False, error=None, has_data=False)

    def can_view(self) -> bool:
        if self.admin_only:
            return self.session.is_admin()
        return self.session.is_authenticated()

    def has_data(self) -> bool:
        return False

    @abstractmethod
    async def load(self) -> ViewState:
        """Fetch everything the view needs and return the resolved state."""

    def _begin(self, key: str) -> int | None:
        if not self.can_view():
            self.state = resolve_state(can_view=False, is_loading=False, error=None, has_data=False)
            return None
        sequence = self.sequencer.next(key)
        self.state = resolve_state(can_view=True, is_loading=True, error=None, has_data=self.has_data())
        return sequence

    def _is_current(self, key: str, sequence: int) -> bool:
        if self.sequencer.is_latest(key, sequence):
            return True
        logger.info(
            "stale_result_discarded",
            extra={"view": self.module, "slice": key, "sequence": sequence, "latest": self.sequencer.latest(key)},
        )
        return False

    def _succeed(self) -> ViewState:
        self.error = None
        self.last_failure = None
        self.state = resolve_state(can_view=self.can_view(), is_loading=False, error=None, has_data=self.has_data())
        return self.state

    def _fail(self, exc: ApiError) -> ViewState:
        logger.warning(
            "view_load_failed",
            extra={"view": self.module, "code": exc.code, "status_code": exc.status_code, "trace_id": exc.trace_id},
        )
        self.last_failure = exc
        self.error = self._report(exc)
        self.state = resolve_state(
            can_view=self.can_view(), is_loading=False, error=self.error, has_data=self.has_data()
        )
        return self.state

    def _report(self, exc: ApiError) -> UserFacingError:
        friendly = to_user_facing_error(exc)
        if isinstance(exc, NetworkError):
            self.notifications.push(
                level="warning",
                title=f"{self.title}: connection problem",
                message=friendly.message,
                details={"code": exc.code, "trace_id": exc.trace_id},
            )
        elif isinstance(exc, AuthorizationError):
            # the session store already reacted through the response middleware
            logger.info("view_authorization_failure", extra={"view": self.module, "status_code": exc.status_code})
        return friendly

    def _record_anomalies(self, anomalies: Iterable[DataIntegrityAnomaly]) -> None:
        self.anomalies = list(anomalies)
        for anomaly in self.anomalies:
            logger.warning(
                "data_integrity_anomaly",
                extra={"view": self.module, "kind": anomaly.kind.value, "subject": anomaly.subject},
            )

    def _actor_role(self) -> str | None:
        identity = self.session.identity
        return identity.role.value if identity is not None else None

    async def _run_action(
        self,
        action: str,
        call: Callable[[Identity], Awaitable[T]],
        *,
        admin_only: bool,
        success_message: str,
    ) -> ActionResult[T]:
        role = self._actor_role()
        try:
            if admin_only:
                identity = self.session.require_admin(action)
            else:
                identity = self.session.require_authenticated(action)
        except ActionNotPermittedError as exc:
            log_action(logger, self.module, action, role, None, "denied")
            return ActionResult(success=False, message=exc.message, error=to_user_facing_error(exc))

        log_action(logger, self.module, action, role, None, "allowed")
        try:
            data = await call(identity)
        except ValidationError as exc:
            log_action(logger, self.module, action, role, None, "failed")
            return ActionResult(success=False, message=str(exc), issues=tuple(exc.issues))
        except ApiError as exc:
            log_action(logger, self.module, action, role, exc.trace_id, "failed")
            friendly = self._report(exc)
            return ActionResult(success=False, message=friendly.message, error=friendly)

        operation = self.http.last_operation
        log_action(logger, self.module, action, role, operation.trace_id if operation else None, "succeeded")
        self.notifications.push(level="success", title=self.title, message=success_message)
        return ActionResult(success=True, message=success_message, data=data)

    async def _refresh_after(self, result: ActionResult[Any]) -> None:
        if result.success:
            await self.load()
