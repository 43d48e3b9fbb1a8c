from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionInvalidated:
    epoch: int | None
    status_code: int
    path: str
    trace_id: str | None = None


SessionListener = Callable[[SessionInvalidated], None]


class SessionEvents:
    """Synchronous fan-out of session invalidation signals to subscribers."""

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: SessionInvalidated) -> None:
        logger.info(
            "session_invalidation_published",
            extra={"status_code": event.status_code, "path": event.path, "trace_id": event.trace_id},
        )
        for listener in list(self._listeners):
            listener(event)
