from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ActionNotPermittedError, ApiError, NetworkError

NETWORK_MESSAGE = "Cannot reach the inventory service. Check your connection and try again."


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    trace_id: str | None = None
    transient: bool = False

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    if isinstance(exc, NetworkError) and exc.code == "NETWORK_ERROR":
        primary = NETWORK_MESSAGE
        details = f"{exc.code}: {exc.message}"
    else:
        primary = exc.message.strip() or "Request failed"
        details = exc.code if isinstance(exc, ActionNotPermittedError) else f"{exc.code} (HTTP {exc.status_code})"
        if exc.details:
            details = f"{details}: {exc.details}"
    return UserFacingError(
        message=primary,
        details=details,
        trace_id=exc.trace_id,
        transient=isinstance(exc, NetworkError),
    )
