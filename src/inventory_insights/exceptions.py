from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None = None
    trace_id: str | None = None
    status_code: int = 0
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class NetworkError(ApiError):
    """Transport failure or timeout before an HTTP response was returned."""


class AuthorizationError(ApiError):
    """Missing, expired or rejected credentials (401/403)."""


class UnauthorizedError(AuthorizationError):
    pass


class ForbiddenError(AuthorizationError):
    pass


class ServerError(ApiError):
    """Business or server-side failure reported by the remote service."""


class BadRequestError(ServerError):
    pass


class NotFoundError(ServerError):
    pass


class ConflictError(ServerError):
    pass


class ResponseFormatError(ApiError):
    """Successful response whose body does not match the expected contract."""


class ActionNotPermittedError(ApiError):
    """Refused locally by the session capability gate; no request was sent."""
