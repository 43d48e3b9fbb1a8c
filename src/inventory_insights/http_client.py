from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from .config import ClientConfig
from .error_mapper import map_error
from .events import SessionEvents, SessionInvalidated
from .exceptions import NetworkError, ResponseFormatError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = frozenset({401, 403})


@dataclass
class RequestContext:
    method: str
    path: str
    headers: dict[str, str]
    params: dict[str, Any] | None = None
    json_body: Any = None
    meta: dict[str, Any] = field(default_factory=dict)


RequestHook = Callable[[RequestContext], None]
ResponseHook = Callable[[RequestContext, httpx.Response], None]


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    """Async JSON transport with request/response middleware.

    Each call is a single attempt: transport failures surface as ``NetworkError``
    and non-2xx responses as the ``ApiError`` subclass chosen by ``map_error``.
    """

    config: ClientConfig
    client: httpx.AsyncClient | None = None
    request_hooks: list[RequestHook] = field(default_factory=list)
    response_hooks: list[ResponseHook] = field(default_factory=list)
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.config.api_base_url,
                timeout=httpx.Timeout(
                    self.config.read_timeout_seconds,
                    connect=self.config.connect_timeout_seconds,
                ),
                limits=httpx.Limits(max_connections=self.config.max_connections),
                verify=self.config.verify_ssl,
            )

    def add_request_hook(self, hook: RequestHook) -> None:
        self.request_hooks.append(hook)

    def add_response_hook(self, hook: ResponseHook) -> None:
        self.response_hooks.append(hook)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> Any:
        if self.client is None:
            raise RuntimeError("HTTP client not initialized")
        trace = TraceContext()
        request_headers = {"Accept": "application/json", TRACE_HEADER: trace.ensure()}
        if headers:
            request_headers.update(headers)
        context = RequestContext(
            method=method.upper(),
            path=path if path.startswith("/") else f"/{path}",
            headers=request_headers,
            params=params,
            json_body=json_body,
            meta=dict(meta or {}),
        )
        for hook in self.request_hooks:
            hook(context)

        started = time.monotonic()
        try:
            response = await self.client.request(
                context.method,
                context.path,
                headers=context.headers,
                params=context.params,
                json=context.json_body,
            )
        except httpx.TimeoutException as exc:
            self._record_operation(module, operation, started, "network_error", trace.trace_id)
            raise NetworkError(
                code="TIMEOUT_ERROR",
                message="The inventory service took too long to respond",
                details={"type": type(exc).__name__},
                trace_id=trace.trace_id,
                status_code=0,
            ) from exc
        except httpx.TransportError as exc:
            self._record_operation(module, operation, started, "network_error", trace.trace_id)
            raise NetworkError(
                code="NETWORK_ERROR",
                message=str(exc) or "Could not reach the inventory service",
                details={"type": type(exc).__name__},
                trace_id=trace.trace_id,
                status_code=0,
            ) from exc

        trace.update_from_headers(response.headers)
        context.meta["trace_id"] = trace.trace_id
        for response_hook in self.response_hooks:
            response_hook(context, response)

        if response.is_success:
            if not response.content:
                self._record_operation(module, operation, started, "success", trace.trace_id)
                return None
            try:
                data = response.json()
            except ValueError as exc:
                self._record_operation(module, operation, started, "error", trace.trace_id)
                raise ResponseFormatError(
                    code="INVALID_RESPONSE",
                    message=f"Expected a JSON body from {context.path}",
                    details={"content_type": response.headers.get("content-type")},
                    trace_id=trace.trace_id,
                    status_code=response.status_code,
                    raw_payload=response.text,
                ) from exc
            self._record_operation(module, operation, started, "success", trace.trace_id)
            return data

        payload: Any
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text or response.reason_phrase}
        if not isinstance(payload, dict):
            payload = {"message": str(payload)}
        self._record_operation(module, operation, started, "error", trace.trace_id)
        raise map_error(response.status_code, payload, trace.trace_id)

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )


def unauthorized_policy(events: SessionEvents) -> ResponseHook:
    """Response hook that turns 401/403 into a single ``SessionInvalidated`` event."""

    def hook(context: RequestContext, response: httpx.Response) -> None:
        if response.status_code not in AUTH_FAILURE_STATUSES:
            return
        if context.meta.get("skip_auth_policy"):
            return
        logger.warning(
            "authorization_failure",
            extra={"status_code": response.status_code, "path": context.path},
        )
        events.publish(
            SessionInvalidated(
                epoch=context.meta.get("session_epoch"),
                status_code=response.status_code,
                path=context.path,
                trace_id=context.meta.get("trace_id"),
            )
        )

    return hook
