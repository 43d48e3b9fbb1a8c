from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ResponseFormatError
from ..http_client import HttpClient

M = TypeVar("M", bound=BaseModel)


@dataclass
class BaseClient:
    http: HttpClient
    module: str = "unknown"

    async def _request(self, method: str, path: str, *, operation: str = "unknown", **kwargs: Any) -> Any:
        return await self.http.request(method, path, module=self.module, operation=operation, **kwargs)

    async def _get_list(self, path: str, model_type: type[M], *, operation: str, params: dict[str, Any] | None = None) -> list[M]:
        data = await self._request("GET", path, operation=operation, params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ResponseFormatError(
                code="INVALID_RESPONSE",
                message=f"Expected a JSON array from {path}",
                status_code=200,
                raw_payload=data,
            )
        try:
            return TypeAdapter(list[model_type]).validate_python(data)
        except PydanticValidationError as exc:
            raise _format_error(path, exc, data) from exc

    async def _get_one(self, path: str, model_type: type[M], *, operation: str, params: dict[str, Any] | None = None) -> M:
        data = await self._request("GET", path, operation=operation, params=params)
        return parse_object(path, model_type, data)

    async def _send(
        self,
        method: str,
        path: str,
        model_type: type[M],
        *,
        operation: str,
        body: BaseModel | None = None,
        params: dict[str, Any] | None = None,
    ) -> M:
        json_body = body.model_dump(by_alias=True, exclude_none=True, mode="json") if body is not None else None
        data = await self._request(method, path, operation=operation, json_body=json_body, params=params)
        return parse_object(path, model_type, data)

    async def _delete(self, path: str, *, operation: str) -> None:
        await self._request("DELETE", path, operation=operation)


def parse_object(path: str, model_type: type[M], data: Any) -> M:
    if not isinstance(data, dict):
        raise ResponseFormatError(
            code="INVALID_RESPONSE",
            message=f"Expected a JSON object from {path}",
            status_code=200,
            raw_payload=data,
        )
    try:
        return model_type.model_validate(data)
    except PydanticValidationError as exc:
        raise _format_error(path, exc, data) from exc


def _format_error(path: str, exc: PydanticValidationError, data: Any) -> ResponseFormatError:
    return ResponseFormatError(
        code="INVALID_RESPONSE",
        message=f"Response from {path} does not match the expected shape",
        details=exc.errors(include_url=False),
        status_code=200,
        raw_payload=data,
    )
