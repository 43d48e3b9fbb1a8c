from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..ui_errors import UserFacingError


class ViewStateStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    PARTIAL_ERROR = "partial_error"
    FATAL_ERROR = "fatal_error"
    NO_PERMISSION = "no_permission"


@dataclass(frozen=True)
class ViewState:
    status: ViewStateStatus
    message: str | None = None
    trace_id: str | None = None
    data_available: bool = False
    transient: bool = False

    @property
    def is_ready(self) -> bool:
        return self.status in (ViewStateStatus.SUCCESS, ViewStateStatus.EMPTY)

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "trace_id": self.trace_id,
            "data_available": self.data_available,
            "transient": self.transient,
        }


def resolve_state(
    *,
    can_view: bool,
    is_loading: bool,
    error: UserFacingError | None,
    has_data: bool,
) -> ViewState:
    """Collapse permission, loading, failure and data presence into one presentable state.

    A failure after an earlier successful load keeps the previous data on screen
    (``PARTIAL_ERROR``); a failure with nothing loaded yet is ``FATAL_ERROR``.
    """
    if not can_view:
        return ViewState(ViewStateStatus.NO_PERMISSION, "Access denied")
    if is_loading:
        return ViewState(ViewStateStatus.LOADING, "Loading data...", data_available=has_data)
    if error is not None:
        status = ViewStateStatus.PARTIAL_ERROR if has_data else ViewStateStatus.FATAL_ERROR
        return ViewState(
            status,
            error.message,
            trace_id=error.trace_id,
            data_available=has_data,
            transient=error.transient,
        )
    if not has_data:
        return ViewState(ViewStateStatus.EMPTY, "No data found")
    return ViewState(ViewStateStatus.SUCCESS, "Ready", data_available=True)
