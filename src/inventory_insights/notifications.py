from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class NotificationCenter:
    """Transient notices for the presentation layer (toasts)."""

    messages: list[dict[str, Any]] = field(default_factory=list)

    def push(self, *, level: str, title: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
        payload = {
            "level": level,
            "title": title,
            "message": message,
            "details": details or {},
        }
        self.messages.append(payload)
        return payload

    def latest(self) -> dict[str, Any] | None:
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        self.messages.clear()
