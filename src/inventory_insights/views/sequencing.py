from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..exceptions import ApiError

T = TypeVar("T")


class RequestSequencer:
    """Monotonic request counters, one per view slice.

    A result may be applied only if its sequence number is still the latest issued
    for its slice; anything older was superseded while in flight.
    """

    def __init__(self) -> None:
        self._latest: dict[str, int] = {}

    def next(self, key: str = "default") -> int:
        value = self._latest.get(key, 0) + 1
        self._latest[key] = value
        return value

    def latest(self, key: str = "default") -> int:
        return self._latest.get(key, 0)

    def is_latest(self, key: str, sequence: int) -> bool:
        return self._latest.get(key, 0) == sequence


@dataclass(frozen=True)
class Settled(Generic[T]):
    value: T | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.error is None and self.value is not None else default


async def _capture(awaitable: Awaitable[T]) -> Settled[T]:
    try:
        return Settled(value=await awaitable)
    except ApiError as exc:
        return Settled(error=exc)


async def settle(*awaitables: Awaitable[Any]) -> list[Settled[Any]]:
    """Run fetches concurrently and wait for every one of them to finish."""
    return list(await asyncio.gather(*(_capture(awaitable) for awaitable in awaitables)))


def first_failure(outcomes: Sequence[Settled[Any]]) -> ApiError | None:
    for outcome in outcomes:
        if outcome.error is not None:
            return outcome.error
    return None
