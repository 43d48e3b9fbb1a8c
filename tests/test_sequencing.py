from __future__ import annotations

import asyncio

from inventory_insights.exceptions import NetworkError
from inventory_insights.views.sequencing import RequestSequencer, first_failure, settle


def test_sequencer_tracks_latest_per_slice() -> None:
    sequencer = RequestSequencer()
    first = sequencer.next("reports")
    second = sequencer.next("reports")
    other = sequencer.next("dashboard")

    assert sequencer.is_latest("reports", second)
    assert not sequencer.is_latest("reports", first)
    assert sequencer.is_latest("dashboard", other)
    assert sequencer.latest("unknown") == 0


def test_settle_waits_for_every_outcome() -> None:
    finished: list[str] = []

    async def ok(name: str, delay: float) -> str:
        await asyncio.sleep(delay)
        finished.append(name)
        return name

    async def broken() -> str:
        raise NetworkError(code="NETWORK_ERROR", message="down")

    outcomes = asyncio.run(settle(ok("slow", 0.02), broken(), ok("fast", 0)))

    assert [outcome.ok for outcome in outcomes] == [True, False, True]
    assert outcomes[0].value == "slow"
    assert sorted(finished) == ["fast", "slow"]
    assert outcomes[1].value_or("fallback") == "fallback"
    failure = first_failure(outcomes)
    assert failure is not None and failure.code == "NETWORK_ERROR"
