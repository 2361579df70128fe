from __future__ import annotations

import threading

import pytest

from agent_ranking.collection.barrier import CompletionBarrier
from agent_ranking.collection.errors import BarrierError, BarrierTimeoutError
from agent_ranking.domain.listings import PageOutcome


def test_releases_once_every_page_arrived() -> None:
    barrier = CompletionBarrier(target=3)
    for page in (3, 1, 2):
        threading.Thread(target=barrier.arrive, args=(page,)).start()

    outcomes = barrier.wait(timeout=5.0)

    assert [outcome.page for outcome in outcomes] == [1, 2, 3]
    assert all(outcome.status == "aggregated" for outcome in outcomes)


def test_dropped_pages_count_toward_completion() -> None:
    barrier = CompletionBarrier(target=2)
    barrier.arrive(1)
    barrier.arrive(2, error="page=2: transport error")

    assert barrier.wait(timeout=1.0) == [
        PageOutcome(page=1, status="aggregated"),
        PageOutcome(page=2, status="dropped", error="page=2: transport error"),
    ]


def test_zero_target_does_not_block() -> None:
    assert CompletionBarrier(target=0).wait(timeout=0.1) == []


def test_same_page_cannot_arrive_twice() -> None:
    barrier = CompletionBarrier(target=2)
    barrier.arrive(1)

    with pytest.raises(BarrierError):
        barrier.arrive(1)
    assert barrier.arrived == 1


def test_cannot_arrive_beyond_target() -> None:
    barrier = CompletionBarrier(target=1)
    barrier.arrive(1)

    with pytest.raises(BarrierError):
        barrier.arrive(2)


def test_wait_times_out_with_progress_details() -> None:
    barrier = CompletionBarrier(target=2)
    barrier.arrive(1)

    with pytest.raises(BarrierTimeoutError) as excinfo:
        barrier.wait(timeout=0.05)

    assert excinfo.value.arrived == 1
    assert excinfo.value.target == 2


def test_rejects_negative_target() -> None:
    with pytest.raises(ValueError):
        CompletionBarrier(target=-1)
