from __future__ import annotations

from cashup_client_sdk.idempotency import SubmissionIdFactory


def test_ids_are_unique_within_one_millisecond() -> None:
    factory = SubmissionIdFactory(clock=lambda: 1704099603.842)
    ids = [factory() for _ in range(500)]
    assert len(set(ids)) == 500
    assert ids == sorted(ids)
    assert ids[0].startswith("1704099603842-000001-")


def test_ids_do_not_go_backwards_with_the_clock() -> None:
    ticks = iter([1704099603.842, 1704099600.000])
    factory = SubmissionIdFactory(clock=lambda: next(ticks))
    first = factory()
    second = factory()
    assert second > first
    assert second.startswith("1704099603842-")
