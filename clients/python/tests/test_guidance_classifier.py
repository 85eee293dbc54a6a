from __future__ import annotations

import pytest

from cashup_client_sdk.guidance import GuidanceKind, classify_row, render


def _kind(count=0, float_units=0, borrow=0, returned=0, owed=0, target=10) -> GuidanceKind:
    return classify_row(
        count=count,
        float_units=float_units,
        borrow=borrow,
        returned=returned,
        owed=owed,
        target_float=target,
    ).kind


@pytest.mark.parametrize(
    ("inputs", "expected"),
    [
        ({"count": 20, "float_units": 12}, GuidanceKind.REVIEW_FLOAT),
        ({"count": 4, "float_units": 6}, GuidanceKind.REVIEW_FLOAT),
        ({"count": 20, "float_units": 10, "returned": 6, "owed": 5}, GuidanceKind.RETURNED_TOO_MUCH),
        ({"count": 12, "float_units": 10, "returned": 3, "owed": 5}, GuidanceKind.RETURNED_TOO_MUCH),
        ({"count": 20, "float_units": 10, "owed": 5}, GuidanceKind.RETURN_TO_SAFE),
        ({"count": 20, "float_units": 10, "returned": 2, "owed": 5}, GuidanceKind.RETURN_PARTIAL),
        ({"count": 20, "float_units": 10, "returned": 5, "owed": 5}, GuidanceKind.RETURN_COMPLETE),
        ({"count": 8, "float_units": 6, "owed": 5}, GuidanceKind.USE_NOTES_FOR_FLOAT),
        ({"count": 8, "float_units": 8, "borrow": 2}, GuidanceKind.BORROWED),
        ({"count": 10, "float_units": 10}, GuidanceKind.DONE),
        ({"count": 15, "float_units": 10}, GuidanceKind.DONE_BAG_REMAINDER),
        ({}, GuidanceKind.BORROW_FULL_FLOAT),
        ({"count": 8, "float_units": 6}, GuidanceKind.BORROW_SHORTFALL),
        ({"count": 8}, GuidanceKind.FILL_FLOAT),
    ],
)
def test_priority_order(inputs: dict, expected: GuidanceKind) -> None:
    assert _kind(**inputs) is expected


def test_review_float_beats_everything() -> None:
    assert _kind(count=5, float_units=11, borrow=3, returned=9, owed=2) is GuidanceKind.REVIEW_FLOAT


def test_returned_limit_applies_only_when_owed() -> None:
    assert _kind(count=20, float_units=10, returned=1) is GuidanceKind.DONE_BAG_REMAINDER
    assert _kind(count=20, float_units=10, returned=3, owed=2) is GuidanceKind.RETURNED_TOO_MUCH


def test_return_prompt_uses_smaller_of_owed_and_surplus() -> None:
    guidance = classify_row(count=13, float_units=10, borrow=0, returned=0, owed=5, target_float=10)
    assert guidance.kind is GuidanceKind.RETURN_TO_SAFE
    assert guidance.units == 3


def test_classifier_is_pure() -> None:
    args = dict(count=20, float_units=10, borrow=0, returned=2, owed=5, target_float=10)
    assert classify_row(**args) == classify_row(**args)


def test_render_uses_label() -> None:
    guidance = classify_row(count=20, float_units=10, borrow=0, returned=0, owed=5, target_float=10)
    assert render(guidance, "$10") == (
        "Return 5 × $10 to safe. Enter returned amount. Place the rest in today's takings bag."
    )
    done = classify_row(count=15, float_units=10, borrow=0, returned=0, owed=0, target_float=10)
    assert render(done, "$10") == "✅ Put remaining 5× $10 into today's bag."


def test_render_full_float_with_zero_target() -> None:
    guidance = classify_row(count=0, float_units=0, borrow=0, returned=0, owed=0, target_float=0)
    assert guidance.kind is GuidanceKind.BORROW_FULL_FLOAT
    assert render(guidance, "$100") == "No $100 float needed."
