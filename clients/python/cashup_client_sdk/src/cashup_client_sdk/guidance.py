from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GuidanceKind(str, Enum):
    REVIEW_FLOAT = "review_float"
    RETURNED_TOO_MUCH = "returned_too_much"
    RETURN_TO_SAFE = "return_to_safe"
    RETURN_PARTIAL = "return_partial"
    RETURN_COMPLETE = "return_complete"
    USE_NOTES_FOR_FLOAT = "use_notes_for_float"
    BORROWED = "borrowed"
    DONE = "done"
    DONE_BAG_REMAINDER = "done_bag_remainder"
    BORROW_FULL_FLOAT = "borrow_full_float"
    BORROW_SHORTFALL = "borrow_shortfall"
    FILL_FLOAT = "fill_float"
    COUNT_FIRST = "count_first"


@dataclass(frozen=True)
class Guidance:
    """Instruction for one denomination row.

    ``units`` is the quantity the instruction is about (units to return,
    borrow, bag, ...). ``expected`` carries the reference quantity when the
    instruction compares two numbers, e.g. the returnable limit.
    """

    kind: GuidanceKind
    units: int = 0
    expected: int = 0

    @property
    def is_done(self) -> bool:
        return self.kind in {GuidanceKind.DONE, GuidanceKind.DONE_BAG_REMAINDER, GuidanceKind.RETURN_COMPLETE}


def classify_row(
    *,
    count: int,
    float_units: int,
    borrow: int,
    returned: int,
    owed: int,
    target_float: int,
) -> Guidance:
    """Pick the single instruction for a row; earlier rules win."""
    surplus = max(0, count - float_units)
    returnable = min(owed, surplus)

    if float_units > target_float or float_units > count:
        return Guidance(GuidanceKind.REVIEW_FLOAT, units=float_units, expected=min(count, target_float))

    if owed > 0 and returned > returnable:
        return Guidance(GuidanceKind.RETURNED_TOO_MUCH, units=returned - returnable, expected=returnable)

    if owed > 0 and surplus > 0:
        if float_units >= target_float:
            if returned == 0:
                return Guidance(GuidanceKind.RETURN_TO_SAFE, units=returnable, expected=returnable)
            if returned < returnable:
                return Guidance(GuidanceKind.RETURN_PARTIAL, units=returnable - returned, expected=returnable)
            return Guidance(GuidanceKind.RETURN_COMPLETE, units=surplus - returned, expected=returnable)
        return Guidance(
            GuidanceKind.USE_NOTES_FOR_FLOAT,
            units=max(0, target_float - min(count, target_float)),
            expected=min(count, target_float),
        )

    if borrow > 0:
        return Guidance(GuidanceKind.BORROWED, units=borrow, expected=target_float)

    if float_units + borrow == target_float and count > 0:
        if count > float_units:
            return Guidance(GuidanceKind.DONE_BAG_REMAINDER, units=count - float_units)
        return Guidance(GuidanceKind.DONE)

    if count == 0:
        return Guidance(GuidanceKind.BORROW_FULL_FLOAT, units=target_float, expected=target_float)

    if float_units < target_float and borrow == 0 and float_units > 0:
        return Guidance(GuidanceKind.BORROW_SHORTFALL, units=target_float - float_units, expected=target_float)

    if float_units < target_float:
        return Guidance(GuidanceKind.FILL_FLOAT, units=target_float, expected=target_float)

    return Guidance(GuidanceKind.COUNT_FIRST)


def render(guidance: Guidance, label: str) -> str:
    kind = guidance.kind
    units = guidance.units
    if kind is GuidanceKind.REVIEW_FLOAT:
        return "Review float amount: it is higher than the target or the count."
    if kind is GuidanceKind.RETURNED_TOO_MUCH:
        return f"Returned is {units} × {label} more than can be returned ({guidance.expected})."
    if kind is GuidanceKind.RETURN_TO_SAFE:
        return f"Return {units} × {label} to safe. Enter returned amount. Place the rest in today's takings bag."
    if kind is GuidanceKind.RETURN_PARTIAL:
        return f"Return {units} more × {label} to safe."
    if kind is GuidanceKind.RETURN_COMPLETE:
        if units > 0:
            return f"✅ Returned to safe. Put remaining {units}× {label} into today's bag."
        return "✅ Returned to safe."
    if kind is GuidanceKind.USE_NOTES_FOR_FLOAT:
        return (
            f"Use the {guidance.expected} × {label} you have for the float and borrow {units} from safe "
            "before returning anything."
        )
    if kind is GuidanceKind.BORROWED:
        return f"Take {units} × {label} from safe. Enter borrowed amount."
    if kind is GuidanceKind.DONE_BAG_REMAINDER:
        return f"✅ Put remaining {units}× {label} into today's bag."
    if kind is GuidanceKind.DONE:
        return "✅"
    if kind is GuidanceKind.BORROW_FULL_FLOAT:
        if units == 0:
            return f"No {label} float needed."
        return f"None counted. Take {units} × {label} from safe for the float."
    if kind is GuidanceKind.BORROW_SHORTFALL:
        return f"Float is short. Take {units} × {label} from safe."
    if kind is GuidanceKind.FILL_FLOAT:
        return f"Put {units} × {label} back into till. If you don't have enough, enter what you have."
    return "Count everything in the till"
