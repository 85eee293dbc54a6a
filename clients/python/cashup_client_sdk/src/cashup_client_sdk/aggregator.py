"""Session totals and audit discrepancy math.

Everything here is a pure function of its arguments: money is summed in
``Decimal`` and nothing is cached or persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping

from .denominations import Denomination
from .ledger import DenominationState

BALANCE_TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class SessionTotals:
    count_total: Decimal
    ideal_float: Decimal
    actual_float_total: Decimal
    borrowed_total: Decimal
    returned_total: Decimal
    deposited_total: Decimal
    float_balanced: bool
    balanced_count: int
    complete_count: int
    denomination_count: int

    @property
    def all_denominations_balanced(self) -> bool:
        return self.balanced_count == self.denomination_count

    @property
    def all_denominations_complete(self) -> bool:
        return self.complete_count == self.denomination_count


def is_complete(state: DenominationState, target_float: int) -> bool:
    """Row is finished: float made up, and anything owed returned as far as possible."""
    float_made_up = state.float_units + state.borrow_units == target_float
    if state.count == 0:
        return float_made_up and state.borrow_units == target_float
    if state.owed > 0:
        return float_made_up and state.returned_units == state.returned_suggestion()
    return float_made_up


def compute_session_totals(
    denominations: Iterable[Denomination],
    states: Mapping[str, DenominationState],
) -> SessionTotals:
    count_total = ZERO
    ideal_float = ZERO
    actual_float_total = ZERO
    borrowed_total = ZERO
    returned_total = ZERO
    deposited_total = ZERO
    balanced_count = 0
    complete_count = 0
    denomination_count = 0

    for denomination in denominations:
        denomination_count += 1
        ideal_float += denomination.value_of(denomination.target_float)
        state = states.get(denomination.id) or DenominationState()
        count_total += denomination.value_of(state.count)
        actual_float_total += denomination.value_of(state.float_units)
        borrowed_total += denomination.value_of(state.borrow_units)
        returned_total += denomination.value_of(state.returned_units)
        deposited_total += denomination.value_of(state.deposited)
        if state.is_balanced(denomination.target_float):
            balanced_count += 1
        if is_complete(state, denomination.target_float):
            complete_count += 1

    return SessionTotals(
        count_total=count_total,
        ideal_float=ideal_float,
        actual_float_total=actual_float_total,
        borrowed_total=borrowed_total,
        returned_total=returned_total,
        deposited_total=deposited_total,
        float_balanced=abs(actual_float_total + borrowed_total - ideal_float) < BALANCE_TOLERANCE,
        balanced_count=balanced_count,
        complete_count=complete_count,
        denomination_count=denomination_count,
    )


class AuditOutcome(str, Enum):
    SURPLUS = "surplus"
    SHORTAGE = "shortage"
    BALANCED = "balanced"


@dataclass(frozen=True)
class AuditResult:
    total_deposited: Decimal
    total_checked: Decimal
    discrepancy: Decimal
    outcome: AuditOutcome
    checked_counts: dict[str, int]


def compute_audit(
    denominations: Iterable[Denomination],
    deposited: Mapping[str, int],
    checked: Mapping[str, int],
) -> AuditResult:
    """Compare an admin recount against a submitted deposit breakdown.

    Positive discrepancy means more cash was found than was deposited.
    """
    total_deposited = ZERO
    total_checked = ZERO
    checked_counts: dict[str, int] = {}
    for denomination in denominations:
        total_deposited += denomination.value_of(int(deposited.get(denomination.id, 0) or 0))
        units = int(checked.get(denomination.id, 0) or 0)
        checked_counts[denomination.id] = units
        total_checked += denomination.value_of(units)

    discrepancy = total_checked - total_deposited
    if discrepancy >= BALANCE_TOLERANCE:
        outcome = AuditOutcome.SURPLUS
    elif discrepancy <= -BALANCE_TOLERANCE:
        outcome = AuditOutcome.SHORTAGE
    else:
        outcome = AuditOutcome.BALANCED
    return AuditResult(
        total_deposited=total_deposited,
        total_checked=total_checked,
        discrepancy=discrepancy,
        outcome=outcome,
        checked_counts=checked_counts,
    )


def checked_fields(result: AuditResult) -> dict[str, object]:
    """Fields sent to the server when recording an audit against a stored row."""
    fields: dict[str, object] = {
        "total_checked": str(result.total_checked),
        "discrepancy": str(result.discrepancy),
    }
    for denomination_id, units in result.checked_counts.items():
        fields[f"{denomination_id}_checked"] = units
    return fields
