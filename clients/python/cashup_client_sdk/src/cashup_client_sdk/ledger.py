"""Per-denomination reconciliation state for one cash count session.

Every user-editable field is held as a tagged value: ``Suggested`` while the
field is untouched (the UI shows the value greyed out as a placeholder) and
``Committed`` once the user has entered or accepted a value. Clearing a field
to zero always reverts it to ``Suggested``.

``owed`` is a plain integer seeded from the server and never cleared by the
user.

Only committed values count: the unit properties of ``DenominationState``
read a ``Suggested`` field as 0, so guidance, balance, totals and the
submitted payload never act on a placeholder. Suggestions surface only as
placeholders and as the value a ``focus_*`` call commits.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Mapping, Sequence, Union

from .denominations import Denomination, by_id, validate_denominations
from .guidance import Guidance, classify_row


@dataclass(frozen=True)
class Suggested:
    value: int = 0


@dataclass(frozen=True)
class Committed:
    value: int


FieldValue = Union[Suggested, Committed]

LedgerListener = Callable[[str, "DenominationState"], None]


def coerce_units(raw: object) -> int:
    """Turn raw field input into a unit count; anything unparsable becomes 0."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return max(0, raw)
    text = str(raw or "").strip()
    if not text:
        return 0
    try:
        value = int(text)
    except ValueError:
        return 0
    return max(0, value)


def committed_units(field: FieldValue) -> int:
    return field.value if isinstance(field, Committed) else 0


def _entered(units: int) -> FieldValue:
    return Committed(units) if units > 0 else Suggested(0)


def derived_borrow(count: int, float_units: int, target_float: int) -> int:
    if count > 0:
        return max(0, target_float - float_units)
    return target_float


@dataclass(frozen=True)
class DenominationState:
    actual_count: FieldValue = Suggested()
    actual_float: FieldValue = Suggested()
    borrow: FieldValue = Suggested()
    returned: FieldValue = Suggested()
    owed: int = 0

    @property
    def count(self) -> int:
        return committed_units(self.actual_count)

    @property
    def float_units(self) -> int:
        return committed_units(self.actual_float)

    @property
    def borrow_units(self) -> int:
        return committed_units(self.borrow)

    @property
    def returned_units(self) -> int:
        return committed_units(self.returned)

    @property
    def surplus(self) -> int:
        return max(0, self.count - self.float_units)

    @property
    def deposited(self) -> int:
        return max(0, self.count - self.float_units - self.returned_units)

    def suggested_float(self, target_float: int) -> int:
        return min(self.count, target_float)

    def suggested_borrow(self, target_float: int) -> int:
        return max(0, target_float - self.count)

    def returned_suggestion(self) -> int:
        if self.owed > 0 and self.surplus > 0:
            return min(self.owed, self.surplus)
        return 0

    def is_balanced(self, target_float: int) -> bool:
        if self.float_units + self.borrow_units == target_float and self.count > 0:
            return True
        return self.float_units == target_float


@dataclass(frozen=True)
class FieldDisplay:
    text: str
    placeholder: str
    committed: bool


@dataclass(frozen=True)
class RowDisplay:
    count: FieldDisplay
    float: FieldDisplay
    borrow: FieldDisplay
    returned: FieldDisplay
    owed: int
    balanced: bool
    guidance: Guidance


def _display(field: FieldValue, placeholder: int) -> FieldDisplay:
    if isinstance(field, Committed):
        return FieldDisplay(text=str(field.value), placeholder="0", committed=True)
    return FieldDisplay(text="", placeholder=str(placeholder), committed=False)


class DenominationLedger:
    def __init__(self, denominations: Sequence[Denomination]):
        self._denominations = by_id(validate_denominations(denominations))
        self._states: dict[str, DenominationState] = {
            denomination_id: DenominationState() for denomination_id in self._denominations
        }
        self._listeners: list[LedgerListener] = []

    @property
    def denominations(self) -> tuple[Denomination, ...]:
        return tuple(self._denominations.values())

    def denomination(self, denomination_id: str) -> Denomination:
        try:
            return self._denominations[denomination_id]
        except KeyError:
            raise KeyError(f"Unknown denomination {denomination_id!r}") from None

    def state(self, denomination_id: str) -> DenominationState:
        self.denomination(denomination_id)
        return self._states[denomination_id]

    def states(self) -> dict[str, DenominationState]:
        return dict(self._states)

    def subscribe(self, listener: LedgerListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _store(self, denomination_id: str, state: DenominationState) -> DenominationState:
        self._states[denomination_id] = state
        for listener in list(self._listeners):
            listener(denomination_id, state)
        return state

    def set_count(self, denomination_id: str, raw: object) -> DenominationState:
        target = self.denomination(denomination_id).target_float
        current = self._states[denomination_id]
        units = coerce_units(raw)
        if units == 0:
            return self._store(denomination_id, DenominationState(owed=current.owed))
        # A new count invalidates everything entered downstream of it.
        return self._store(
            denomination_id,
            DenominationState(
                actual_count=Committed(units),
                borrow=Suggested(target),
                owed=current.owed,
            ),
        )

    def set_float(self, denomination_id: str, raw: object) -> DenominationState:
        target = self.denomination(denomination_id).target_float
        current = self._states[denomination_id]
        units = coerce_units(raw)
        borrow = Suggested(derived_borrow(current.count, units, target))
        if units == 0:
            return self._store(
                denomination_id,
                replace(current, actual_float=Suggested(0), borrow=borrow, returned=Suggested(0)),
            )
        return self._store(denomination_id, replace(current, actual_float=Committed(units), borrow=borrow))

    def set_borrow(self, denomination_id: str, raw: object) -> DenominationState:
        self.denomination(denomination_id)
        current = self._states[denomination_id]
        return self._store(denomination_id, replace(current, borrow=_entered(coerce_units(raw))))

    def set_returned(self, denomination_id: str, raw: object) -> DenominationState:
        self.denomination(denomination_id)
        current = self._states[denomination_id]
        return self._store(denomination_id, replace(current, returned=_entered(coerce_units(raw))))

    def focus_float(self, denomination_id: str) -> DenominationState:
        target = self.denomination(denomination_id).target_float
        current = self._states[denomination_id]
        if isinstance(current.actual_float, Committed):
            return current
        suggestion = current.suggested_float(target)
        return self._store(denomination_id, replace(current, actual_float=Committed(suggestion)))

    def focus_borrow(self, denomination_id: str) -> DenominationState:
        target = self.denomination(denomination_id).target_float
        current = self._states[denomination_id]
        if isinstance(current.borrow, Committed):
            return current
        suggestion = derived_borrow(current.count, current.float_units, target)
        return self._store(denomination_id, replace(current, borrow=Committed(suggestion)))

    def focus_returned(self, denomination_id: str) -> DenominationState:
        self.denomination(denomination_id)
        current = self._states[denomination_id]
        suggestion = current.returned_suggestion()
        if isinstance(current.returned, Committed) or suggestion == 0:
            return current
        return self._store(denomination_id, replace(current, returned=Committed(suggestion)))

    def clear(self, denomination_id: str) -> DenominationState:
        self.denomination(denomination_id)
        return self._store(denomination_id, DenominationState(owed=self._states[denomination_id].owed))

    def reset(self) -> None:
        for denomination_id in self._denominations:
            self.clear(denomination_id)

    def apply_owed(self, owed: Mapping[str, int]) -> list[str]:
        """Overwrite owed for every known denomination present in ``owed``."""
        updated: list[str] = []
        for denomination_id, units in owed.items():
            if denomination_id not in self._denominations:
                continue
            current = self._states[denomination_id]
            self._store(denomination_id, replace(current, owed=coerce_units(units)))
            updated.append(denomination_id)
        return updated

    def is_balanced(self, denomination_id: str) -> bool:
        target = self.denomination(denomination_id).target_float
        return self._states[denomination_id].is_balanced(target)

    def guidance(self, denomination_id: str) -> Guidance:
        target = self.denomination(denomination_id).target_float
        state = self._states[denomination_id]
        return classify_row(
            count=state.count,
            float_units=state.float_units,
            borrow=state.borrow_units,
            returned=state.returned_units,
            owed=state.owed,
            target_float=target,
        )

    def display(self, denomination_id: str) -> RowDisplay:
        target = self.denomination(denomination_id).target_float
        state = self._states[denomination_id]
        return RowDisplay(
            count=_display(state.actual_count, 0),
            float=_display(state.actual_float, state.suggested_float(target)),
            borrow=_display(state.borrow, state.borrow.value),
            returned=_display(state.returned, state.returned_suggestion()),
            owed=state.owed,
            balanced=state.is_balanced(target),
            guidance=self.guidance(denomination_id),
        )

    def pairs(self) -> Iterable[tuple[Denomination, DenominationState]]:
        for denomination_id, denomination in self._denominations.items():
            yield denomination, self._states[denomination_id]
