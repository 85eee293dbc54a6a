from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Literal, Sequence

DenominationKind = Literal["note", "coin"]


@dataclass(frozen=True)
class Denomination:
    id: str
    face_value: Decimal
    kind: DenominationKind
    target_float: int
    label: str

    def value_of(self, units: int) -> Decimal:
        return self.face_value * units


DEFAULT_DENOMINATIONS: tuple[Denomination, ...] = (
    Denomination("100", Decimal("100"), "note", 0, "$100"),
    Denomination("50", Decimal("50"), "note", 1, "$50"),
    Denomination("20", Decimal("20"), "note", 5, "$20"),
    Denomination("10", Decimal("10"), "note", 10, "$10"),
    Denomination("5", Decimal("5"), "note", 10, "$5"),
    Denomination("2", Decimal("2"), "coin", 10, "$2"),
    Denomination("1", Decimal("1"), "coin", 10, "$1"),
    Denomination("0.50", Decimal("0.50"), "coin", 10, "50c"),
    Denomination("0.20", Decimal("0.20"), "coin", 10, "20c"),
    Denomination("0.10", Decimal("0.10"), "coin", 10, "10c"),
    Denomination("0.05", Decimal("0.05"), "coin", 10, "5c"),
)


def _parse_entry(entry: Any) -> Denomination:
    if not isinstance(entry, dict):
        raise ValueError("Denomination entries must be JSON objects")
    try:
        denomination_id = str(entry["id"])
        face_value = Decimal(str(entry["face_value"]))
        kind = str(entry["kind"])
        target_float = int(entry["target_float"])
    except (KeyError, ArithmeticError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid denomination entry {entry!r}") from exc
    if kind not in {"note", "coin"}:
        raise ValueError(f"Invalid denomination kind {kind!r} for {denomination_id}")
    if face_value <= 0:
        raise ValueError(f"Denomination {denomination_id} must have a positive face value")
    if target_float < 0:
        raise ValueError(f"Denomination {denomination_id} must have a non-negative target float")
    label = str(entry.get("label") or f"${face_value}")
    return Denomination(denomination_id, face_value, kind, target_float, label)  # type: ignore[arg-type]


def validate_denominations(denominations: Iterable[Denomination]) -> tuple[Denomination, ...]:
    items = tuple(denominations)
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate denomination id {item.id!r}")
        seen.add(item.id)
    if not items:
        raise ValueError("At least one denomination is required")
    return items


def load_denominations(path: str | Path | None = None) -> tuple[Denomination, ...]:
    """Load the denomination set from a JSON list, or the bundled default set."""
    if path is None:
        return DEFAULT_DENOMINATIONS
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Denominations file must contain a JSON list")
    return validate_denominations(_parse_entry(entry) for entry in raw)


def by_id(denominations: Sequence[Denomination]) -> dict[str, Denomination]:
    return {item.id: item for item in denominations}
