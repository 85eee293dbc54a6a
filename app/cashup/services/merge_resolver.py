import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from app.cashup.core.config import settings
from app.cashup.core.error_catalog import AppError, ErrorCatalog
from app.cashup.core.logging import log_json
from app.cashup.db.models import CashCountRecord
from app.cashup.repos.cash_counts import CashCountRepository
from app.cashup.repos.owed import OwedBalanceRepository
from app.cashup.schemas.cash_counts import SubmissionRecord

logger = logging.getLogger(__name__)

CHECKED_SUFFIX = "_checked"


@dataclass
class BatchResult:
    accepted: int
    store: str
    owed: dict[str, int]


@dataclass
class CheckedResult:
    record_id: int
    updated_fields: list[str]


def time_to_second(value: str) -> datetime | None:
    """Parse a stored or requested time and truncate it to whole seconds in UTC.

    Naive timestamps are taken as UTC. Returns None when the text is not an
    ISO-8601 timestamp.
    """
    text = (value or "").strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).replace(microsecond=0, tzinfo=None)


def times_match(stored: str, time_key: str) -> bool:
    stored_second = time_to_second(stored)
    key_second = time_to_second(time_key)
    if stored_second is None or key_second is None:
        return stored == time_key
    return stored_second == key_second


def _as_decimal(key: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"field": key, "value": value}) from exc


def _as_units(key: str, value: Any) -> int:
    try:
        units = int(str(value))
    except ValueError as exc:
        raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"field": key, "value": value}) from exc
    if units < 0:
        raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"field": key, "value": value})
    return units


class MergeResolver:
    """Server side of the sync protocol.

    ``append_batch`` stores every record as a new row and moves the safe's
    owed balances; ``update_checked_fields`` writes an audit recount onto one
    existing row. Neither deduplicates: the client clears its queue only
    after an accepted batch, and that is what keeps rows from repeating.
    """

    def __init__(self, db, denomination_ids: Iterable[str] | None = None):
        self.db = db
        self.records = CashCountRepository(db)
        self.owed = OwedBalanceRepository(db)
        self.denomination_ids = list(denomination_ids or settings.DENOMINATION_IDS)

    def owed_slice(self, store: str) -> dict[str, int]:
        stored = self.owed.units_for_store(store)
        owed = {denomination_id: 0 for denomination_id in self.denomination_ids}
        owed.update(stored)
        return owed

    def append_batch(
        self,
        records: list[SubmissionRecord],
        *,
        store: str | None = None,
        trace_id: str | None = None,
    ) -> BatchResult:
        if not records:
            raise AppError(ErrorCatalog.EMPTY_BATCH)
        known = set(self.denomination_ids)
        try:
            for record in records:
                payload = record.payload
                self.records.add(
                    CashCountRecord(
                        submission_id=record.id,
                        store=payload.store,
                        operator=payload.operator,
                        notes=payload.notes,
                        date=payload.date,
                        time=payload.time,
                        total=payload.total,
                        totals=payload.totals.model_dump(mode="json"),
                        denominations=[
                            entry.model_dump(mode="json", by_alias=True) for entry in payload.denominations
                        ],
                    )
                )
                for entry in payload.denominations:
                    if entry.id not in known:
                        continue
                    delta = entry.borrow - entry.returned
                    if delta:
                        self.owed.apply_delta(payload.store, entry.id, delta)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        caller_store = store or records[-1].payload.store
        owed = self.owed_slice(caller_store)
        log_json(
            logger,
            {
                "event": "batch_appended",
                "trace_id": trace_id,
                "store": caller_store,
                "accepted": len(records),
                "submission_ids": [record.id for record in records],
            },
        )
        return BatchResult(accepted=len(records), store=caller_store, owed=owed)

    def find_by_time(self, time_key: str) -> CashCountRecord | None:
        for row in self.records.all_in_order():
            if times_match(row.time, time_key):
                return row
        return None

    def update_checked_fields(
        self,
        time_key: str,
        fields: Mapping[str, Any],
        *,
        trace_id: str | None = None,
    ) -> CheckedResult:
        row = self.find_by_time(time_key)
        if row is None:
            raise AppError(ErrorCatalog.CHECKED_ROW_NOT_FOUND, details={"time_key": time_key})

        known = set(self.denomination_ids)
        updated: list[str] = []
        counts_changed = False
        checked_counts = dict(row.checked_counts or {})
        for key, value in fields.items():
            if key == "total_checked":
                row.total_checked = _as_decimal(key, value)
            elif key == "discrepancy":
                row.discrepancy = _as_decimal(key, value)
            elif key.endswith(CHECKED_SUFFIX) and key[: -len(CHECKED_SUFFIX)] in known:
                checked_counts[key[: -len(CHECKED_SUFFIX)]] = _as_units(key, value)
                counts_changed = True
            else:
                continue
            updated.append(key)

        if counts_changed:
            row.checked_counts = checked_counts
        if updated:
            row.checked_at = datetime.now(timezone.utc).replace(tzinfo=None)
            self.db.commit()

        log_json(
            logger,
            {
                "event": "checked_fields_updated",
                "trace_id": trace_id,
                "record_id": row.id,
                "time_key": time_key,
                "updated_fields": updated,
                "ignored_fields": sorted(set(fields) - set(updated)),
            },
        )
        return CheckedResult(record_id=row.id, updated_fields=updated)

    def list_records(self, store: str, *, limit: int | None = None) -> list[CashCountRecord]:
        return list(self.records.list_by_store(store, limit=limit or settings.RECORDS_MAX_ROWS))
