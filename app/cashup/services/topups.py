import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Mapping

from app.cashup.core.config import settings
from app.cashup.core.error_catalog import AppError, ErrorCatalog
from app.cashup.core.logging import log_json
from app.cashup.db.models import SafeTopUp
from app.cashup.repos.topups import SafeTopUpRepository

logger = logging.getLogger(__name__)


@dataclass
class TopUpResult:
    record_id: int
    store: str
    total: Decimal


class SafeTopUpService:
    """Log of cash added to a store's safe.

    Top-ups are recorded as-is and never move owed balances; owed only
    tracks what tills borrowed from the safe.
    """

    def __init__(self, db, denomination_ids: Iterable[str] | None = None):
        self.db = db
        self.topups = SafeTopUpRepository(db)
        self.denomination_ids = list(denomination_ids or settings.DENOMINATION_IDS)

    def _clean_units(self, units: Mapping[str, int]) -> dict[str, int]:
        known = set(self.denomination_ids)
        unknown = sorted(denomination_id for denomination_id in units if denomination_id not in known)
        if unknown:
            raise AppError(ErrorCatalog.UNKNOWN_DENOMINATION, details={"denominations": unknown})
        negative = sorted(denomination_id for denomination_id, count in units.items() if count < 0)
        if negative:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"field": "units", "negative": negative})
        cleaned = {denomination_id: count for denomination_id, count in units.items() if count > 0}
        if not cleaned:
            raise AppError(ErrorCatalog.EMPTY_TOPUP)
        return cleaned

    def log_topup(
        self,
        *,
        store: str,
        operator: str,
        units: Mapping[str, int],
        total: Decimal,
        notes: str = "",
        trace_id: str | None = None,
    ) -> TopUpResult:
        cleaned = self._clean_units(units)
        now = datetime.now(timezone.utc)
        topup = SafeTopUp(
            store=store,
            operator=operator,
            notes=notes,
            date=now.date().isoformat(),
            time=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            units=cleaned,
            total=total,
        )
        try:
            self.topups.add(topup)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        log_json(
            logger,
            {
                "event": "topup_logged",
                "trace_id": trace_id,
                "store": store,
                "record_id": topup.id,
                "units": cleaned,
                "total": str(total),
            },
        )
        return TopUpResult(record_id=topup.id, store=store, total=total)

    def list_topups(self, store: str | None = None, *, limit: int | None = None) -> list[SafeTopUp]:
        return list(self.topups.list_recent(store, limit=limit or settings.RECORDS_MAX_ROWS))
