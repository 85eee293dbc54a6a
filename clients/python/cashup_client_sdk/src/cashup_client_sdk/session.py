from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Mapping

from .aggregator import AuditResult, SessionTotals, checked_fields, compute_audit, compute_session_totals
from .clients.ledger_client import RemoteLedgerClient
from .config import ClientConfig
from .denominations import load_denominations
from .exceptions import ApiError
from .guidance import render
from .http_client import HttpClient
from .ledger import DenominationLedger, coerce_units
from .logger import get_logger, log_event
from .models import DenominationEntry, StoredRecord, SubmissionPayload, SubmissionTotals, TopUpReceipt
from .persistence import FileQueueStore
from .submission_queue import OfflineSubmissionQueue
from .sync import DrainResult, SyncCoordinator

MODULE = "session"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SubmitOutcome:
    record_id: str
    drain: DrainResult

    @property
    def synced(self) -> bool:
        return self.drain.success and self.drain.batch_size > 0

    @property
    def queued_offline(self) -> bool:
        return not self.drain.success


class CashCountSession:
    """One operator counting one store's till, end to end."""

    def __init__(
        self,
        *,
        operator: str,
        store: str,
        ledger: DenominationLedger,
        queue: OfflineSubmissionQueue,
        remote: RemoteLedgerClient,
        coordinator: SyncCoordinator | None = None,
        clock: Callable[[], datetime] = _utcnow,
        logger: logging.Logger | None = None,
    ):
        self.operator = operator
        self.store = store
        self.ledger = ledger
        self.queue = queue
        self.remote = remote
        self.coordinator = coordinator or SyncCoordinator(queue, remote, ledger)
        self._clock = clock
        self._logger = logger or get_logger("cashup_client_sdk.session")

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        operator: str,
        store: str,
        http: HttpClient | None = None,
    ) -> "CashCountSession":
        ledger = DenominationLedger(load_denominations(config.denominations_file))
        queue = OfflineSubmissionQueue(FileQueueStore(app_name=config.queue_app_name, directory=config.queue_dir))
        remote = RemoteLedgerClient(http=http or HttpClient(config), store=store, operator=operator)
        return cls(operator=operator, store=store, ledger=ledger, queue=queue, remote=remote)

    def start(self) -> dict[str, int]:
        """Seed owed from the server; offline starts see zero owed everywhere."""
        try:
            owed = dict(self.remote.fetch_owed(self.store).owed)
        except ApiError as exc:
            log_event(
                self._logger,
                MODULE,
                "seed_owed",
                "failed",
                level=logging.WARNING,
                store=self.store,
                code=exc.code,
                error=exc.message,
            )
            owed = {}
        seeded = {denomination.id: int(owed.get(denomination.id, 0)) for denomination in self.ledger.denominations}
        self.ledger.apply_owed(seeded)
        return seeded

    def totals(self) -> SessionTotals:
        return compute_session_totals(self.ledger.denominations, self.ledger.states())

    def guidance_text(self, denomination_id: str) -> str:
        denomination = self.ledger.denomination(denomination_id)
        return render(self.ledger.guidance(denomination_id), denomination.label)

    def build_payload(self, notes: str = "") -> SubmissionPayload:
        now = self._clock()
        totals = self.totals()
        entries = [
            DenominationEntry(
                id=denomination.id,
                count=state.count,
                float_units=state.float_units,
                borrow=state.borrow_units,
                returned=state.returned_units,
                deposited=state.deposited,
            )
            for denomination, state in self.ledger.pairs()
        ]
        return SubmissionPayload(
            operator=self.operator,
            store=self.store,
            notes=notes,
            date=now.astimezone().date().isoformat(),
            time=now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            total=totals.count_total,
            totals=SubmissionTotals(
                count_total=totals.count_total,
                ideal_float=totals.ideal_float,
                actual_float_total=totals.actual_float_total,
                borrowed_total=totals.borrowed_total,
                returned_total=totals.returned_total,
                deposited_total=totals.deposited_total,
                float_balanced=totals.float_balanced,
            ),
            denominations=entries,
        )

    def submit(self, notes: str = "") -> SubmitOutcome:
        payload = self.build_payload(notes)
        record_id = self.queue.enqueue(payload)
        self.ledger.reset()
        drain = self.coordinator.trigger()
        log_event(
            self._logger,
            MODULE,
            "submit",
            "synced" if drain.success else "queued",
            record_id=record_id,
            store=self.store,
            message=drain.message,
        )
        return SubmitOutcome(record_id=record_id, drain=drain)

    def record_check(
        self,
        time_key: str,
        deposited: Mapping[str, int],
        checked: Mapping[str, int],
    ) -> AuditResult:
        """Store an admin recount against the row submitted at ``time_key``.

        CheckedRowNotFoundError propagates; refetch the records before retrying.
        """
        result = compute_audit(self.ledger.denominations, deposited, checked)
        self.remote.update_checked_fields(time_key, checked_fields(result))
        log_event(
            self._logger,
            MODULE,
            "record_check",
            result.outcome.value,
            time_key=time_key,
            discrepancy=str(result.discrepancy),
        )
        return result

    def audit_record(self, record: StoredRecord, checked: Mapping[str, int]) -> AuditResult:
        return self.record_check(record.time, record.deposited_by_id(), checked)

    def log_topup(self, units: Mapping[str, object], notes: str = "") -> TopUpReceipt:
        """Record cash added to the store's safe.

        Top-ups go straight to the service and are never queued; an
        ApiError reaches the caller. They are a log only and leave owed
        untouched.
        """
        counted = {denomination_id: coerce_units(raw) for denomination_id, raw in units.items()}
        for denomination_id in counted:
            self.ledger.denomination(denomination_id)
        counted = {denomination_id: count for denomination_id, count in counted.items() if count > 0}
        if not counted:
            raise ValueError("A top-up needs at least one denomination with units")
        total = sum(
            (self.ledger.denomination(denomination_id).value_of(count) for denomination_id, count in counted.items()),
            Decimal("0"),
        )
        receipt = self.remote.log_topup(counted, total, store=self.store, operator=self.operator, notes=notes)
        log_event(
            self._logger,
            MODULE,
            "log_topup",
            "success",
            store=self.store,
            record_id=receipt.record_id,
            total=str(total),
        )
        return receipt
