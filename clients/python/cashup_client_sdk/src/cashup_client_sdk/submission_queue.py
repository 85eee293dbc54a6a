from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from .exceptions import QueueStorageError
from .idempotency import SubmissionIdFactory
from .logger import get_logger, log_event
from .models import SubmissionPayload, SubmissionRecord
from .persistence import PersistencePort

MODULE = "submission_queue"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OfflineSubmissionQueue:
    """FIFO of submissions waiting for the remote ledger.

    The full queue is written through the persistence port after every
    change. When the port fails the queue keeps working in memory and
    ``storage_healthy`` turns false; pending records are then lost if the
    process exits before a successful drain.
    """

    def __init__(
        self,
        store: PersistencePort,
        *,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = _utcnow,
        logger: logging.Logger | None = None,
    ):
        self._store = store
        self._id_factory = id_factory or SubmissionIdFactory()
        self._clock = clock
        self._logger = logger or get_logger("cashup_client_sdk.queue")
        self.storage_healthy = True
        self._records: list[SubmissionRecord] = self._restore()

    def __len__(self) -> int:
        return len(self._records)

    def _storage_failed(self, action: str, exc: Exception) -> None:
        self.storage_healthy = False
        log_event(
            self._logger,
            MODULE,
            "queue_storage_failed",
            "error",
            level=logging.ERROR,
            operation=action,
            error=str(exc),
            pending=len(getattr(self, "_records", [])),
        )

    def _restore(self) -> list[SubmissionRecord]:
        try:
            raw = self._store.load()
        except (OSError, QueueStorageError) as exc:
            self._storage_failed("load", exc)
            return []
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("queue data is not a list")
            records = [SubmissionRecord.model_validate(item) for item in items]
        except ValueError as exc:
            log_event(self._logger, MODULE, "queue_restore", "corrupt", level=logging.WARNING, error=str(exc))
            return []
        log_event(self._logger, MODULE, "queue_restore", "success", pending=len(records))
        return records

    def _persist(self) -> None:
        data = json.dumps(
            [record.model_dump(mode="json", by_alias=True) for record in self._records]
        ).encode("utf-8")
        try:
            self._store.save(data)
        except (OSError, QueueStorageError) as exc:
            self._storage_failed("save", exc)
            return
        self.storage_healthy = True

    def enqueue(self, payload: SubmissionPayload | Mapping[str, Any]) -> str:
        if not isinstance(payload, SubmissionPayload):
            payload = SubmissionPayload.model_validate(payload)
        record = SubmissionRecord(id=self._id_factory(), created_at=self._clock(), payload=payload)
        self._records.append(record)
        self._persist()
        log_event(
            self._logger,
            MODULE,
            "enqueue",
            "success",
            record_id=record.id,
            store=payload.store,
            pending=len(self._records),
        )
        return record.id

    def peek_all(self) -> list[SubmissionRecord]:
        return list(self._records)

    def replace_all(self, records: Iterable[SubmissionRecord]) -> None:
        self._records = list(records)
        self._persist()

    def clear(self) -> None:
        self._records = []
        try:
            self._store.delete()
        except (OSError, QueueStorageError) as exc:
            self._storage_failed("delete", exc)
