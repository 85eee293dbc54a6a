from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Protocol, Sequence

from .exceptions import ApiError
from .ledger import DenominationLedger
from .logger import get_logger, log_event
from .models import BatchAcceptance, SubmissionRecord
from .submission_queue import OfflineSubmissionQueue

MODULE = "sync"

MESSAGE_IN_PROGRESS = "Queue processing already in progress."
MESSAGE_EMPTY = "Queue is empty."
MESSAGE_SUCCESS = "Queue processed successfully."

ConnectivityListener = Callable[[bool], object]


class BatchSink(Protocol):
    def append_batch(self, records: Sequence[SubmissionRecord]) -> BatchAcceptance: ...


class SyncState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"


@dataclass(frozen=True)
class DrainResult:
    success: bool
    message: str
    batch_size: int = 0
    owed: dict[str, int] = field(default_factory=dict)


class ConnectivitySignal:
    """Online/offline flag; listeners hear only about changes."""

    def __init__(self, online: bool = False):
        self._online = online
        self._listeners: list[ConnectivityListener] = []

    @property
    def online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, online: bool) -> bool:
        if online == self._online:
            return False
        self._online = online
        for listener in list(self._listeners):
            listener(online)
        return True


class SyncCoordinator:
    """Drains the offline queue into the remote ledger, one drain at a time."""

    def __init__(
        self,
        queue: OfflineSubmissionQueue,
        remote: BatchSink,
        ledger: DenominationLedger | None = None,
        logger: logging.Logger | None = None,
    ):
        self.queue = queue
        self.remote = remote
        self.ledger = ledger
        self._logger = logger or get_logger("cashup_client_sdk.sync")
        self._lock = threading.Lock()

    @property
    def state(self) -> SyncState:
        return SyncState.DRAINING if self._lock.locked() else SyncState.IDLE

    @contextmanager
    def _draining(self) -> Iterator[bool]:
        if not self._lock.acquire(blocking=False):
            yield False
            return
        try:
            yield True
        finally:
            self._lock.release()

    def attach(self, signal: ConnectivitySignal) -> Callable[[], None]:
        return signal.subscribe(self.handle_connectivity)

    def handle_connectivity(self, online: bool) -> DrainResult | None:
        if not online:
            return None
        return self.trigger()

    def trigger(self) -> DrainResult:
        with self._draining() as acquired:
            if not acquired:
                log_event(self._logger, MODULE, "drain", "skipped", reason="in_progress")
                return DrainResult(success=False, message=MESSAGE_IN_PROGRESS)
            return self._drain()

    def _drain(self) -> DrainResult:
        snapshot = self.queue.peek_all()
        if not snapshot:
            return DrainResult(success=True, message=MESSAGE_EMPTY)

        started = time.monotonic()
        log_event(self._logger, MODULE, "drain", "started", batch_size=len(snapshot))
        try:
            acceptance = self.remote.append_batch(snapshot)
        except ApiError as exc:
            log_event(
                self._logger,
                MODULE,
                "drain",
                "failed",
                level=logging.WARNING,
                batch_size=len(snapshot),
                code=exc.code,
                error=exc.message,
                trace_id=exc.trace_id,
            )
            return DrainResult(
                success=False,
                message=f"Submissions are saved on this device and will sync later. {exc.message}",
                batch_size=len(snapshot),
            )

        submitted = {record.id for record in snapshot}
        self.queue.replace_all(record for record in self.queue.peek_all() if record.id not in submitted)
        if self.ledger is not None:
            self.ledger.apply_owed(acceptance.owed)
        log_event(
            self._logger,
            MODULE,
            "drain",
            "success",
            batch_size=len(snapshot),
            remaining=len(self.queue),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return DrainResult(
            success=True,
            message=MESSAGE_SUCCESS,
            batch_size=len(snapshot),
            owed=dict(acceptance.owed),
        )
