from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class SubmissionIdFactory:
    """Timestamp-derived submission ids that stay unique within a process.

    Ids look like ``<ms:13>-<seq:6>-<random:8>``. Within a process they sort
    in creation order even when two ids share a millisecond; the random
    suffix separates devices submitting at the same instant.
    """

    clock: Callable[[], float] = time.time
    _sequence: int = 0
    _last_ms: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __call__(self) -> str:
        with self._lock:
            now_ms = round(self.clock() * 1000)
            # A clock stepping backwards must not reorder ids.
            now_ms = max(now_ms, self._last_ms)
            self._last_ms = now_ms
            self._sequence += 1
            sequence = self._sequence
        return f"{now_ms:013d}-{sequence:06d}-{uuid.uuid4().hex[:8]}"


def new_idempotency_key() -> str:
    return str(uuid.uuid4())
