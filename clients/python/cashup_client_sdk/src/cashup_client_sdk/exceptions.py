from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class BatchRejectedError(ApiError):
    """The service answered but did not accept the submitted batch."""


class CheckedRowNotFoundError(NotFoundError):
    """No stored cash count matched the time key of a checked update."""


class QueueStorageError(Exception):
    """The offline queue could not be read from or written to its store."""
