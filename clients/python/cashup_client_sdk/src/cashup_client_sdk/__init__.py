from .aggregator import AuditOutcome, AuditResult, SessionTotals, compute_audit, compute_session_totals
from .clients import HealthClient, RemoteLedgerClient
from .config import ClientConfig, ConfigError, load_config
from .denominations import DEFAULT_DENOMINATIONS, Denomination, load_denominations
from .exceptions import (
    ApiError,
    BatchRejectedError,
    CheckedRowNotFoundError,
    NotFoundError,
    QueueStorageError,
    TransportError,
    ValidationError,
)
from .guidance import Guidance, GuidanceKind, classify_row, render
from .http_client import HttpClient, TraceContext
from .idempotency import SubmissionIdFactory
from .ledger import Committed, DenominationLedger, DenominationState, Suggested
from .models import BatchAcceptance, DenominationEntry, SubmissionPayload, SubmissionRecord, TopUpReceipt
from .persistence import FileQueueStore, MemoryQueueStore, PersistencePort
from .session import CashCountSession, SubmitOutcome
from .submission_queue import OfflineSubmissionQueue
from .sync import ConnectivitySignal, DrainResult, SyncCoordinator, SyncState

__all__ = [
    "ApiError",
    "AuditOutcome",
    "AuditResult",
    "BatchAcceptance",
    "BatchRejectedError",
    "CashCountSession",
    "CheckedRowNotFoundError",
    "ClientConfig",
    "Committed",
    "ConfigError",
    "ConnectivitySignal",
    "DEFAULT_DENOMINATIONS",
    "Denomination",
    "DenominationEntry",
    "DenominationLedger",
    "DenominationState",
    "DrainResult",
    "FileQueueStore",
    "Guidance",
    "GuidanceKind",
    "HealthClient",
    "HttpClient",
    "MemoryQueueStore",
    "NotFoundError",
    "OfflineSubmissionQueue",
    "PersistencePort",
    "QueueStorageError",
    "RemoteLedgerClient",
    "SessionTotals",
    "SubmissionIdFactory",
    "SubmissionPayload",
    "SubmissionRecord",
    "SubmitOutcome",
    "Suggested",
    "SyncCoordinator",
    "SyncState",
    "TopUpReceipt",
    "TraceContext",
    "TransportError",
    "ValidationError",
    "classify_row",
    "compute_audit",
    "compute_session_totals",
    "load_config",
    "load_denominations",
    "render",
]
