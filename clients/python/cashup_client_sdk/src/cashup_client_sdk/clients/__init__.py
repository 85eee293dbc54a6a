from .health import HealthClient
from .ledger_client import RemoteLedgerClient

__all__ = [
    "HealthClient",
    "RemoteLedgerClient",
]
