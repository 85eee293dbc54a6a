from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "cashup_client_sdk" / "src"
EXAMPLES_DIR = BASE_DIR / "examples"

for path in (SDK_SRC, EXAMPLES_DIR):
    sys.path.insert(0, str(path))

from cashup_client_sdk.denominations import DEFAULT_DENOMINATIONS, Denomination  # noqa: E402
from cashup_client_sdk.ledger import DenominationLedger  # noqa: E402
from cashup_client_sdk.persistence import MemoryQueueStore  # noqa: E402
from cashup_client_sdk.submission_queue import OfflineSubmissionQueue  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in ("CASHUP_ENV", "CASHUP_API_BASE_URL", "CASHUP_API_BASE_URL_DEV", "CASHUP_QUEUE_DIR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def ten_dollar() -> Denomination:
    return Denomination("10", Decimal("10"), "note", 10, "$10")


@pytest.fixture
def ledger() -> DenominationLedger:
    return DenominationLedger(DEFAULT_DENOMINATIONS)


@pytest.fixture
def memory_store() -> MemoryQueueStore:
    return MemoryQueueStore()


@pytest.fixture
def queue(memory_store: MemoryQueueStore) -> OfflineSubmissionQueue:
    return OfflineSubmissionQueue(memory_store)


@pytest.fixture
def make_payload():
    def _make(store: str = "store-1", notes: str = "", count_10: int = 12) -> dict:
        return {
            "operator": "sam",
            "store": store,
            "notes": notes,
            "date": "2024-01-01",
            "time": "2024-01-01T09:00:03.842Z",
            "total": str(count_10 * 10),
            "totals": {
                "count_total": str(count_10 * 10),
                "ideal_float": "100",
                "actual_float_total": "100",
                "borrowed_total": "0",
                "returned_total": "0",
                "deposited_total": str(max(0, count_10 - 10) * 10),
                "float_balanced": True,
            },
            "denominations": [
                {
                    "id": "10",
                    "count": count_10,
                    "float": 10,
                    "borrow": 0,
                    "returned": 0,
                    "deposited": max(0, count_10 - 10),
                }
            ],
        }

    return _make
