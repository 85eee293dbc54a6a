from __future__ import annotations

import json

import pytest

from cashup_client_sdk.exceptions import QueueStorageError
from cashup_client_sdk.models import SubmissionPayload
from cashup_client_sdk.persistence import MemoryQueueStore
from cashup_client_sdk.submission_queue import OfflineSubmissionQueue


class BrokenStore:
    def load(self):
        raise QueueStorageError("storage unavailable")

    def save(self, data: bytes) -> None:
        raise OSError("disk full")

    def delete(self) -> None:
        raise OSError("read-only")


def test_enqueue_is_fifo(queue: OfflineSubmissionQueue, make_payload) -> None:
    first = queue.enqueue(make_payload(notes="first"))
    second = queue.enqueue(make_payload(notes="second"))
    records = queue.peek_all()
    assert [record.id for record in records] == [first, second]
    assert [record.payload.notes for record in records] == ["first", "second"]
    assert first != second


def test_queue_survives_restart(memory_store: MemoryQueueStore, make_payload) -> None:
    queue = OfflineSubmissionQueue(memory_store)
    record_id = queue.enqueue(make_payload(count_10=17))

    restored = OfflineSubmissionQueue(memory_store)
    records = restored.peek_all()
    assert [record.id for record in records] == [record_id]
    assert records[0].payload == SubmissionPayload.model_validate(make_payload(count_10=17))


def test_persisted_entries_use_wire_names(queue: OfflineSubmissionQueue, memory_store, make_payload) -> None:
    queue.enqueue(make_payload())
    stored = json.loads(memory_store.data)
    entry = stored[0]["payload"]["denominations"][0]
    assert entry["float"] == 10
    assert "owed" not in entry


def test_owed_is_rejected_in_payload(queue: OfflineSubmissionQueue, make_payload) -> None:
    payload = make_payload()
    payload["denominations"][0]["owed"] = 3
    with pytest.raises(ValueError):
        queue.enqueue(payload)
    assert len(queue) == 0


def test_replace_all_and_clear(queue: OfflineSubmissionQueue, memory_store, make_payload) -> None:
    queue.enqueue(make_payload(notes="a"))
    queue.enqueue(make_payload(notes="b"))
    remaining = queue.peek_all()[1:]
    queue.replace_all(remaining)
    assert [record.payload.notes for record in OfflineSubmissionQueue(memory_store).peek_all()] == ["b"]

    queue.clear()
    assert queue.peek_all() == []
    assert memory_store.data is None


def test_corrupt_data_starts_empty(make_payload) -> None:
    store = MemoryQueueStore(data=b"{not json")
    queue = OfflineSubmissionQueue(store)
    assert queue.peek_all() == []
    queue.enqueue(make_payload())
    assert len(json.loads(store.data)) == 1


def test_storage_failure_keeps_queue_in_memory(make_payload) -> None:
    queue = OfflineSubmissionQueue(BrokenStore())
    assert not queue.storage_healthy
    record_id = queue.enqueue(make_payload())
    assert [record.id for record in queue.peek_all()] == [record_id]
    assert not queue.storage_healthy
    queue.clear()
    assert len(queue) == 0
