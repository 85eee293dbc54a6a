from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
import responses

from cashup_client_sdk import load_config
from cashup_client_sdk.clients.health import HealthClient
from cashup_client_sdk.clients.ledger_client import RemoteLedgerClient
from cashup_client_sdk.exceptions import (
    BatchRejectedError,
    CheckedRowNotFoundError,
    ServerError,
    TransportError,
)
from cashup_client_sdk.http_client import HttpClient, TraceContext
from cashup_client_sdk.models import SubmissionPayload, SubmissionRecord
from cashup_client_sdk.submission_queue import OfflineSubmissionQueue
from cashup_client_sdk.sync import SyncCoordinator

BASE_URL = "https://api.example.com"


def _http(monkeypatch: pytest.MonkeyPatch) -> HttpClient:
    monkeypatch.setenv("CASHUP_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("CASHUP_RETRY_BACKOFF_SECONDS", "0")
    monkeypatch.setenv("CASHUP_RETRIES", "1")
    return HttpClient(load_config(), trace=TraceContext())


def _record(make_payload, record_id: str = "0001704099603842-000001-abcdef12") -> SubmissionRecord:
    return SubmissionRecord(
        id=record_id,
        created_at=datetime(2024, 1, 1, 9, 0, 3, tzinfo=timezone.utc),
        payload=SubmissionPayload.model_validate(make_payload()),
    )


@responses.activate
def test_append_batch_posts_records(monkeypatch, make_payload) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/batches",
        json={"success": True, "accepted": 1, "store": "store-1", "owed": {"10": 2}},
        status=200,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")

    acceptance = client.append_batch([_record(make_payload)])

    assert acceptance.owed == {"10": 2}
    request = responses.calls[0].request
    body = json.loads(request.body)
    assert body["store"] == "store-1"
    assert body["records"][0]["payload"]["denominations"][0]["float"] == 10
    assert "owed" not in body["records"][0]["payload"]["denominations"][0]
    assert request.headers["Idempotency-Key"]
    assert request.headers["X-Store-ID"] == "store-1"
    assert request.headers["X-Trace-ID"]


@responses.activate
def test_append_batch_uses_last_record_store(monkeypatch, make_payload) -> None:
    responses.add(responses.POST, f"{BASE_URL}/cashup/batches", json={"success": True}, status=200)
    client = RemoteLedgerClient(http=_http(monkeypatch))
    client.append_batch([_record(make_payload)])
    assert json.loads(responses.calls[0].request.body)["store"] == "store-1"


@responses.activate
def test_append_batch_is_not_retried(monkeypatch, make_payload) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/batches",
        json={"code": "DB_UNAVAILABLE", "message": "Database unavailable", "trace_id": "t-1"},
        status=503,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    with pytest.raises(ServerError) as excinfo:
        client.append_batch([_record(make_payload)])
    assert excinfo.value.code == "DB_UNAVAILABLE"
    assert len(responses.calls) == 1


@responses.activate
def test_append_batch_unsuccessful_body_is_rejection(monkeypatch, make_payload) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/batches",
        json={"success": False, "message": "sheet locked"},
        status=200,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    with pytest.raises(BatchRejectedError, match="sheet locked"):
        client.append_batch([_record(make_payload)])


@responses.activate
def test_transport_failure_maps_to_transport_error(monkeypatch, make_payload) -> None:
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    with pytest.raises(TransportError):
        client.append_batch([_record(make_payload)])


@responses.activate
def test_update_checked_fields_not_found(monkeypatch) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/checked",
        json={"code": "CHECKED_ROW_NOT_FOUND", "message": "No cash count matches", "trace_id": "t-404"},
        status=404,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    with pytest.raises(CheckedRowNotFoundError) as excinfo:
        client.update_checked_fields("2024-01-01 09:00:05", {"total_checked": "10"})
    assert excinfo.value.trace_id == "t-404"
    assert len(responses.calls) == 1


@responses.activate
def test_update_checked_fields_success(monkeypatch) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/checked",
        json={"success": True, "record_id": 3, "updated_fields": ["total_checked"]},
        status=200,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    response = client.update_checked_fields("2024-01-01 09:00:03", {"total_checked": "10", "notes": "x"})
    assert response.record_id == 3
    body = json.loads(responses.calls[0].request.body)
    assert body == {"time_key": "2024-01-01 09:00:03", "fields": {"total_checked": "10", "notes": "x"}}


@responses.activate
def test_fetch_owed_and_records(monkeypatch) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/cashup/owed",
        json={"store": "store-2", "owed": {"20": 1}},
        status=200,
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/cashup/records",
        json={
            "store": "store-2",
            "rows": [
                {
                    "id": 1,
                    "submission_id": "s-1",
                    "store": "store-2",
                    "operator": "sam",
                    "date": "2024-01-01",
                    "time": "2024-01-01T09:00:03.842Z",
                    "total": "120",
                    "denominations": [{"id": "10", "count": 12, "float": 10, "deposited": 2}],
                }
            ],
        },
        status=200,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    assert client.fetch_owed("store-2").owed == {"20": 1}
    records = client.fetch_records("store-2")
    assert records.rows[0].deposited_by_id() == {"10": 2}
    assert responses.calls[0].request.url.endswith("/cashup/owed?store=store-2")


def test_fetch_owed_requires_store(monkeypatch) -> None:
    client = RemoteLedgerClient(http=_http(monkeypatch))
    with pytest.raises(ValueError):
        client.fetch_owed()


@responses.activate
def test_health_client_reads_liveness_and_readiness(monkeypatch) -> None:
    responses.add(responses.GET, f"{BASE_URL}/health", json={"status": "ok", "trace_id": "t-1"}, status=200)
    responses.add(responses.GET, f"{BASE_URL}/ready", json={"status": "ready", "trace_id": "t-2"}, status=200)

    client = HealthClient(http=_http(monkeypatch), store="store-1")

    assert client.health()["status"] == "ok"
    assert client.ready()["status"] == "ready"
    assert responses.calls[0].request.headers["X-Store-ID"] == "store-1"


@responses.activate
def test_non_json_success_body_is_transport_error(monkeypatch, make_payload) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/batches",
        body="<html>Sign in to continue</html>",
        status=200,
        content_type="text/html",
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    with pytest.raises(TransportError) as excinfo:
        client.append_batch([_record(make_payload)])
    assert excinfo.value.code == "INVALID_RESPONSE"
    assert client.http.last_operation.result == "invalid_response"


@pytest.mark.parametrize(
    "body",
    [
        [{"success": True}],
        {"success": True, "owed": {"10": "lots"}},
        {"accepted": 1},
    ],
)
@responses.activate
def test_malformed_batch_response_is_rejection(monkeypatch, make_payload, body) -> None:
    responses.add(responses.POST, f"{BASE_URL}/cashup/batches", json=body, status=200)
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1")
    with pytest.raises(BatchRejectedError) as excinfo:
        client.append_batch([_record(make_payload)])
    assert excinfo.value.code == "INVALID_RESPONSE"
    assert excinfo.value.details["batch_size"] == 1


@responses.activate
def test_drain_survives_html_response(monkeypatch, queue: OfflineSubmissionQueue, make_payload) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/batches",
        body="<html>portal</html>",
        status=200,
        content_type="text/html",
    )
    record_id = queue.enqueue(make_payload())
    coordinator = SyncCoordinator(queue, RemoteLedgerClient(http=_http(monkeypatch), store="store-1"))

    result = coordinator.trigger()

    assert not result.success
    assert result.batch_size == 1
    assert [record.id for record in queue.peek_all()] == [record_id]
    assert coordinator.trigger().batch_size == 1


@responses.activate
def test_log_topup_posts_units(monkeypatch) -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/cashup/topups",
        json={"success": True, "record_id": 7, "store": "store-1", "total": "120.50", "trace_id": "t-7"},
        status=200,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch), store="store-1", operator="admin")

    receipt = client.log_topup({"50": 2, "0.50": 1}, Decimal("100.50"), notes="bank run")

    assert receipt.record_id == 7
    request = responses.calls[0].request
    assert json.loads(request.body) == {
        "store": "store-1",
        "operator": "admin",
        "notes": "bank run",
        "units": {"50": 2, "0.50": 1},
        "total": "100.50",
    }
    assert request.headers["Idempotency-Key"]


@responses.activate
def test_fetch_topups_filters_by_store(monkeypatch) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/cashup/topups",
        json={
            "store": "store-2",
            "rows": [
                {
                    "id": 1,
                    "store": "store-2",
                    "operator": "admin",
                    "date": "2024-01-01",
                    "time": "2024-01-01T08:00:00.000Z",
                    "units": {"20": 5},
                    "total": "100",
                }
            ],
        },
        status=200,
    )
    client = RemoteLedgerClient(http=_http(monkeypatch))
    listing = client.fetch_topups("store-2")
    assert listing.rows[0].units == {"20": 5}
    assert listing.rows[0].total == Decimal("100")
    assert responses.calls[0].request.url.endswith("/cashup/topups?store=store-2")
