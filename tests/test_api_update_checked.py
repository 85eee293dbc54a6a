from decimal import Decimal

from app.cashup.db.models import CashCountRecord
from app.cashup.services.merge_resolver import time_to_second, times_match


def _seed(client, make_record, *times):
    records = [make_record(f"r-{index}", time=value) for index, value in enumerate(times)]
    response = client.post("/cashup/batches", json={"records": records})
    assert response.status_code == 200


def test_time_key_matches_within_the_same_second(client, db_session, make_record):
    _seed(client, make_record, "2024-01-01 09:00:03.842Z")

    response = client.post(
        "/cashup/checked",
        json={
            "time_key": "2024-01-01 09:00:03",
            "fields": {"total_checked": "30", "discrepancy": "-10", "10_checked": 3},
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert set(payload["updated_fields"]) == {"total_checked", "discrepancy", "10_checked"}

    row = db_session.get(CashCountRecord, payload["record_id"])
    assert row.total_checked == Decimal("30")
    assert row.discrepancy == Decimal("-10")
    assert row.checked_counts == {"10": 3}
    assert row.checked_at is not None


def test_time_key_in_another_second_is_not_found(client, make_record):
    _seed(client, make_record, "2024-01-01 09:00:05")

    response = client.post(
        "/cashup/checked",
        json={"time_key": "2024-01-01 09:00:03", "fields": {"total_checked": "30"}},
    )

    assert response.status_code == 404
    payload = response.json()
    assert payload["code"] == "CHECKED_ROW_NOT_FOUND"
    assert payload["details"] == {"time_key": "2024-01-01 09:00:03"}
    assert payload["trace_id"]


def test_first_matching_row_wins(client, db_session, make_record):
    _seed(client, make_record, "2024-01-01T09:00:03.100Z", "2024-01-01T09:00:03.900Z")
    response = client.post(
        "/cashup/checked",
        json={"time_key": "2024-01-01T09:00:03Z", "fields": {"total_checked": "1"}},
    )
    first = db_session.query(CashCountRecord).order_by(CashCountRecord.id).first()
    assert response.json()["record_id"] == first.id


def test_only_whitelisted_fields_are_written(client, db_session, make_record):
    _seed(client, make_record, "2024-01-01T09:00:03.842Z")
    response = client.post(
        "/cashup/checked",
        json={
            "time_key": "2024-01-01T09:00:03.842Z",
            "fields": {"operator": "mallory", "total": "0", "3_checked": 1, "0.50_checked": 4},
        },
    )
    assert response.status_code == 200
    assert response.json()["updated_fields"] == ["0.50_checked"]

    row = db_session.get(CashCountRecord, response.json()["record_id"])
    assert row.operator == "sam"
    assert row.total == Decimal("140")
    assert row.checked_counts == {"0.50": 4}


def test_unparsable_time_falls_back_to_string_equality(client, make_record):
    _seed(client, make_record, "end of day")
    assert client.post(
        "/cashup/checked", json={"time_key": "end of day", "fields": {"discrepancy": "0"}}
    ).status_code == 200
    assert client.post(
        "/cashup/checked", json={"time_key": "End of day", "fields": {"discrepancy": "0"}}
    ).status_code == 404


def test_invalid_checked_value_is_rejected(client, make_record):
    _seed(client, make_record, "2024-01-01T09:00:03Z")
    response = client.post(
        "/cashup/checked",
        json={"time_key": "2024-01-01T09:00:03Z", "fields": {"10_checked": "many"}},
    )
    assert response.status_code == 422
    assert response.json()["details"]["field"] == "10_checked"


def test_time_parsing_rules():
    assert time_to_second("2024-01-01 09:00:03.842Z") == time_to_second("2024-01-01T09:00:03")
    assert time_to_second("2024-01-01T19:00:03+10:00") == time_to_second("2024-01-01 09:00:03")
    assert time_to_second("not a time") is None
    assert times_match("2024-01-01 09:00:03.999", "2024-01-01 09:00:03")
    assert not times_match("2024-01-01 09:00:04.000", "2024-01-01 09:00:03.999")
