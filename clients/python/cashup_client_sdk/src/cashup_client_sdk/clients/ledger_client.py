from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from ..exceptions import ApiError, BatchRejectedError, TransportError
from ..idempotency import new_idempotency_key
from ..models import (
    BatchAcceptance,
    CheckedUpdateResponse,
    OwedResponse,
    RecordListResponse,
    SubmissionRecord,
    TopUpListResponse,
    TopUpReceipt,
)
from .base import BaseClient

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(
    model: type[ModelT],
    data: object,
    operation: str,
    error_cls: type[ApiError] = TransportError,
    **details: object,
) -> ModelT:
    if not isinstance(data, dict):
        raise error_cls(
            code="INVALID_RESPONSE",
            message=f"Expected {operation} response to be a JSON object",
            details={"operation": operation, **details},
            trace_id=None,
            status_code=200,
            raw_payload=data,
        )
    try:
        return model.model_validate(data)
    except ModelValidationError as exc:
        raise error_cls(
            code="INVALID_RESPONSE",
            message=f"Unexpected {operation} response shape",
            details={"operation": operation, "errors": exc.errors(include_url=False), **details},
            trace_id=str(data.get("trace_id")) if data.get("trace_id") else None,
            status_code=200,
            raw_payload=data,
        ) from exc


@dataclass
class RemoteLedgerClient(BaseClient):
    """HTTP side of the sync port: batch append, checked updates, top-ups and reads."""

    def _resolve_store(self, store: str | None) -> str:
        resolved = store or self.store
        if not resolved:
            raise ValueError("A store is required for this request")
        return resolved

    def append_batch(self, records: Sequence[SubmissionRecord]) -> BatchAcceptance:
        if not records:
            raise ValueError("append_batch requires at least one record")
        store = self.store or records[-1].payload.store
        body = {
            "store": store,
            "records": [record.model_dump(mode="json", by_alias=True) for record in records],
        }
        data = self._request(
            "POST",
            "/cashup/batches",
            json_body=body,
            headers={"Idempotency-Key": new_idempotency_key()},
            operation="append_batch",
        )
        acceptance = _parse(BatchAcceptance, data, "append_batch", BatchRejectedError, batch_size=len(records))
        if not acceptance.success:
            raise BatchRejectedError(
                code="BATCH_REJECTED",
                message=acceptance.message or "Batch was not accepted",
                details={"batch_size": len(records)},
                trace_id=acceptance.trace_id,
                status_code=200,
                raw_payload=data,
            )
        return acceptance

    def update_checked_fields(self, time_key: str, fields: Mapping[str, Any]) -> CheckedUpdateResponse:
        data = self._request(
            "POST",
            "/cashup/checked",
            json_body={"time_key": time_key, "fields": dict(fields)},
            operation="update_checked_fields",
        )
        return _parse(CheckedUpdateResponse, data, "update_checked_fields")

    def log_topup(
        self,
        units: Mapping[str, int],
        total: Decimal,
        *,
        store: str | None = None,
        operator: str | None = None,
        notes: str = "",
    ) -> TopUpReceipt:
        body = {
            "store": self._resolve_store(store),
            "operator": operator or self.operator or "",
            "notes": notes,
            "units": {denomination_id: int(count) for denomination_id, count in units.items()},
            "total": str(total),
        }
        data = self._request(
            "POST",
            "/cashup/topups",
            json_body=body,
            headers={"Idempotency-Key": new_idempotency_key()},
            operation="log_topup",
        )
        return _parse(TopUpReceipt, data, "log_topup")

    def fetch_topups(self, store: str | None = None) -> TopUpListResponse:
        params = {"store": store or self.store} if (store or self.store) else None
        data = self._request("GET", "/cashup/topups", params=params, operation="fetch_topups")
        return _parse(TopUpListResponse, data, "fetch_topups")

    def fetch_owed(self, store: str | None = None) -> OwedResponse:
        data = self._request(
            "GET",
            "/cashup/owed",
            params={"store": self._resolve_store(store)},
            operation="fetch_owed",
        )
        return _parse(OwedResponse, data, "fetch_owed")

    def fetch_records(self, store: str | None = None) -> RecordListResponse:
        data = self._request(
            "GET",
            "/cashup/records",
            params={"store": self._resolve_store(store)},
            operation="fetch_records",
        )
        return _parse(RecordListResponse, data, "fetch_records")
