from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from app.cashup.core.error_catalog import AppError, ErrorCatalog
from app.cashup.db.session import get_db
from app.cashup.schemas.cash_counts import (
    AppendBatchRequest,
    AppendBatchResponse,
    CashCountListResponse,
    CashCountRow,
    OwedResponse,
    UpdateCheckedRequest,
    UpdateCheckedResponse,
)
from app.cashup.services.merge_resolver import MergeResolver


router = APIRouter()


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def _require_store(store: str | None) -> str:
    store = (store or "").strip()
    if not store:
        raise AppError(ErrorCatalog.STORE_REQUIRED)
    return store


@router.post("/cashup/batches", response_model=AppendBatchResponse)
def append_batch(request: Request, payload: AppendBatchRequest, db=Depends(get_db)):
    result = MergeResolver(db).append_batch(
        payload.records,
        store=payload.store,
        trace_id=_trace_id(request),
    )
    return AppendBatchResponse(
        success=True,
        accepted=result.accepted,
        store=result.store,
        owed=result.owed,
        trace_id=_trace_id(request),
    )


@router.post("/cashup/checked", response_model=UpdateCheckedResponse)
def update_checked_fields(request: Request, payload: UpdateCheckedRequest, db=Depends(get_db)):
    result = MergeResolver(db).update_checked_fields(
        payload.time_key,
        payload.fields,
        trace_id=_trace_id(request),
    )
    return UpdateCheckedResponse(
        success=True,
        record_id=result.record_id,
        updated_fields=result.updated_fields,
        trace_id=_trace_id(request),
    )


@router.get("/cashup/owed", response_model=OwedResponse)
def get_owed(store: str | None = Query(default=None), db=Depends(get_db)):
    store = _require_store(store)
    return OwedResponse(store=store, owed=MergeResolver(db).owed_slice(store))


@router.get("/cashup/records", response_model=CashCountListResponse)
def list_records(
    store: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=1000),
    db=Depends(get_db),
):
    store = _require_store(store)
    rows = MergeResolver(db).list_records(store, limit=limit)
    return CashCountListResponse(store=store, rows=[CashCountRow.model_validate(row) for row in rows])
