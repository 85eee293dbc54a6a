from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from app.cashup.db.session import get_db
from app.cashup.schemas.cash_counts import TopUpListResponse, TopUpRequest, TopUpResponse, TopUpRow
from app.cashup.services.topups import SafeTopUpService


router = APIRouter()


@router.post("/cashup/topups", response_model=TopUpResponse)
def log_topup(request: Request, payload: TopUpRequest, db=Depends(get_db)):
    trace_id = getattr(request.state, "trace_id", "")
    result = SafeTopUpService(db).log_topup(
        store=payload.store,
        operator=payload.operator,
        units=payload.units,
        total=payload.total,
        notes=payload.notes,
        trace_id=trace_id,
    )
    return TopUpResponse(
        success=True,
        record_id=result.record_id,
        store=result.store,
        total=result.total,
        trace_id=trace_id,
    )


@router.get("/cashup/topups", response_model=TopUpListResponse)
def list_topups(
    store: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=1000),
    db=Depends(get_db),
):
    store = (store or "").strip() or None
    rows = SafeTopUpService(db).list_topups(store, limit=limit)
    return TopUpListResponse(store=store, rows=[TopUpRow.model_validate(row) for row in rows])
