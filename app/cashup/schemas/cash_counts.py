from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DenominationEntry(BaseModel):
    # owed is derived here; clients never send it.
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str
    count: int = Field(default=0, ge=0)
    float_units: int = Field(default=0, ge=0, alias="float")
    borrow: int = Field(default=0, ge=0)
    returned: int = Field(default=0, ge=0)
    deposited: int = Field(default=0, ge=0)


class SubmissionTotals(BaseModel):
    count_total: Decimal
    ideal_float: Decimal
    actual_float_total: Decimal
    borrowed_total: Decimal
    returned_total: Decimal
    deposited_total: Decimal = Decimal("0")
    float_balanced: bool


class SubmissionPayload(BaseModel):
    operator: str = Field(min_length=1)
    store: str = Field(min_length=1)
    notes: str = ""
    date: str
    time: str = Field(min_length=1)
    total: Decimal
    totals: SubmissionTotals
    denominations: list[DenominationEntry]


class SubmissionRecord(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    created_at: datetime
    payload: SubmissionPayload


class AppendBatchRequest(BaseModel):
    store: str | None = None
    records: list[SubmissionRecord]


class AppendBatchResponse(BaseModel):
    success: bool
    accepted: int
    store: str
    owed: dict[str, int]
    trace_id: str | None = None


class UpdateCheckedRequest(BaseModel):
    time_key: str = Field(min_length=1)
    fields: dict[str, Any]


class UpdateCheckedResponse(BaseModel):
    success: bool
    record_id: int
    updated_fields: list[str]
    trace_id: str | None = None


class OwedResponse(BaseModel):
    store: str
    owed: dict[str, int]


class StoredDenomination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    count: int = 0
    float_units: int = Field(default=0, alias="float")
    borrow: int = 0
    returned: int = 0
    deposited: int = 0


class CashCountRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submission_id: str
    store: str
    operator: str
    notes: str
    date: str
    time: str
    total: Decimal
    totals: dict[str, Any]
    denominations: list[StoredDenomination]
    total_checked: Decimal | None
    discrepancy: Decimal | None
    checked_counts: dict[str, int] | None
    recorded_at: datetime
    checked_at: datetime | None


class CashCountListResponse(BaseModel):
    store: str
    rows: list[CashCountRow]


class TopUpRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    store: str = Field(min_length=1)
    operator: str = Field(min_length=1)
    notes: str = ""
    units: dict[str, int]
    total: Decimal = Field(ge=0)


class TopUpResponse(BaseModel):
    success: bool
    record_id: int
    store: str
    total: Decimal
    trace_id: str | None = None


class TopUpRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    store: str
    operator: str
    notes: str
    date: str
    time: str
    units: dict[str, int]
    total: Decimal
    recorded_at: datetime


class TopUpListResponse(BaseModel):
    store: str | None = None
    rows: list[TopUpRow]
