from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class DenominationEntry(BaseModel):
    # owed is server-derived; the wire model has no field for it.
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str
    count: int = Field(default=0, ge=0)
    float_units: int = Field(default=0, ge=0, alias="float")
    borrow: int = Field(default=0, ge=0)
    returned: int = Field(default=0, ge=0)
    deposited: int = Field(default=0, ge=0)


class SubmissionTotals(BaseModel):
    model_config = ConfigDict(extra="forbid")

    count_total: Decimal
    ideal_float: Decimal
    actual_float_total: Decimal
    borrowed_total: Decimal
    returned_total: Decimal
    deposited_total: Decimal
    float_balanced: bool


class SubmissionPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    operator: str
    store: str
    notes: str = ""
    date: str
    time: str
    total: Decimal
    totals: SubmissionTotals
    denominations: list[DenominationEntry]


class SubmissionRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    created_at: datetime
    payload: SubmissionPayload


class BatchAcceptance(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
    accepted: int = 0
    store: str | None = None
    owed: dict[str, int] = Field(default_factory=dict)
    message: str | None = None
    trace_id: str | None = None


class CheckedUpdateResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
    record_id: int | None = None
    updated_fields: list[str] = Field(default_factory=list)
    trace_id: str | None = None


class OwedResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    store: str
    owed: dict[str, int] = Field(default_factory=dict)


class StoredDenomination(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    count: int = 0
    float_units: int = Field(default=0, alias="float")
    borrow: int = 0
    returned: int = 0
    deposited: int = 0


class StoredRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    submission_id: str
    store: str
    operator: str
    notes: str = ""
    date: str
    time: str
    total: Decimal
    denominations: list[StoredDenomination] = Field(default_factory=list)
    total_checked: Decimal | None = None
    discrepancy: Decimal | None = None
    checked_counts: dict[str, int] | None = None

    def deposited_by_id(self) -> dict[str, int]:
        return {entry.id: entry.deposited for entry in self.denominations}


class RecordListResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    store: str
    rows: list[StoredRecord] = Field(default_factory=list)


class TopUpReceipt(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
    record_id: int | None = None
    store: str | None = None
    total: Decimal | None = None
    trace_id: str | None = None


class TopUpRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    store: str
    operator: str
    notes: str = ""
    date: str
    time: str
    units: dict[str, int] = Field(default_factory=dict)
    total: Decimal


class TopUpListResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    store: str | None = None
    rows: list[TopUpRecord] = Field(default_factory=list)
