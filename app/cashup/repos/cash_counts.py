from sqlalchemy import select

from app.cashup.db.models import CashCountRecord


class CashCountRepository:
    def __init__(self, db):
        self.db = db

    def add(self, record: CashCountRecord) -> CashCountRecord:
        self.db.add(record)
        return record

    def get_by_id(self, record_id: int):
        return self.db.get(CashCountRecord, record_id)

    def all_in_order(self):
        stmt = select(CashCountRecord).order_by(CashCountRecord.id.asc())
        return self.db.execute(stmt).scalars().all()

    def list_by_store(self, store: str, *, limit: int | None = None):
        stmt = (
            select(CashCountRecord)
            .where(CashCountRecord.store == store)
            .order_by(CashCountRecord.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        return self.db.execute(stmt).scalars().all()
