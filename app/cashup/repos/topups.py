from sqlalchemy import select

from app.cashup.db.models import SafeTopUp


class SafeTopUpRepository:
    def __init__(self, db):
        self.db = db

    def add(self, topup: SafeTopUp) -> SafeTopUp:
        self.db.add(topup)
        return topup

    def list_recent(self, store: str | None = None, *, limit: int | None = None):
        stmt = select(SafeTopUp).order_by(SafeTopUp.id.desc())
        if store:
            stmt = stmt.where(SafeTopUp.store == store)
        if limit:
            stmt = stmt.limit(limit)
        return self.db.execute(stmt).scalars().all()
