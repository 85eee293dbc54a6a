from sqlalchemy import select

from app.cashup.db.models import SafeOwedBalance


class OwedBalanceRepository:
    def __init__(self, db):
        self.db = db

    def get(self, store: str, denomination_id: str):
        stmt = select(SafeOwedBalance).where(
            SafeOwedBalance.store == store,
            SafeOwedBalance.denomination_id == denomination_id,
        )
        return self.db.execute(stmt).scalars().first()

    def get_or_create(self, store: str, denomination_id: str) -> SafeOwedBalance:
        balance = self.get(store, denomination_id)
        if balance is None:
            balance = SafeOwedBalance(store=store, denomination_id=denomination_id, units=0)
            self.db.add(balance)
            self.db.flush()
        return balance

    def apply_delta(self, store: str, denomination_id: str, delta: int) -> SafeOwedBalance:
        balance = self.get_or_create(store, denomination_id)
        balance.units = max(0, balance.units + delta)
        return balance

    def units_for_store(self, store: str) -> dict[str, int]:
        stmt = select(SafeOwedBalance).where(SafeOwedBalance.store == store)
        return {row.denomination_id: row.units for row in self.db.execute(stmt).scalars().all()}
