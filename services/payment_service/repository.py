from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.exceptions import ConflictError
from shared.storage import MemoryStore, stamp, translate_errors, utcnow

from .models import Transaction, TransactionEvent

DUPLICATE_TRANSACTION = "Transaction for this order already exists"


class SqlTransactionRepository:
    store_name = "database"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_transaction(self, transaction: Transaction) -> Transaction:
        async with translate_errors(self.db, DUPLICATE_TRANSACTION):
            self.db.add(transaction)
            await self.db.commit()
            await self.db.refresh(transaction)
            return transaction

    async def update_transaction(self, order_id: str, changes: dict) -> Optional[Transaction]:
        async with translate_errors(self.db):
            result = await self.db.execute(select(Transaction).where(Transaction.order_id == order_id))
            transaction = result.scalars().first()
            if not transaction:
                return None
            for field, value in changes.items():
                setattr(transaction, field, value)
            transaction.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(transaction)
            return transaction

    async def create_event(self, event: TransactionEvent) -> TransactionEvent:
        async with translate_errors(self.db):
            self.db.add(event)
            await self.db.commit()
            await self.db.refresh(event)
            return event


class InMemoryTransactionRepository:
    store_name = "memory"

    def __init__(self, store: MemoryStore):
        self.store = store

    def _by_order(self, order_id: str) -> Optional[Transaction]:
        return next((t for t in self.store.rows("transactions") if t.order_id == order_id), None)

    async def create_transaction(self, transaction: Transaction) -> Transaction:
        if self._by_order(transaction.order_id):
            raise ConflictError(DUPLICATE_TRANSACTION)
        return self.store.insert("transactions", transaction)

    async def update_transaction(self, order_id: str, changes: dict) -> Optional[Transaction]:
        transaction = self._by_order(order_id)
        if not transaction:
            return None
        for field, value in changes.items():
            setattr(transaction, field, value)
        return stamp(transaction)

    async def create_event(self, event: TransactionEvent) -> TransactionEvent:
        return self.store.insert("transaction_events", event)
