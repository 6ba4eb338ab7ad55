import structlog

from shared.exceptions import NotFoundError
from shared.storage import StoreBackedService

from .models import Transaction, TransactionEvent
from .schemas import TransactionCreate, TransactionEventCreate, TransactionUpdate

logger = structlog.get_logger(__name__)


class TransactionService(StoreBackedService):
    """Bookkeeping for payment attempts; nothing here talks to a provider."""

    resource = "transactions"

    async def create_transaction(self, data: TransactionCreate) -> Transaction:
        values = data.model_dump()
        transaction = await self._call(lambda repo: repo.create_transaction(Transaction(**values)))
        logger.info(
            "transaction_created",
            order_id=transaction.order_id,
            provider=transaction.provider,
            status=transaction.status,
        )
        return transaction

    async def update_transaction(self, order_id: str, data: TransactionUpdate) -> Transaction:
        changes = data.model_dump(exclude_unset=True)
        transaction = await self._call(lambda repo: repo.update_transaction(order_id, changes))
        if not transaction:
            raise NotFoundError("Transaction not found")
        logger.info("transaction_updated", order_id=order_id, status=transaction.status)
        return transaction

    async def record_event(self, data: TransactionEventCreate) -> TransactionEvent:
        values = data.model_dump()
        event = await self._call(lambda repo: repo.create_event(TransactionEvent(**values)))
        logger.info("transaction_event", transaction_id=event.transaction_id, event_type=event.event_type)
        return event
