from sqlalchemy import Column, JSON, Numeric, String

from shared.config.database import Base
from shared.storage import RecordMixin


class Transaction(RecordMixin, Base):
    __tablename__ = "transactions"

    order_id = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(String(64), nullable=True)
    provider = Column(String(32), nullable=False)  # razorpay, stripe, cod
    payment_id = Column(String(128), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(8), nullable=False, default="INR")
    status = Column(String(20), nullable=False, default="pending")  # pending, success, failed
    details = Column(JSON, nullable=False, default=dict)


class TransactionEvent(RecordMixin, Base):
    __tablename__ = "transaction_events"

    transaction_id = Column(String(64), nullable=False, index=True)
    event_type = Column(String(64), nullable=False)
    status = Column(String(20), nullable=True)
    payload = Column(JSON, nullable=False, default=dict)
