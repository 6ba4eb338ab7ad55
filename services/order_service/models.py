from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, Numeric, String
from sqlalchemy.orm import relationship

from shared.config.database import Base
from shared.storage import RecordMixin


class Order(RecordMixin, Base):
    __tablename__ = "orders"

    user_id = Column(String(64), nullable=True, index=True)
    total = Column(Numeric(10, 2), nullable=False)  # sum of item price x quantity at placement
    status = Column(String(20), nullable=False, default="pending")  # confirmed, pending, cancelled
    shipping_address = Column(JSON, nullable=False)
    payment_method = Column(String(64), nullable=False)
    transaction_id = Column(String(128), nullable=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )


class OrderItem(RecordMixin, Base):
    __tablename__ = "order_items"

    order_id = Column(String(64), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(64), nullable=True)
    product_name = Column(String(255), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    order = relationship("Order", back_populates="items")
