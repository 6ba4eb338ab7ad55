from sqlalchemy import Column, Integer, String, UniqueConstraint

from shared.config.database import Base
from shared.storage import RecordMixin


class CartItem(RecordMixin, Base):
    __tablename__ = "cart_items"

    user_id = Column(String(64), nullable=False, index=True)
    product_id = Column(String(64), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)


class WishlistItem(RecordMixin, Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),)

    user_id = Column(String(64), nullable=False, index=True)
    product_id = Column(String(64), nullable=False)
