from sqlalchemy import Column, Integer, String, Text

from shared.config.database import Base
from shared.storage import RecordMixin


class Review(RecordMixin, Base):
    __tablename__ = "reviews"

    product_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    rating = Column(Integer, nullable=False)  # 1..5
    title = Column(String(255), nullable=True)
    comment = Column(Text, nullable=True)
