from sqlalchemy import Boolean, Column, Integer, JSON, Numeric, String, Text

from shared.config.database import Base
from shared.storage import RecordMixin


class Category(RecordMixin, Base):
    __tablename__ = "categories"

    name = Column(String(120), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)


class Product(RecordMixin, Base):
    __tablename__ = "products"

    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)
    category = Column(String(120), nullable=False, index=True)
    images = Column(JSON, nullable=False, default=list)
    stock = Column(Integer, nullable=False, default=0)
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)
