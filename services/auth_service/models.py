from sqlalchemy import Column, String

from shared.config.database import Base
from shared.storage import RecordMixin


class User(RecordMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    full_name = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=True)
