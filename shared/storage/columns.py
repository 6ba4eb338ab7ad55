import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordMixin:
    """Identifier and audit timestamps carried by every table."""

    id = Column(String(64), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
