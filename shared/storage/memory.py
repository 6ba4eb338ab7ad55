from collections import defaultdict
from typing import Any, Dict, List

from .columns import new_id, utcnow


class MemoryStore:
    """
    Process-local tables keyed by record id, in insertion order.

    Used as the primary store when STORE_BACKEND=memory and as the fallback
    when the database cannot be reached. Nothing here is synchronised or
    durable: it is a development store.
    """

    def __init__(self):
        self._tables: Dict[str, Dict[str, Any]] = defaultdict(dict)

    def table(self, name: str) -> Dict[str, Any]:
        return self._tables[name]

    def rows(self, name: str) -> List[Any]:
        return list(self._tables[name].values())

    def insert(self, name: str, record: Any) -> Any:
        stamp(record)
        self._tables[name][record.id] = record
        return record


def stamp(record: Any) -> Any:
    """Fills the id and timestamps the database would otherwise default."""
    if not getattr(record, "id", None):
        record.id = new_id()
    now = utcnow()
    if getattr(record, "created_at", None) is None:
        record.created_at = now
    record.updated_at = now
    return record
