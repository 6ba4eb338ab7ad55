from .columns import RecordMixin, new_id, utcnow
from .fallback import StoreBackedService
from .memory import MemoryStore, stamp
from .registry import StoreRegistry
from .sql import translate_errors
