from typing import Optional, Tuple, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from .memory import MemoryStore

R = TypeVar("R")


class StoreRegistry:
    """Chooses repository implementations for a request from configuration."""

    def __init__(self, backend: str, memory: MemoryStore, fallback_enabled: bool = True):
        self.backend = backend
        self.memory = memory
        self.fallback_enabled = fallback_enabled

    def repositories(
        self,
        db: Optional[AsyncSession],
        sql_repo: Type[R],
        memory_repo: Type[R],
    ) -> Tuple[R, Optional[R]]:
        in_memory = memory_repo(self.memory)
        if self.backend == "memory" or db is None:
            return in_memory, None
        return sql_repo(db), (in_memory if self.fallback_enabled else None)
