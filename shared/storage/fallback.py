from typing import Awaitable, Callable, Generic, Optional, Tuple, TypeVar

import structlog

from shared.exceptions import UpstreamUnavailable
from shared.observability.metrics import storefront_store_fallback_total

logger = structlog.get_logger(__name__)

R = TypeVar("R")
T = TypeVar("T")


class StoreBackedService(Generic[R]):
    """
    Runs repository operations against the primary store and repeats them
    on the fallback store when the primary is unreachable.

    Successful-looking responses served by the fallback have not been
    persisted anywhere durable.
    """

    resource = "records"

    def __init__(self, repo: R, fallback: Optional[R] = None):
        self.repo = repo
        self.fallback = fallback

    async def _run(self, operation: Callable[[R], Awaitable[T]]) -> Tuple[T, bool]:
        try:
            return await operation(self.repo), False
        except UpstreamUnavailable as exc:
            if self.fallback is None:
                raise
            logger.warning("store_fallback", resource=self.resource, error=exc.message)
            storefront_store_fallback_total.labels(resource=self.resource).inc()
            return await operation(self.fallback), True

    async def _call(self, operation: Callable[[R], Awaitable[T]]) -> T:
        result, _ = await self._run(operation)
        return result
