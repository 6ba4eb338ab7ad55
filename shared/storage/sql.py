from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.exceptions import ConflictError, UpstreamUnavailable

logger = structlog.get_logger(__name__)


async def _rollback(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except (DBAPIError, OSError) as exc:
        # The connection is already gone; the session is discarded with the request.
        logger.warning("rollback_failed", error=str(exc))


@asynccontextmanager
async def translate_errors(db: AsyncSession, conflict_message: str = "Record already exists"):
    """
    Maps driver failures onto the shared error taxonomy:
    integrity violations become ConflictError, anything else raised by the
    driver or the network becomes UpstreamUnavailable.
    """
    try:
        yield
    except IntegrityError as exc:
        await _rollback(db)
        raise ConflictError(conflict_message) from exc
    except (DBAPIError, OSError) as exc:
        await _rollback(db)
        raise UpstreamUnavailable(f"Database unavailable: {exc.__class__.__name__}") from exc
