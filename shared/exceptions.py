"""
Error taxonomy shared by every service.

Services and repositories raise these; the handlers registered by
register_exception_handlers() turn them into {"error": message} bodies
with the matching status code.
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class StorefrontError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(StorefrontError):
    status_code = status.HTTP_409_CONFLICT


class UpstreamUnavailable(StorefrontError):
    """The database or a payment provider could not be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": _describe(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
