"""Exception handlers that turn domain errors into JSON responses.

Domain error classes carry their own ``status_code`` and ``message``; the
response body uses the same ``{"detail": ...}`` shape as ``HTTPException``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from libs.common.logging import get_logger

logger = get_logger(__name__)


def add_exception_handlers(app: FastAPI, *error_types: type[Exception]) -> None:
    """Register a ``{"detail": message}`` handler for each domain error type."""

    async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
        status_code = getattr(exc, "status_code", 400)
        message = getattr(exc, "message", str(exc))
        logger.info(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            message,
        )
        return JSONResponse(status_code=status_code, content={"detail": message})

    for error_type in error_types:
        app.add_exception_handler(error_type, domain_error_handler)
