"""전역 예외 처리기.

Global exception handlers. HTTPException subclasses raised by services
keep FastAPI's default ``{"detail": ...}`` rendering; anything else is
logged with its traceback and reported as a generic 500.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 — Log and hide internals behind a 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """예외 처리기 등록 — Attach the handlers to the application."""
    app.add_exception_handler(Exception, unhandled_exception_handler)
