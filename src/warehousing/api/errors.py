"""HTTP mapping for storage errors.

Protean's own exceptions (``ValidationError`` -> 400, ``ObjectNotFoundError``
-> 404) are mapped by ``protean.integrations.fastapi``; this module adds the
capacity-allocation outcomes and an opaque, logged 500 for anything else.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from warehousing.errors import (
    CapacityExceededError,
    ConcurrencyConflictError,
    ConflictError,
    IncompatibleZoneError,
    StorageError,
)

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    CapacityExceededError: 409,
    IncompatibleZoneError: 422,
    ConflictError: 409,
    ConcurrencyConflictError: 409,
}


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    status_code = STATUS_CODES.get(type(exc), 400)
    logger.info("Storage request rejected", path=request.url.path, error=exc.code, status_code=status_code)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"error": "internal_error"})


def install_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class in STATUS_CODES:
        app.add_exception_handler(exc_class, storage_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
