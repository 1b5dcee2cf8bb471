"""
Error taxonomy for the listing API.

Every error the routes raise on purpose derives from ``ListingAPIError`` and
is rendered by the handlers below as ``{"status": "error", "message": ...}``.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ListingAPIError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ClientInputError(ListingAPIError):
    status_code = 400
    message = "listing_id missing"


class NotFoundError(ListingAPIError):
    status_code = 404
    message = "Listing not found"


class UploadError(ListingAPIError):
    status_code = 400
    message = "File upload failed"


class NotImplementedFeatureError(ListingAPIError):
    status_code = 501
    message = "Not implemented"


class StorageError(ListingAPIError):
    """Database failure. ``operation`` is logged, never shown to the client."""

    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Failed to {operation.replace('_', ' ')}")


def error_body(message: str) -> dict:
    return {"status": "error", "message": message}


async def listing_error_handler(request: Request, exc: ListingAPIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
    logger.info(f"Rejected malformed request to {request.url.path}: {fields}")
    return JSONResponse(status_code=400, content=error_body(f"Invalid request: {fields}"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"CRITICAL SERVER ERROR on {request.url.path}: {type(exc).__name__}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Internal Server Error"))


def register_error_handlers(app) -> None:
    app.add_exception_handler(ListingAPIError, listing_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
