"""
Helpers shared by the draft and published listing routes.
"""
import logging
from decimal import Decimal
from typing import Any, Awaitable, TypeVar

from fastapi.encoders import jsonable_encoder

from listing_intake.errors import ClientInputError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_listing_id(listing_id: str | None) -> str:
    """Reject the request before any query runs when no listing id was sent"""
    if not listing_id:
        raise ClientInputError("listing_id missing")
    return listing_id


async def run_storage(operation: str, call: Awaitable[T]) -> T:
    """
    Await a store call, turning any database failure into ``StorageError``.

    ``operation`` labels the failure in the server log, e.g. ``save_step1``.
    No retries: the first failure ends the request.
    """
    try:
        return await call
    except Exception as e:
        logger.error(f"{operation.upper()}_ERROR: {type(e).__name__}: {str(e)}", exc_info=True)
        raise StorageError(operation) from e


def encode_rows(data: Any) -> Any:
    """
    JSON-ready copy of stored rows.

    NUMERIC columns (``price``, ``total_area``) come back from asyncpg as
    ``Decimal`` and are sent as strings, so no digits are lost to float.
    """
    return jsonable_encoder(data, custom_encoder={Decimal: str})
