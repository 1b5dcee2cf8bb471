import asyncio
import logging

from fastapi import UploadFile

from listing_intake.database.listing_store import ListingStore
from listing_intake.errors import NotImplementedFeatureError, UploadError
from listing_intake.services.blob_storage import (
    MAX_UPLOAD_BYTES,
    BlobStore,
    build_media_path,
    prepare_image,
)

logger = logging.getLogger(__name__)

IMAGE_SLOTS = ("image1", "image2", "image3", "image4")


async def _upload_slot(blob_store: BlobStore, listing_id: str, slot: str, upload: UploadFile) -> str:
    await upload.seek(0)
    content = await upload.read()

    if len(content) > MAX_UPLOAD_BYTES:
        raise UploadError(f"File upload failed: {slot} is larger than {MAX_UPLOAD_BYTES} bytes")

    # Pillow work is blocking
    loop = asyncio.get_running_loop()
    content = await loop.run_in_executor(None, prepare_image, content)

    path = build_media_path(listing_id, slot, upload.filename)
    return await blob_store.put(path, content, upload.content_type)


async def _discard(blob_store: BlobStore, paths) -> None:
    """Best-effort removal of blobs written by a request that failed"""
    for path in paths:
        try:
            await blob_store.delete(path)
        except Exception as e:
            logger.error(f"Could not remove orphaned blob {path}: {type(e).__name__}: {e}")


async def save_media(
    store: ListingStore,
    blob_store: BlobStore,
    listing_id: str,
    images: dict[str, UploadFile | None],
    video: UploadFile | None = None,
) -> dict:
    """
    Upload the images of one request and record their paths for the listing.

    STEP 1: every present slot uploads in parallel and the call waits for all
    of them. If any upload fails, the ones that succeeded are removed again
    and nothing is written to the database.

    STEP 2: the ``upload`` row is replaced as a whole, so slots missing from
    this request end up null.

    Returns the stored media row.
    """
    if video is not None:
        raise NotImplementedFeatureError("Video upload is not supported yet")

    media_row: dict = {"listing_id": listing_id, "video": None}
    for slot in IMAGE_SLOTS:
        media_row[slot] = None

    present = [(slot, upload) for slot, upload in images.items() if slot in IMAGE_SLOTS and upload is not None]
    logger.info(f"Uploading {len(present)} media files for listing {listing_id}")

    results = await asyncio.gather(
        *(_upload_slot(blob_store, listing_id, slot, upload) for slot, upload in present),
        return_exceptions=True,
    )

    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        uploaded = [result for result in results if not isinstance(result, BaseException)]
        logger.error(f"Media upload failed for listing {listing_id}: {failures[0]}")
        await _discard(blob_store, uploaded)

        first = failures[0]
        if isinstance(first, UploadError):
            raise first
        raise UploadError(f"File upload failed: {first}") from first

    for (slot, _), path in zip(present, results):
        media_row[slot] = path

    try:
        await store.upsert_step("upload", media_row)
    except Exception:
        # Orphaned blobs otherwise; the database error itself propagates
        await _discard(blob_store, results)
        raise

    return media_row
