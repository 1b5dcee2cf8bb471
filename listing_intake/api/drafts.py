"""
Draft step endpoints.

A listing is built in four independent steps (basic info, amenities,
pricing/location, media). Each save replaces that step's row as a whole and
may be repeated any number of times, in any order, until the listing is
published.
"""
import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from listing_intake.api.common import encode_rows, require_listing_id, run_storage
from listing_intake.database.listing_store import ListingStore, get_store
from listing_intake.errors import ListingAPIError, StorageError
from listing_intake.middleware.rate_limit import limiter
from listing_intake.models.steps import Step1Payload, Step2Payload, Step3Payload
from listing_intake.services.blob_storage import BlobStore, get_blob_store
from listing_intake.services.identifiers import new_listing_id
from listing_intake.services.media import save_media

logger = logging.getLogger(__name__)

router = APIRouter(tags=["drafts"])


@router.get("/create-listing")
@limiter.limit("30/minute")
async def create_listing(request: Request, store: ListingStore = Depends(get_store)):
    """Mint a listing id and seed an empty row for it in every draft table"""
    listing_id = new_listing_id()
    await run_storage("create_listing", store.create_draft(listing_id))

    logger.info(f"Created draft listing {listing_id}")
    return {"status": "success", "listing_id": listing_id, "listingId": listing_id}


@router.post("/save-step1")
@limiter.limit("60/minute")
async def save_step1(request: Request, payload: Step1Payload, store: ListingStore = Depends(get_store)):
    require_listing_id(payload.listing_id)
    await run_storage("save_step1", store.upsert_step("step1", payload.to_row()))
    return {"status": "success"}


@router.post("/add-step2")
@limiter.limit("60/minute")
async def save_step2(request: Request, payload: Step2Payload, store: ListingStore = Depends(get_store)):
    require_listing_id(payload.listing_id)
    await run_storage("save_step2", store.upsert_step("step2", payload.to_row()))
    return {"status": "success"}


@router.post("/add-step3")
@limiter.limit("60/minute")
async def save_step3(request: Request, payload: Step3Payload, store: ListingStore = Depends(get_store)):
    require_listing_id(payload.listing_id)
    await run_storage("save_step3", store.upsert_step("step3", payload.to_row()))
    return {"status": "success"}


@router.post("/upload-media")
@limiter.limit("15/minute")
async def upload_media(
    request: Request,
    listing_id: str | None = Form(None),
    image1: UploadFile | None = File(None),
    image2: UploadFile | None = File(None),
    image3: UploadFile | None = File(None),
    image4: UploadFile | None = File(None),
    video: UploadFile | None = File(None),
    store: ListingStore = Depends(get_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Upload up to four named images and record their storage paths.

    All-or-nothing per request: one failed upload leaves the stored media row
    untouched. The ``video`` slot is reserved and currently answers 501.
    """
    listing_id = require_listing_id(listing_id)
    images = {"image1": image1, "image2": image2, "image3": image3, "image4": image4}

    try:
        await save_media(store, blob_store, listing_id, images, video=video)
    except ListingAPIError:
        raise
    except Exception as e:
        logger.error(f"STORAGE_UPLOAD_ERROR for listing {listing_id}: {type(e).__name__}: {str(e)}", exc_info=True)
        raise StorageError("save_media") from e

    return {"status": "success", "message": "Media saved successfully!"}


@router.get("/get-listing/{listing_id}")
@limiter.limit("120/minute")
async def get_listing(request: Request, listing_id: str, store: ListingStore = Depends(get_store)):
    """
    Current draft state of every step, used to resume editing.

    Steps that were never saved come back as empty objects.
    """
    steps = await run_storage("get_listing", store.fetch_all_steps(listing_id))
    return {"status": "success", "data": encode_rows(steps)}
