import logging

from fastapi import APIRouter, Depends, Query, Request

from listing_intake.api.common import encode_rows, require_listing_id, run_storage
from listing_intake.database.listing_store import ListingStore, get_store
from listing_intake.errors import NotFoundError
from listing_intake.middleware.rate_limit import limiter
from listing_intake.models.steps import PublishRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["published"])


@router.post("/publish-final")
@limiter.limit("30/minute")
async def publish_final(request: Request, payload: PublishRequest, store: ListingStore = Depends(get_store)):
    """
    Snapshot the current drafts of a listing into its published row.

    Publishing again overwrites the published row with the drafts as they
    are now. When one of the draft tables has no row for the listing nothing
    is written, yet the call still succeeds with ``published: false``.
    """
    listing_id = require_listing_id(payload.listing_id)
    published = await run_storage("publish", store.publish(listing_id))

    if not published:
        logger.warning(f"Publish of {listing_id} wrote nothing: a draft step row is missing")
        return {"status": "success", "message": "Nothing to publish yet", "published": False}

    logger.info(f"Published listing {listing_id}")
    return {"status": "success", "message": "Listing Published Successfully!", "published": True}


@router.get("/get-all-listings")
@limiter.limit("120/minute")
async def get_all_listings(request: Request, store: ListingStore = Depends(get_store)):
    """All published listings, newest first"""
    rows = await run_storage("get_all_listings", store.list_published())
    return {"status": "success", "data": encode_rows(rows)}


@router.get("/get-final-listing/{listing_id}")
@limiter.limit("120/minute")
async def get_final_listing(request: Request, listing_id: str, store: ListingStore = Depends(get_store)):
    row = await run_storage("get_final_listing", store.get_published(listing_id))
    if row is None:
        raise NotFoundError("Listing not found")
    return {"status": "success", "data": encode_rows(row)}


@router.get("/get-latest-listing")
@limiter.limit("120/minute")
async def get_latest_listing(request: Request, store: ListingStore = Depends(get_store)):
    """
    Draft steps of the most recently published listing.

    An empty catalogue is not an HTTP error: it answers 200 with
    ``status: "error"`` and a "No listings found" message.
    """
    listing_id = await run_storage("get_latest_listing", store.latest_published_id())
    if listing_id is None:
        return {"status": "error", "message": "No listings found"}

    steps = await run_storage("get_latest_listing", store.fetch_all_steps(listing_id))
    return {"status": "success", "listing_id": listing_id, "data": encode_rows(steps)}


@router.get("/search")
@limiter.limit("60/minute")
async def search_listings(
    request: Request,
    q: str = Query("", description="Substring matched against city, area and price"),
    store: ListingStore = Depends(get_store),
):
    rows = await run_storage("search", store.search_published(q))
    return {"status": "success", "data": encode_rows(rows)}
