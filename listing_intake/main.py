import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

import listing_intake.database.connection as db_connection
from listing_intake.api.drafts import router as drafts_router
from listing_intake.api.published import router as published_router
from listing_intake.database.connection import create_asyncpg_pool
from listing_intake.errors import register_error_handlers
from listing_intake.middleware.rate_limit import custom_rate_limit_handler, limiter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [origin.strip() for origin in os.getenv("LISTINGS_CORS_ORIGINS", "*").split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    db_connection._db_pool = await create_asyncpg_pool()
    logger.info("Database pool created at startup")

    yield  # App runs

    # Shutdown
    if db_connection._db_pool:
        await db_connection._db_pool.close()
        db_connection._db_pool = None
        logger.info("Database pool closed")


app = FastAPI(title="Listing Intake API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)
register_error_handlers(app)

app.include_router(drafts_router)
app.include_router(published_router)


@app.get("/")
@limiter.limit("100/minute")
async def health(request: Request):
    logger.info("Health check endpoint accessed")
    return {"status": "success", "message": "Listing intake API is live"}


if __name__ == "__main__":

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
