"""
SQL access for draft steps and published listings.

All statements go through one ``ListingStore`` bound to the shared asyncpg
pool. Each method acquires its own connection, so independent lookups can run
concurrently.
"""

import asyncio
import logging

import asyncpg  # type: ignore
from fastapi import Depends

from listing_intake.database.connection import get_pool
from listing_intake.database.query_builder import DRAFT_TABLES, PUBLISHED_TABLE, QueryBuilder
from listing_intake.services.publish import AMENITY_FLAGS, build_published_row

logger = logging.getLogger(__name__)

# Response key for each draft table
STEP_KEYS = {
    "step1": "step1",
    "step2": "step2",
    "step3": "step3",
    "upload": "media",
}

# Inner join: a listing missing any draft row produces no result
PUBLISH_SOURCE_QUERY = f"""
    SELECT
        s1.listing_id,
        s1.property_title, s1.description, s1.property_type,
        s1.bedrooms, s1.bathrooms, s1.total_area,
        {", ".join(f"s2.{flag}" for flag in AMENITY_FLAGS)},
        s2.special_notes,
        s3.price, s3.city, s3.area,
        u.image1, u.image2, u.image3, u.image4, u.video
    FROM step1 s1
    JOIN step2 s2 ON s1.listing_id = s2.listing_id
    JOIN step3 s3 ON s1.listing_id = s3.listing_id
    JOIN upload u ON s1.listing_id = u.listing_id
    WHERE s1.listing_id = $1
"""


class ListingStore:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    # ---------------- drafts ----------------

    async def create_draft(self, listing_id: str) -> None:
        """Seed empty rows for a new listing id in every draft table"""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                for table in DRAFT_TABLES:
                    await conn.execute(QueryBuilder.build_seed_query(table), listing_id)

    async def upsert_step(self, table: str, row: dict) -> None:
        if table not in DRAFT_TABLES:
            raise ValueError(f"Invalid draft table: {table}")

        query, values = QueryBuilder.build_upsert_query(row, table)
        async with self.pool.acquire() as conn:
            await conn.execute(query, *values)

    async def fetch_step(self, table: str, listing_id: str) -> dict | None:
        if table not in DRAFT_TABLES:
            raise ValueError(f"Invalid draft table: {table}")

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT * FROM {table} WHERE listing_id = $1", listing_id)
        return dict(row) if row else None

    async def fetch_all_steps(self, listing_id: str) -> dict:
        """
        Current state of all four drafts for one listing.

        The lookups are independent and run concurrently. A table without a
        row for the listing contributes an empty dict.
        """
        rows = await asyncio.gather(*(self.fetch_step(table, listing_id) for table in DRAFT_TABLES))
        return {STEP_KEYS[table]: row or {} for table, row in zip(DRAFT_TABLES, rows)}

    # ---------------- publish ----------------

    async def publish(self, listing_id: str) -> bool:
        """
        Snapshot the drafts of ``listing_id`` into ``step4``.

        Returns False without writing anything when one of the draft tables
        has no row for the listing.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                source = await conn.fetchrow(PUBLISH_SOURCE_QUERY, listing_id)
                if source is None:
                    return False

                published = build_published_row(dict(source))
                query, values = QueryBuilder.build_upsert_query(published, PUBLISHED_TABLE)
                await conn.execute(query, *values)

        logger.info(f"Snapshot written to {PUBLISHED_TABLE} for listing {listing_id}")
        return True

    # ---------------- published reads ----------------

    async def list_published(self) -> list[dict]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"SELECT * FROM {PUBLISHED_TABLE} ORDER BY id DESC")
        return [dict(row) for row in rows]

    async def get_published(self, listing_id: str) -> dict | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT * FROM {PUBLISHED_TABLE} WHERE listing_id = $1 LIMIT 1", listing_id
            )
        return dict(row) if row else None

    async def latest_published_id(self) -> str | None:
        async with self.pool.acquire() as conn:
            return await conn.fetchval(
                f"SELECT listing_id FROM {PUBLISHED_TABLE} ORDER BY created_at DESC LIMIT 1"
            )

    async def search_published(self, q: str = "") -> list[dict]:
        """Substring match on city, area or the text form of price. LIKE rules apply as-is."""
        like = f"%{q}%"
        query = f"""
            SELECT * FROM {PUBLISHED_TABLE}
            WHERE city LIKE $1 OR area LIKE $1 OR price::text LIKE $1
            ORDER BY id DESC
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, like)
        return [dict(row) for row in rows]


def get_store(pool: asyncpg.Pool = Depends(get_pool)) -> ListingStore:
    return ListingStore(pool)
