import asyncio

from listing_intake.database.connection import get_db_connection


def create_published_listings_table_sql():
    """Return SQL statement to create the 'step4' published listings table."""

    return """
    CREATE TABLE IF NOT EXISTS step4 (
      id SERIAL PRIMARY KEY,            -- newest-first ordering for reads
      listing_id VARCHAR(64) NOT NULL UNIQUE,

      property_title TEXT,
      description TEXT,
      property_type VARCHAR(100),
      bedrooms INTEGER,
      bathrooms INTEGER,
      total_area NUMERIC,

      amenities TEXT,                   -- e.g. 'wifi,ac,dryer'
      special_notes TEXT,

      price NUMERIC,
      city VARCHAR(200),
      area VARCHAR(200),

      image1 VARCHAR(500),
      image2 VARCHAR(500),
      image3 VARCHAR(500),
      image4 VARCHAR(500),
      video VARCHAR(500),

      created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );

    CREATE INDEX IF NOT EXISTS idx_step4_created_at ON step4(created_at);
    """


def main():
    """Main function to create the 'step4' table."""

    async def run():
        conn = await get_db_connection()
        try:
            await conn.execute(create_published_listings_table_sql())
            print("✅ 'step4' table created successfully.")
        finally:
            await conn.close()

    asyncio.run(run())


if __name__ == "__main__":
    main()
