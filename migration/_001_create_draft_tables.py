import asyncio

from listing_intake.database.connection import get_db_connection


# one table per intake step, one row per listing id
def create_draft_tables_sql():
    """Return SQL statement to create the four draft step tables."""

    return """
    CREATE TABLE IF NOT EXISTS step1 (
      listing_id VARCHAR(64) PRIMARY KEY,
      property_title TEXT,
      description TEXT,
      property_type VARCHAR(100),
      bedrooms INTEGER,
      bathrooms INTEGER,
      total_area NUMERIC
    );

    CREATE TABLE IF NOT EXISTS step2 (
      listing_id VARCHAR(64) PRIMARY KEY,
      wifi SMALLINT DEFAULT 0,
      tv SMALLINT DEFAULT 0,
      ac SMALLINT DEFAULT 0,
      heating SMALLINT DEFAULT 0,
      washer SMALLINT DEFAULT 0,
      dryer SMALLINT DEFAULT 0,
      refrigerator SMALLINT DEFAULT 0,
      stove SMALLINT DEFAULT 0,
      microwave SMALLINT DEFAULT 0,
      coffee_maker SMALLINT DEFAULT 0,
      dishwasher SMALLINT DEFAULT 0,
      smoke_alarm SMALLINT DEFAULT 0,
      co_alarm SMALLINT DEFAULT 0,
      first_aid SMALLINT DEFAULT 0,
      fire_extinguisher SMALLINT DEFAULT 0,
      unique_features TEXT DEFAULT '',
      special_notes TEXT DEFAULT ''
    );

    CREATE TABLE IF NOT EXISTS step3 (
      listing_id VARCHAR(64) PRIMARY KEY,
      price NUMERIC,
      city VARCHAR(200),
      area VARCHAR(200)
    );

    -- media paths returned by the blob store
    CREATE TABLE IF NOT EXISTS upload (
      listing_id VARCHAR(64) PRIMARY KEY,
      image1 VARCHAR(500),
      image2 VARCHAR(500),
      image3 VARCHAR(500),
      image4 VARCHAR(500),
      video VARCHAR(500)
    );
    """


def main():
    """Main function to create the draft tables."""

    async def run():
        conn = await get_db_connection()
        try:
            await conn.execute(create_draft_tables_sql())
            print("✅ draft tables created successfully.")
        finally:
            await conn.close()

    asyncio.run(run())


if __name__ == "__main__":
    main()
