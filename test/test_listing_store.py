import pytest

from listing_intake.database.listing_store import PUBLISH_SOURCE_QUERY, ListingStore
from test.fakes import FakeConnection, FakePool


def make_store(**results) -> tuple[ListingStore, FakeConnection]:
    conn = FakeConnection(**results)
    return ListingStore(FakePool(conn)), conn


async def test_create_draft_seeds_four_tables_in_one_transaction():
    store, conn = make_store()

    await store.create_draft("1700000000000_5")

    assert conn.transactions == 1
    tables = [query.split()[2] for query, _ in conn.executed]
    assert tables == ["step1", "step2", "step3", "upload"]
    assert all("ON CONFLICT DO NOTHING" in query for query, _ in conn.executed)
    assert all(args == ("1700000000000_5",) for _, args in conn.executed)


async def test_upsert_step_sends_full_row():
    store, conn = make_store()

    await store.upsert_step("step3", {"listing_id": "x", "price": None, "city": "Austin", "area": None})

    query, args = conn.executed[0]
    assert query.startswith("INSERT INTO step3 (listing_id, price, city, area)")
    assert "ON CONFLICT (listing_id) DO UPDATE SET" in query
    assert args == ("x", None, "Austin", None)


async def test_upsert_step_rejects_published_table():
    store, conn = make_store()

    with pytest.raises(ValueError):
        await store.upsert_step("step4", {"listing_id": "x"})
    assert conn.executed == []


async def test_fetch_all_steps_missing_rows_become_empty():
    def fetchrow(query, listing_id):
        if "FROM step2" in query:
            return {"listing_id": listing_id, "wifi": 1}
        return None

    store, conn = make_store(fetchrow_result=fetchrow)

    steps = await store.fetch_all_steps("abc")

    assert steps == {"step1": {}, "step2": {"listing_id": "abc", "wifi": 1}, "step3": {}, "media": {}}
    assert len(conn.queries) == 4
    assert any("FROM upload" in query for query, _ in conn.queries)


async def test_publish_without_joined_row_writes_nothing():
    store, conn = make_store(fetchrow_result=None)

    assert await store.publish("abc") is False

    query, args = conn.queries[0]
    assert query == PUBLISH_SOURCE_QUERY
    assert args == ("abc",)
    assert conn.executed == []


async def test_publish_upserts_derived_row():
    joined = {
        "listing_id": "abc",
        "property_title": "Loft",
        "description": None,
        "property_type": "loft",
        "bedrooms": 1,
        "bathrooms": 1,
        "total_area": 40,
        "wifi": 1,
        "ac": 1,
        "dryer": 1,
        "microwave": 0,
        "special_notes": "",
        "price": 1200,
        "city": "Austin",
        "area": "East",
        "image1": "abc/image1-1.jpg",
        "image2": None,
        "image3": None,
        "image4": None,
        "video": None,
    }
    store, conn = make_store(fetchrow_result=joined)

    assert await store.publish("abc") is True

    assert conn.transactions == 1
    query, args = conn.executed[0]
    assert query.startswith("INSERT INTO step4 (listing_id, property_title")
    assert "ON CONFLICT (listing_id) DO UPDATE SET" in query
    assert "amenities = EXCLUDED.amenities" in query
    assert "wifi,ac,dryer" in args
    assert args[0] == "abc"


def test_publish_source_query_is_an_inner_join_on_all_drafts():
    for table in ("step2", "step3", "upload"):
        assert f"\n    JOIN {table} " in PUBLISH_SOURCE_QUERY
    assert "LEFT JOIN" not in PUBLISH_SOURCE_QUERY
    assert "s2.fire_extinguisher" in PUBLISH_SOURCE_QUERY


async def test_list_published_orders_by_row_id():
    store, conn = make_store(fetch_result=[{"id": 2, "listing_id": "b"}, {"id": 1, "listing_id": "a"}])

    rows = await store.list_published()

    assert rows == [{"id": 2, "listing_id": "b"}, {"id": 1, "listing_id": "a"}]
    assert "ORDER BY id DESC" in conn.queries[0][0]


async def test_get_published_not_found():
    store, _ = make_store(fetchrow_result=None)

    assert await store.get_published("missing") is None


async def test_latest_published_id_orders_by_created_at():
    store, conn = make_store(fetchval_result="abc")

    assert await store.latest_published_id() == "abc"
    assert "ORDER BY created_at DESC LIMIT 1" in conn.queries[0][0]


async def test_search_published_wraps_query_in_wildcards():
    store, conn = make_store(fetch_result=[])

    await store.search_published("Austin")

    query, args = conn.queries[0]
    assert args == ("%Austin%",)
    assert "city LIKE $1 OR area LIKE $1 OR price::text LIKE $1" in query
    assert "ORDER BY id DESC" in query


async def test_search_published_empty_query_matches_all():
    store, conn = make_store(fetch_result=[])

    await store.search_published()

    assert conn.queries[0][1] == ("%%",)
