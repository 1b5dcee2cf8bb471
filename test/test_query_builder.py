import pytest

from listing_intake.database.query_builder import QueryBuilder


def test_build_upsert_query_overwrites_every_column():
    query, values = QueryBuilder.build_upsert_query(
        {"listing_id": "abc", "price": 100, "city": "Austin", "area": None}, "step3"
    )

    assert query == (
        "INSERT INTO step3 (listing_id, price, city, area) VALUES ($1, $2, $3, $4) "
        "ON CONFLICT (listing_id) DO UPDATE SET price = EXCLUDED.price, city = EXCLUDED.city, "
        "area = EXCLUDED.area"
    )
    assert values == ["abc", 100, "Austin", None]


def test_build_upsert_query_only_key():
    query, values = QueryBuilder.build_upsert_query({"listing_id": "abc"}, "step1")

    assert query.endswith("ON CONFLICT (listing_id) DO NOTHING")
    assert values == ["abc"]


def test_build_upsert_query_rejects_unknown_table():
    with pytest.raises(ValueError, match="Invalid table"):
        QueryBuilder.build_upsert_query({"listing_id": "abc"}, "users; DROP TABLE step1")


def test_build_upsert_query_requires_conflict_column():
    with pytest.raises(ValueError, match="Missing conflict column"):
        QueryBuilder.build_upsert_query({"city": "Austin"}, "step3")


def test_build_seed_query():
    assert QueryBuilder.build_seed_query("upload") == (
        "INSERT INTO upload (listing_id) VALUES ($1) ON CONFLICT DO NOTHING"
    )
    with pytest.raises(ValueError):
        QueryBuilder.build_seed_query("step4")
