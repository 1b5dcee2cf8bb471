"""
Publish aggregation.

Turns one joined draft row (step1 + step2 + step3 + upload) into the
denormalized ``step4`` row served to public readers.
"""

from typing import Any, Mapping

# Canonical order. Stored amenity strings depend on it; do not reorder.
AMENITY_FLAGS = (
    "wifi",
    "tv",
    "ac",
    "heating",
    "washer",
    "dryer",
    "refrigerator",
    "stove",
    "microwave",
    "coffee_maker",
    "dishwasher",
    "smoke_alarm",
    "co_alarm",
    "first_aid",
    "fire_extinguisher",
)

STEP1_COLUMNS = ("property_title", "description", "property_type", "bedrooms", "bathrooms", "total_area")
STEP3_COLUMNS = ("price", "city", "area")
MEDIA_COLUMNS = ("image1", "image2", "image3", "image4", "video")


def derive_amenities(step2_row: Mapping[str, Any]) -> str:
    """
    Comma-joined names of the flags set to exactly 1, in canonical order.

    Any other value (0, 2, None, a missing key) counts as not set. No flag
    set gives an empty string.
    """
    return ",".join(flag for flag in AMENITY_FLAGS if step2_row.get(flag) == 1)


def build_published_row(joined_row: Mapping[str, Any]) -> dict:
    """Build the ``step4`` row for one listing from its joined drafts"""
    row: dict[str, Any] = {"listing_id": joined_row["listing_id"]}
    for column in STEP1_COLUMNS:
        row[column] = joined_row.get(column)

    row["amenities"] = derive_amenities(joined_row)
    row["special_notes"] = joined_row.get("special_notes")

    for column in STEP3_COLUMNS + MEDIA_COLUMNS:
        row[column] = joined_row.get(column)
    return row
