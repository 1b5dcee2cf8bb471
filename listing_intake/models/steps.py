from decimal import Decimal

from listing_intake.models.base import ListingRequest


class Step1Payload(ListingRequest):
    """Basic info: title, description and layout of the property."""

    property_title: str | None = None
    description: str | None = None
    property_type: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    total_area: Decimal | None = None

    def to_row(self) -> dict:
        """
        Full-replace row for the ``step1`` table.

        Every column is written, so fields omitted from this request reset
        whatever an earlier save stored.
        """
        return self.model_dump()


class Step2Payload(ListingRequest):
    """Amenity flags plus free text. Flags count as set only when equal to 1."""

    wifi: int = 0
    tv: int = 0
    ac: int = 0
    heating: int = 0
    washer: int = 0
    dryer: int = 0
    refrigerator: int = 0
    stove: int = 0
    microwave: int = 0
    coffee_maker: int = 0
    dishwasher: int = 0
    smoke_alarm: int = 0
    co_alarm: int = 0
    first_aid: int = 0
    fire_extinguisher: int = 0

    unique_features: str = ""
    special_notes: str = ""

    def to_row(self) -> dict:
        return self.model_dump()


class Step3Payload(ListingRequest):
    price: Decimal | None = None
    city: str | None = None
    area: str | None = None

    def to_row(self) -> dict:
        return self.model_dump()


class PublishRequest(ListingRequest):
    pass
