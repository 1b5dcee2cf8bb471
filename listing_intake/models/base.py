from pydantic import BaseModel, ConfigDict


def snake_to_camel(snake_str: str) -> str:
    """Convert snake_case to camelCase"""
    first, *rest = snake_str.split("_")
    return first + "".join(x.title() for x in rest)


class ListingRequest(BaseModel):
    """Base for every JSON body keyed by a listing id.

    Accepts snake_case keys and their camelCase aliases. ``listing_id`` stays
    optional at the model level so its absence is reported as a client error
    by the route instead of a schema failure.
    """

    model_config = ConfigDict(
        alias_generator=snake_to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    listing_id: str | None = None
