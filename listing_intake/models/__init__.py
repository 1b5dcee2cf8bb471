# Re-export request models
from listing_intake.models.base import ListingRequest, snake_to_camel
from listing_intake.models.steps import PublishRequest, Step1Payload, Step2Payload, Step3Payload

__all__ = [
    "ListingRequest",
    "snake_to_camel",
    # Draft step bodies
    "Step1Payload",
    "Step2Payload",
    "Step3Payload",
    "PublishRequest",
]
