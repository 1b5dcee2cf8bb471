import random
import time


def new_listing_id() -> str:
    """
    Listing id made of the epoch time in milliseconds and a random 0-9999 suffix.

    Collisions are unlikely, not impossible; nothing checks for them.
    """
    return f"{int(time.time() * 1000)}_{random.randrange(10000)}"
