import re
from unittest.mock import patch

from listing_intake.services.identifiers import new_listing_id


def test_listing_id_shape():
    assert re.fullmatch(r"\d{13}_\d{1,4}", new_listing_id())


def test_listing_id_uses_millis_and_bounded_suffix():
    with patch("listing_intake.services.identifiers.time.time", return_value=1700000000.123456), patch(
        "listing_intake.services.identifiers.random.randrange", return_value=9999
    ) as mock_randrange:
        assert new_listing_id() == "1700000000123_9999"

    mock_randrange.assert_called_once_with(10000)


def test_listing_ids_differ():
    assert len({new_listing_id() for _ in range(50)}) > 1
