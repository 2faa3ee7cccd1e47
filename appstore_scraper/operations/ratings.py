"""Star-rating histogram from the legacy iTunes customer-reviews page."""

from __future__ import annotations

from typing import Optional

from appstore_scraper.constants import DEFAULT_COUNTRY, ITUNES_BASE, store_id
from appstore_scraper.errors import HttpError, PreconditionError
from appstore_scraper.normalize import parse_ratings
from appstore_scraper.schema import Ratings
from appstore_scraper.utils.http_client import RequestOptions, do_request
from appstore_scraper.validate import validate_country

# Status carried by HttpError when the page answers 200 with an empty body.
EMPTY_BODY_STATUS = 204


def ratings(
    id: Optional[int] = None,
    country: str = DEFAULT_COUNTRY,
    request_options: Optional[RequestOptions] = None,
) -> Ratings:
    """Total rating count and 1-5 histogram for app ``id``.

    Raises:
        HttpError: with status 204 when the page returns no content, which is
            distinct from a real 404 for an unknown app.
    """
    validate_country(country)
    if id is None:
        raise PreconditionError("id is required")

    url = f"{ITUNES_BASE}/{country}/customer-reviews/id{id}?displayable-kind=11"
    html = do_request(
        url,
        request_options,
        headers={"X-Apple-Store-Front": f"{store_id(country)},12"},
    )
    if not html:
        raise HttpError("No ratings data returned", EMPTY_BODY_STATUS, url)
    return parse_ratings(html)
