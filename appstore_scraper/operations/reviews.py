"""Customer reviews from the iTunes RSS reviews feed."""

from __future__ import annotations

from typing import List, Optional

from appstore_scraper.constants import DEFAULT_COUNTRY, ITUNES_BASE, Sort
from appstore_scraper.normalize import feed_entry_to_review
from appstore_scraper.operations.lookup import resolve_app_id
from appstore_scraper.payloads import ReviewsFeed, ensure_list, validate_payload
from appstore_scraper.schema import Review
from appstore_scraper.utils.http_client import RequestOptions, do_request
from appstore_scraper.utils.parsing import parse_json
from appstore_scraper.validate import (
    validate_country,
    validate_required_field,
    validate_reviews_page,
    validate_sort,
)


def reviews(
    id: Optional[int] = None,
    app_id: Optional[str] = None,
    page: int = 1,
    sort: str = Sort.RECENT,
    country: str = DEFAULT_COUNTRY,
    request_options: Optional[RequestOptions] = None,
) -> List[Review]:
    """One page (1-10) of reviews for an app, by track ``id`` or bundle ``app_id``.

    The first feed entry is always dropped, as it is normally the app's own
    metadata. A page holding a single real review therefore comes back empty;
    this is a known limitation of the feed handling.
    """
    validate_required_field({"id": id, "app_id": app_id}, ["id", "app_id"], "Either id or appId is required")
    validate_country(country)
    validate_sort(sort)
    validate_reviews_page(page)

    if id is None:
        id = resolve_app_id(app_id, country, request_options)

    url = f"{ITUNES_BASE}/{country}/rss/customerreviews/page={page}/id={id}/sortby={sort}/json"
    body = do_request(url, request_options)
    data = validate_payload(ReviewsFeed, parse_json(body), "Reviews")

    entries = ensure_list(data.feed.entry if data.feed else None)
    return [feed_entry_to_review(entry) for entry in entries[1:]]
