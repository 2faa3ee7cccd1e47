"""Full app details, backfilled from the app page and ratings page when asked."""

from __future__ import annotations

import logging
from typing import Optional

from appstore_scraper.constants import DEFAULT_COUNTRY
from appstore_scraper.errors import AppNotFoundError, HttpError
from appstore_scraper.normalize import parse_screenshots
from appstore_scraper.operations.common import fetch_app_page
from appstore_scraper.operations.lookup import lookup
from appstore_scraper.operations.ratings import EMPTY_BODY_STATUS, ratings as fetch_ratings
from appstore_scraper.schema import App, Screenshots
from appstore_scraper.utils.http_client import RequestOptions
from appstore_scraper.validate import validate_country, validate_required_field

logger = logging.getLogger(__name__)

_RATINGS_UNAVAILABLE = frozenset({404, EMPTY_BODY_STATUS})


def scrape_screenshots(
    app_id: int,
    country: str = DEFAULT_COUNTRY,
    request_options: Optional[RequestOptions] = None,
) -> Screenshots:
    """Screenshot URLs from the app page; empty when the page is 404."""
    html = fetch_app_page(app_id, country, request_options)
    if html is None:
        return Screenshots()
    return parse_screenshots(html)


def app(
    id: Optional[int] = None,
    app_id: Optional[str] = None,
    country: str = DEFAULT_COUNTRY,
    lang: Optional[str] = None,
    ratings: bool = False,
    request_options: Optional[RequestOptions] = None,
) -> App:
    """Details for one app, by track ``id`` or bundle ``app_id``.

    When the Lookup API returns no screenshots at all, they are scraped from
    the app page. With ``ratings=True`` the star histogram is attached; an
    app without a ratings page (404 or empty body) simply has none.

    Raises:
        PreconditionError: neither ``id`` nor ``app_id`` given.
        AppNotFoundError: the lookup returned no app.
    """
    validate_required_field({"id": id, "app_id": app_id}, ["id", "app_id"], "Either id or appId is required")
    validate_country(country)

    if id is not None:
        apps = lookup(id, "id", country, lang, request_options)
    else:
        apps = lookup(app_id, "bundleId", country, lang, request_options)
    if not apps:
        raise AppNotFoundError(f"App not found: {id if id is not None else app_id}")

    result = apps[0]

    if not result.has_screenshots:
        logger.debug("No screenshots from lookup for %s; scraping app page", result.id)
        shots = scrape_screenshots(result.id, country, request_options)
        result = result.model_copy(update=shots.model_dump())

    if ratings:
        try:
            histogram = fetch_ratings(result.id, country, request_options).histogram
        except HttpError as exc:
            if exc.status not in _RATINGS_UNAVAILABLE:
                raise
            logger.info("Ratings unavailable for %s (status %s)", result.id, exc.status)
        else:
            result = result.model_copy(update={"histogram": histogram})

    return result
