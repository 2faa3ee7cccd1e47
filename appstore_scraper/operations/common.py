"""Helpers shared by the operations that scrape the apps.apple.com app page."""

from __future__ import annotations

import logging
from typing import Optional

from appstore_scraper.constants import APP_PAGE_BASE
from appstore_scraper.errors import HttpError
from appstore_scraper.utils.http_client import RequestOptions, do_request

logger = logging.getLogger(__name__)


def app_page_url(country: str, app_id: int) -> str:
    return f"{APP_PAGE_BASE}/{country}/app/id{app_id}"


def fetch_app_page(
    app_id: int,
    country: str,
    request_options: Optional[RequestOptions] = None,
) -> Optional[str]:
    """Return the app page HTML, or None when the page does not exist (HTTP 404).

    Any other failure propagates unchanged.
    """
    url = app_page_url(country, app_id)
    try:
        return do_request(url, request_options)
    except HttpError as exc:
        if exc.status == 404:
            logger.info("App page not found for id %s (404)", app_id)
            return None
        raise
