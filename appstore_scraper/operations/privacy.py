from __future__ import annotations

from typing import Optional

from appstore_scraper.constants import DEFAULT_COUNTRY
from appstore_scraper.errors import PreconditionError
from appstore_scraper.normalize import parse_privacy
from appstore_scraper.operations.common import fetch_app_page
from appstore_scraper.schema import PrivacyDetails
from appstore_scraper.utils.http_client import RequestOptions
from appstore_scraper.validate import validate_country


def privacy(
    id: Optional[int] = None,
    country: str = DEFAULT_COUNTRY,
    request_options: Optional[RequestOptions] = None,
) -> PrivacyDetails:
    """Privacy policy link and declared data collection from the app page.

    An app without a page (404) gets an empty PrivacyDetails.
    """
    if id is None:
        raise PreconditionError("id is required")
    validate_country(country)

    html = fetch_app_page(id, country, request_options)
    if html is None:
        return PrivacyDetails()
    return parse_privacy(html)
