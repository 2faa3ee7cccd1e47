from __future__ import annotations

from typing import List, Optional

from appstore_scraper.constants import DEFAULT_COUNTRY
from appstore_scraper.errors import PreconditionError
from appstore_scraper.normalize import parse_version_history
from appstore_scraper.operations.common import fetch_app_page
from appstore_scraper.schema import VersionHistory
from appstore_scraper.utils.http_client import RequestOptions
from appstore_scraper.validate import validate_country


def version_history(
    id: Optional[int] = None,
    country: str = DEFAULT_COUNTRY,
    request_options: Optional[RequestOptions] = None,
) -> List[VersionHistory]:
    """Release entries from the app page's version history dialog, in page order.

    The page lists newest first as far as observed; the order is not checked.
    A missing app page (404) yields ``[]``.
    """
    if id is None:
        raise PreconditionError("id is required")
    validate_country(country)

    html = fetch_app_page(id, country, request_options)
    if html is None:
        return []
    return parse_version_history(html)
