from __future__ import annotations

from typing import List, Optional

from appstore_scraper.constants import DEFAULT_COUNTRY
from appstore_scraper.errors import PreconditionError
from appstore_scraper.operations.lookup import lookup
from appstore_scraper.schema import App
from appstore_scraper.utils.http_client import RequestOptions
from appstore_scraper.validate import validate_country


def developer(
    dev_id: Optional[int] = None,
    country: str = DEFAULT_COUNTRY,
    lang: Optional[str] = None,
    request_options: Optional[RequestOptions] = None,
) -> List[App]:
    """All apps published by developer (artist) ``dev_id``."""
    validate_country(country)
    if dev_id is None:
        raise PreconditionError("devId is required")
    return lookup(dev_id, "artistId", country, lang, request_options)
