"""Keyword search over the iTunes Search API."""

from __future__ import annotations

from typing import List, Optional, Union
from urllib.parse import urlencode

from appstore_scraper.constants import DEFAULT_COUNTRY, SEARCH_MAX_RESULTS, SEARCH_URL, Device
from appstore_scraper.errors import PreconditionError
from appstore_scraper.normalize import clean_app
from appstore_scraper.payloads import LookupResponse, validate_payload
from appstore_scraper.schema import App
from appstore_scraper.utils.http_client import RequestOptions, do_request
from appstore_scraper.utils.parsing import parse_json
from appstore_scraper.validate import validate_country, validate_device, validate_search_pagination


def search(
    term: str,
    num: int = 50,
    page: int = 1,
    device: str = Device.ALL,
    country: str = DEFAULT_COUNTRY,
    lang: Optional[str] = None,
    ids_only: bool = False,
    request_options: Optional[RequestOptions] = None,
) -> Union[List[App], List[int]]:
    """Search apps by ``term``; returns Apps, or track ids with ``ids_only``.

    The Search API has no offset and stops at 200 results, so pages are cut
    client-side from one response. Pages past the cap come back empty.
    """
    if not term:
        raise PreconditionError("term is required")
    validate_search_pagination(num, page)
    validate_device(device)
    validate_country(country)

    params = {
        "term": term,
        "country": country,
        "media": "software",
        "entity": device,
        "limit": min(num * page, SEARCH_MAX_RESULTS),
    }
    if lang:
        params["lang"] = lang
    url = f"{SEARCH_URL}?{urlencode(params)}"

    body = do_request(url, request_options)
    response = validate_payload(LookupResponse, parse_json(body), "Search")

    results = [result for result in response.results if result.is_software]
    start = (page - 1) * num
    window = results[start:start + num]

    if ids_only:
        return [result.trackId for result in window if result.trackId is not None]
    return [clean_app(result) for result in window]
