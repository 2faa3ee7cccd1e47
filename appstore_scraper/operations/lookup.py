"""iTunes Lookup API: apps by track id, bundle id or developer (artist) id."""

from __future__ import annotations

import logging
from typing import List, Literal, Optional, Sequence, Union
from urllib.parse import urlencode

from appstore_scraper.constants import DEFAULT_COUNTRY, LOOKUP_URL
from appstore_scraper.errors import AppNotFoundError, PreconditionError
from appstore_scraper.normalize import clean_app
from appstore_scraper.payloads import LookupResponse, validate_payload
from appstore_scraper.schema import App
from appstore_scraper.utils.http_client import RequestOptions, do_request
from appstore_scraper.utils.parsing import parse_json
from appstore_scraper.validate import validate_country

logger = logging.getLogger(__name__)

LookupId = Union[int, str, Sequence[Union[int, str]]]
IdField = Literal["id", "bundleId", "artistId"]


def lookup(
    ids: LookupId,
    id_field: IdField = "id",
    country: str = DEFAULT_COUNTRY,
    lang: Optional[str] = None,
    request_options: Optional[RequestOptions] = None,
) -> List[App]:
    """Look up apps and return only software records, in upstream order.

    Developer lookups send the artist id under the ``id`` parameter.
    """
    if id_field not in ("id", "bundleId", "artistId"):
        raise PreconditionError(f'Invalid lookup field: "{id_field}"')
    validate_country(country)

    id_list = [ids] if isinstance(ids, (int, str)) else list(ids)
    if not id_list:
        return []

    params = {
        "bundleId" if id_field == "bundleId" else "id": ",".join(str(i) for i in id_list),
        "country": country,
        "entity": "software",
    }
    if lang:
        params["lang"] = lang
    url = f"{LOOKUP_URL}?{urlencode(params)}"

    body = do_request(url, request_options)
    response = validate_payload(LookupResponse, parse_json(body), "iTunes")
    apps = [clean_app(result) for result in response.results if result.is_software]
    logger.debug("Lookup by %s (%d ids) returned %d apps", id_field, len(id_list), len(apps))
    return apps


def resolve_app_id(
    app_id: str,
    country: str = DEFAULT_COUNTRY,
    request_options: Optional[RequestOptions] = None,
) -> int:
    """Resolve a bundle id (``com.example.app``) to its numeric track id."""
    if not app_id:
        raise PreconditionError("appId is required")
    apps = lookup(app_id, "bundleId", country, request_options=request_options)
    if not apps or not apps[0].id:
        raise AppNotFoundError(f"App not found: {app_id}")
    return apps[0].id
