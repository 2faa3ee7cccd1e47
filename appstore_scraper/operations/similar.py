"""Related apps linked from an app's page, labelled by page section."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from appstore_scraper.constants import DEFAULT_COUNTRY
from appstore_scraper.normalize import parse_similar_entries
from appstore_scraper.operations.common import fetch_app_page
from appstore_scraper.operations.lookup import lookup, resolve_app_id
from appstore_scraper.schema import App, SimilarApp
from appstore_scraper.utils.http_client import RequestOptions
from appstore_scraper.validate import validate_country, validate_required_field

logger = logging.getLogger(__name__)


def similar(
    id: Optional[int] = None,
    app_id: Optional[str] = None,
    country: str = DEFAULT_COUNTRY,
    lang: Optional[str] = None,
    include_link_type: bool = False,
    request_options: Optional[RequestOptions] = None,
) -> Union[List[App], List[SimilarApp]]:
    """Apps linked from the app page, excluding the app itself.

    Returns unique Apps in page order, or with ``include_link_type=True`` one
    SimilarApp per distinct (app, section) pair. A missing app page (404)
    yields ``[]``.
    """
    validate_required_field({"id": id, "app_id": app_id}, ["id", "app_id"], "Either id or appId is required")
    validate_country(country)

    if id is None:
        id = resolve_app_id(app_id, country, request_options)

    html = fetch_app_page(id, country, request_options)
    if html is None:
        return []

    entries = parse_similar_entries(html, exclude_id=id)
    if not entries:
        return []

    unique_ids = list(dict.fromkeys(found_id for found_id, _ in entries))
    logger.debug("Found %d linked apps on page of %s", len(unique_ids), id)
    apps = lookup(unique_ids, "id", country, lang, request_options)
    by_id = {a.id: a for a in apps}

    if not include_link_type:
        return [by_id[i] for i in unique_ids if i in by_id]

    results = []
    seen = set()
    for found_id, link_type in entries:
        key = (found_id, link_type)
        if key in seen or found_id not in by_id:
            continue
        seen.add(key)
        results.append(SimilarApp(app=by_id[found_id], link_type=link_type))
    return results
