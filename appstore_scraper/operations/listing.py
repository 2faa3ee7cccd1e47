"""Top charts and new-release collections from the iTunes RSS feed."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from appstore_scraper.constants import DEFAULT_COUNTRY, ITUNES_BASE, LIST_MAX_RESULTS, Collection
from appstore_scraper.normalize import feed_entry_id, feed_entry_to_list_app
from appstore_scraper.operations.lookup import lookup
from appstore_scraper.payloads import ListFeed, ensure_list, validate_payload
from appstore_scraper.schema import App, ListApp
from appstore_scraper.utils.http_client import RequestOptions, do_request
from appstore_scraper.utils.parsing import parse_json
from appstore_scraper.validate import (
    validate_category,
    validate_collection,
    validate_country,
    validate_list_num,
)

logger = logging.getLogger(__name__)


def list_apps(
    collection: str = Collection.TOP_FREE_IOS,
    category: Optional[int] = None,
    num: int = 50,
    country: str = DEFAULT_COUNTRY,
    lang: Optional[str] = None,
    full_detail: bool = False,
    request_options: Optional[RequestOptions] = None,
) -> Union[List[ListApp], List[App]]:
    """Apps in a collection, optionally narrowed to a category.

    By default returns light ListApp records built from the feed alone (one
    request). With ``full_detail=True`` the feed ids are looked up and full
    App records are returned instead; the two shapes are never merged.
    """
    validate_country(country)
    validate_collection(collection)
    if category is not None:
        validate_category(category)
    validate_list_num(num)

    url = f"{ITUNES_BASE}/{country}/rss/{collection}"
    if category:
        url += f"/genre={category}"
    url += f"/limit={min(num, LIST_MAX_RESULTS)}/json"

    body = do_request(url, request_options)
    data = validate_payload(ListFeed, parse_json(body), "List")
    entries = ensure_list(data.feed.entry if data.feed else None)
    if not entries:
        return []

    if not full_detail:
        apps = [feed_entry_to_list_app(entry) for entry in entries]
        return [a for a in apps if a is not None]

    ids = [i for i in (feed_entry_id(entry) for entry in entries) if i is not None]
    if not ids:
        return []
    logger.debug("Looking up %d apps from %s", len(ids), collection)
    return lookup(ids, "id", country, lang, request_options)
