"""Search-term autocomplete from the iTunes search hints endpoint."""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

from appstore_scraper.constants import HINTS_URL
from appstore_scraper.errors import PreconditionError
from appstore_scraper.normalize import parse_hints
from appstore_scraper.payloads import HintsResponse, validate_payload
from appstore_scraper.schema import Suggestion
from appstore_scraper.utils.http_client import RequestOptions, do_request
from appstore_scraper.utils.parsing import parse_xml


def suggest(
    term: str,
    request_options: Optional[RequestOptions] = None,
) -> List[Suggestion]:
    if not term:
        raise PreconditionError("term is required")

    url = f"{HINTS_URL}?clientApplication=Software&term={quote(term, safe='')}"
    body = do_request(url, request_options)
    data = validate_payload(HintsResponse, parse_xml(body), "Suggest")
    return parse_hints(data)
