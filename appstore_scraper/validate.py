"""Input allowlist checks, run before any value is interpolated into a URL."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from appstore_scraper.constants import (
    CATEGORIES,
    COLLECTIONS,
    DEVICES,
    LIST_MAX_RESULTS,
    MARKETS,
    REVIEWS_MAX_PAGE,
    SORTS,
)
from appstore_scraper.errors import PreconditionError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_country(country: str) -> None:
    if not isinstance(country, str) or country.lower() not in MARKETS:
        raise PreconditionError(f'Invalid country: "{country}"')


def validate_collection(value: str) -> None:
    if value not in COLLECTIONS:
        raise PreconditionError(f'Invalid collection: "{value}"')


def validate_category(value: int) -> None:
    if not _is_int(value) or value not in CATEGORIES:
        raise PreconditionError(f"Invalid category: {value}")


def validate_device(value: str) -> None:
    if value not in DEVICES:
        raise PreconditionError(f'Invalid device: "{value}"')


def validate_sort(value: str) -> None:
    if value not in SORTS:
        raise PreconditionError(f'Invalid sort: "{value}"')


def validate_reviews_page(page: int) -> None:
    if not _is_int(page) or not 1 <= page <= REVIEWS_MAX_PAGE:
        raise PreconditionError(f"page must be an integer between 1 and {REVIEWS_MAX_PAGE}")


def validate_list_num(num: int) -> None:
    if not _is_int(num) or not 1 <= num <= LIST_MAX_RESULTS:
        raise PreconditionError(f"num must be an integer between 1 and {LIST_MAX_RESULTS}")


def validate_search_pagination(num: int, page: int) -> None:
    if not _is_int(num) or num < 1:
        raise PreconditionError("num must be a positive integer")
    if not _is_int(page) or page < 1:
        raise PreconditionError("page must be a positive integer")


def validate_required_field(options: Mapping[str, Any], fields: Sequence[str], message: str) -> None:
    """Raise unless at least one of ``fields`` is present and not None."""
    if not any(options.get(name) is not None for name in fields):
        raise PreconditionError(message)
