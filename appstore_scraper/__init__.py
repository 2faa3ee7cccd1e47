"""Apple App Store data client: lookup, search, lists, reviews, ratings and app page details."""

from appstore_scraper.constants import Category, Collection, Device, Sort
from appstore_scraper.errors import (
    AppNotFoundError,
    AppStoreError,
    HttpError,
    PreconditionError,
    ResponseDecodeError,
    ResponseValidationError,
    TransportError,
)
from appstore_scraper.operations.app import app
from appstore_scraper.operations.developer import developer
from appstore_scraper.operations.listing import list_apps
from appstore_scraper.operations.lookup import lookup, resolve_app_id
from appstore_scraper.operations.privacy import privacy
from appstore_scraper.operations.ratings import ratings
from appstore_scraper.operations.reviews import reviews
from appstore_scraper.operations.search import search
from appstore_scraper.operations.similar import similar
from appstore_scraper.operations.suggest import suggest
from appstore_scraper.operations.version_history import version_history
from appstore_scraper.schema import (
    App,
    ListApp,
    PrivacyDetails,
    PrivacyType,
    Ratings,
    Review,
    SimilarApp,
    Suggestion,
    VersionHistory,
)
from appstore_scraper.utils.http_client import RequestOptions

__all__ = [
    "App",
    "AppNotFoundError",
    "AppStoreError",
    "Category",
    "Collection",
    "Device",
    "HttpError",
    "ListApp",
    "PreconditionError",
    "PrivacyDetails",
    "PrivacyType",
    "Ratings",
    "RequestOptions",
    "ResponseDecodeError",
    "ResponseValidationError",
    "Review",
    "SimilarApp",
    "Sort",
    "Suggestion",
    "TransportError",
    "VersionHistory",
    "app",
    "developer",
    "list_apps",
    "lookup",
    "privacy",
    "ratings",
    "resolve_app_id",
    "reviews",
    "search",
    "similar",
    "suggest",
    "version_history",
]
