"""Expected shapes of upstream payloads, checked before any field is trusted.

Every field is optional unless the upstream contract guarantees it: the
iTunes APIs are inconsistent about which fields each record carries. Several
RSS/plist nodes serialize as a bare object when singular and as an array when
plural; those are typed ``OneOrMany`` and flattened with ``ensure_list``.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from appstore_scraper.errors import ResponseValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

OneOrMany = Union[T, List[T]]


def ensure_list(value: Any) -> list:
    """Flatten a one-or-many value into a list; None becomes ``[]``."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ── Lookup / Search JSON ──────────────────────────────────────────────────────

class LookupResult(_Payload):
    wrapperType: Optional[str] = None
    kind: Optional[str] = None
    trackId: Optional[int] = None
    bundleId: Optional[str] = None
    trackName: Optional[str] = None
    trackViewUrl: Optional[str] = None
    description: Optional[str] = None
    artworkUrl512: Optional[str] = None
    artworkUrl100: Optional[str] = None
    genres: Optional[List[str]] = None
    genreIds: Optional[List[Union[str, int]]] = None
    primaryGenreName: Optional[str] = None
    primaryGenreId: Optional[int] = None
    contentAdvisoryRating: Optional[str] = None
    languageCodesISO2A: Optional[List[str]] = None
    fileSizeBytes: Optional[Union[int, str]] = None
    minimumOsVersion: Optional[str] = None
    releaseDate: Optional[str] = None
    currentVersionReleaseDate: Optional[str] = None
    releaseNotes: Optional[str] = None
    version: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    artistId: Optional[int] = None
    artistName: Optional[str] = None
    artistViewUrl: Optional[str] = None
    sellerUrl: Optional[str] = None
    averageUserRating: Optional[float] = None
    userRatingCount: Optional[int] = None
    averageUserRatingForCurrentVersion: Optional[float] = None
    userRatingCountForCurrentVersion: Optional[int] = None
    screenshotUrls: Optional[List[str]] = None
    ipadScreenshotUrls: Optional[List[str]] = None
    appletvScreenshotUrls: Optional[List[str]] = None
    supportedDevices: Optional[List[str]] = None

    @property
    def is_software(self) -> bool:
        return self.kind == "software" or self.wrapperType == "software"


class LookupResponse(_Payload):
    resultCount: StrictInt
    results: List[LookupResult]


# ── RSS feeds (JSON flavour) ──────────────────────────────────────────────────

class Label(_Payload):
    label: Optional[str] = None


class IdAttributes(_Payload):
    im_id: Optional[str] = Field(None, alias="im:id")
    im_bundle_id: Optional[str] = Field(None, alias="im:bundleId")


class EntryId(_Payload):
    label: Optional[str] = None
    attributes: Optional[IdAttributes] = None


class PriceAttributes(_Payload):
    amount: Optional[Union[float, str]] = None
    currency: Optional[str] = None


class Price(_Payload):
    label: Optional[str] = None
    attributes: Optional[PriceAttributes] = None


class HrefAttributes(_Payload):
    href: Optional[str] = None
    rel: Optional[str] = None


class Artist(_Payload):
    label: Optional[str] = None
    attributes: Optional[HrefAttributes] = None


class Link(_Payload):
    attributes: Optional[HrefAttributes] = None


class CategoryAttributes(_Payload):
    im_id: Optional[Union[str, int]] = Field(None, alias="im:id")
    label: Optional[str] = None


class FeedCategory(_Payload):
    attributes: Optional[CategoryAttributes] = None


class Author(_Payload):
    name: Optional[Label] = None
    uri: Optional[Label] = None


class ListEntry(_Payload):
    id: Optional[EntryId] = None
    im_name: Optional[Label] = Field(None, alias="im:name")
    im_image: Optional[OneOrMany[Label]] = Field(None, alias="im:image")
    im_price: Optional[Price] = Field(None, alias="im:price")
    im_artist: Optional[Artist] = Field(None, alias="im:artist")
    im_release_date: Optional[Label] = Field(None, alias="im:releaseDate")
    summary: Optional[Label] = None
    category: Optional[FeedCategory] = None
    link: Optional[OneOrMany[Link]] = None


class ReviewEntry(_Payload):
    id: Optional[Label] = None
    author: Optional[Author] = None
    im_version: Optional[Label] = Field(None, alias="im:version")
    im_rating: Optional[Label] = Field(None, alias="im:rating")
    title: Optional[Label] = None
    content: Optional[Label] = None
    updated: Optional[Label] = None


class ListFeedBody(_Payload):
    entry: Optional[OneOrMany[ListEntry]] = None


class ReviewsFeedBody(_Payload):
    entry: Optional[OneOrMany[ReviewEntry]] = None


def _reject_null_feed(v: Any) -> Any:
    # Absent feed means an empty result; an explicit null is malformed.
    if v is None:
        raise ValueError("feed must be an object when present")
    return v


class ListFeed(_Payload):
    feed: Optional[ListFeedBody] = None

    @field_validator("feed", mode="before")
    @classmethod
    def feed_not_null(cls, v: Any) -> Any:
        return _reject_null_feed(v)


class ReviewsFeed(_Payload):
    feed: Optional[ReviewsFeedBody] = None

    @field_validator("feed", mode="before")
    @classmethod
    def feed_not_null(cls, v: Any) -> Any:
        return _reject_null_feed(v)


# ── Search hints plist (after parse_xml) ──────────────────────────────────────

class HintDict(_Payload):
    string: Optional[OneOrMany[str]] = None


class HintArray(_Payload):
    string: Optional[OneOrMany[str]] = None
    dict_: Optional[OneOrMany[HintDict]] = Field(None, alias="dict")


class PlistDict(_Payload):
    # An empty <array/> decodes to "".
    array: Optional[Union[HintArray, str]] = None


class Plist(_Payload):
    dict_: Optional[PlistDict] = Field(None, alias="dict")


class HintsResponse(_Payload):
    plist: Optional[Plist] = None


def validate_payload(model: Type[M], data: Any, operation: str) -> M:
    """Validate decoded ``data`` against ``model`` or raise ResponseValidationError."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ResponseValidationError(
            f"{operation} API response validation failed: {exc}", operation=operation
        ) from exc
