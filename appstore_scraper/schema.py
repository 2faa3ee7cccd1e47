"""Normalized records returned by every operation.

Numeric rating fields use 0 as the "no data" sentinel instead of None, so
callers can sum and average without null checks.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

STARS = (1, 2, 3, 4, 5)

RatingHistogram = Dict[int, int]

SimilarLinkType = Literal[
    "customers-also-bought",
    "more-by-developer",
    "you-might-also-like",
    "similar-apps",
    "other",
]


def empty_histogram() -> RatingHistogram:
    return {star: 0 for star in STARS}


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


def _check_histogram(v: RatingHistogram) -> RatingHistogram:
    if set(v) != set(STARS):
        raise ValueError(f"histogram keys must be exactly 1-5, got {sorted(v)}")
    if any(count < 0 for count in v.values()):
        raise ValueError("histogram counts must be non-negative")
    return v


class App(_Record):
    id: int
    app_id: str = ""                     # bundle identifier
    title: str = ""
    url: str = ""
    description: str = ""
    icon: str = ""
    genres: List[str] = []
    genre_ids: List[int] = []
    primary_genre: str = ""
    primary_genre_id: int = 0            # 0 = unknown
    content_rating: str = ""             # "" = unknown
    languages: List[str] = []
    size: int = 0                        # bytes
    required_os_version: str = ""
    released: str = ""
    updated: str = ""
    release_notes: str = ""
    version: str = ""
    price: float = 0.0
    currency: str = "USD"
    free: bool = True
    developer_id: int = 0
    developer: str = ""
    developer_url: str = ""
    developer_website: Optional[str] = None
    score: float = 0.0                   # 0 = no data, else 1-5
    reviews: int = 0
    current_version_score: float = 0.0   # 0 = no data, else 1-5
    current_version_reviews: int = 0
    screenshots: List[str] = []
    ipad_screenshots: List[str] = []
    appletv_screenshots: List[str] = []
    supported_devices: List[str] = []
    histogram: Optional[RatingHistogram] = None

    @field_validator("histogram")
    @classmethod
    def histogram_has_five_stars(cls, v: Optional[RatingHistogram]) -> Optional[RatingHistogram]:
        if v is None:
            return v
        return _check_histogram(v)

    @property
    def has_screenshots(self) -> bool:
        return bool(self.screenshots or self.ipad_screenshots or self.appletv_screenshots)


class ListApp(_Record):
    """Light app record built from a list feed entry, without a lookup request."""

    id: int
    app_id: str = ""
    title: str = ""
    icon: str = ""
    url: str = ""
    price: float = 0.0
    currency: str = "USD"
    free: bool = True
    description: str = ""
    developer: str = ""
    developer_url: str = ""
    developer_id: int = 0                # 0 = unknown
    genre: str = ""
    genre_id: int = 0                    # 0 = unknown
    released: str = ""


class Ratings(_Record):
    ratings: int = 0
    histogram: RatingHistogram = Field(default_factory=empty_histogram)

    @field_validator("histogram")
    @classmethod
    def histogram_has_five_stars(cls, v: RatingHistogram) -> RatingHistogram:
        return _check_histogram(v)


class Review(_Record):
    id: str = ""
    user_name: str = ""
    user_url: str = ""
    version: str = ""
    score: int = 0                       # 0 = missing or unparseable, else 1-5
    title: str = ""
    text: str = ""
    updated: str = ""

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: int) -> int:
        return max(0, min(5, v))


class SimilarApp(_Record):
    app: App
    link_type: SimilarLinkType = "other"


class PrivacyType(_Record):
    privacy_type: str
    name: str
    description: str = ""
    data_categories: List[str] = []
    purposes: List[str] = []


class PrivacyDetails(_Record):
    privacy_policy_url: Optional[str] = None
    privacy_types: List[PrivacyType] = []

    @property
    def is_empty(self) -> bool:
        return self.privacy_policy_url is None and not self.privacy_types


class VersionHistory(_Record):
    version_display: str = ""
    release_date: str = ""
    release_notes: Optional[str] = None


class Suggestion(_Record):
    term: str


class Screenshots(_Record):
    screenshots: List[str] = []
    ipad_screenshots: List[str] = []
    appletv_screenshots: List[str] = []
