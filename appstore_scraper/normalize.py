"""Pure mapping from validated payloads and App Store HTML to the record types.

Absent numeric fields map to 0, never None. Integer-like text is parsed with
an explicit base-10 int() and an explicit failure check, so a legitimate 0
is never replaced by a fallback.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup

from appstore_scraper import selectors
from appstore_scraper.payloads import (
    HintsResponse,
    ListEntry,
    LookupResult,
    ReviewEntry,
    ensure_list,
)
from appstore_scraper.schema import (
    STARS,
    App,
    ListApp,
    PrivacyDetails,
    PrivacyType,
    Ratings,
    Review,
    Screenshots,
    SimilarLinkType,
    Suggestion,
    VersionHistory,
)
from appstore_scraper.utils.parsing import load_html

logger = logging.getLogger(__name__)


# ── Numeric coercion ──────────────────────────────────────────────────────────

def to_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    text = str(value).strip()
    if not text:
        return default
    try:
        return int(text, 10)
    except ValueError:
        return default


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def clamp_score(label: Optional[str]) -> int:
    """Star rating from feed text: 0 when missing or unparseable, else clamped to 0-5.

    Only the leading integer is read, so "4.0" is 4.
    """
    match = selectors.LEADING_SIGNED_NUMBER.match(label or "")
    if match is None:
        return 0
    return max(0, min(5, int(match.group(1), 10)))


def parse_developer_id(href: Optional[str]) -> int:
    """Numeric developer id from an artist URL, anchored on ``id`` + digits; 0 if absent."""
    if not href:
        return 0
    match = selectors.DEVELOPER_ID_IN_URL.search(href)
    if match is None:
        return 0
    return int(match.group(1), 10)


# ── Lookup / Search ───────────────────────────────────────────────────────────

def clean_app(result: LookupResult) -> App:
    """Map one lookup/search record to an App."""
    price = to_float(result.price)
    return App(
        id=to_int(result.trackId),
        app_id=_or_default(result.bundleId, ""),
        title=_or_default(result.trackName, ""),
        url=_or_default(result.trackViewUrl, ""),
        description=_or_default(result.description, ""),
        icon=result.artworkUrl512 or result.artworkUrl100 or "",
        genres=list(result.genres or []),
        genre_ids=[to_int(g) for g in result.genreIds or []],
        primary_genre=_or_default(result.primaryGenreName, ""),
        primary_genre_id=to_int(result.primaryGenreId),
        content_rating=_or_default(result.contentAdvisoryRating, ""),
        languages=list(result.languageCodesISO2A or []),
        size=to_int(result.fileSizeBytes),
        required_os_version=_or_default(result.minimumOsVersion, ""),
        released=_or_default(result.releaseDate, ""),
        updated=_or_default(result.currentVersionReleaseDate, ""),
        release_notes=_or_default(result.releaseNotes, ""),
        version=_or_default(result.version, ""),
        price=price,
        currency=result.currency or "USD",
        free=price == 0,
        developer_id=to_int(result.artistId),
        developer=_or_default(result.artistName, ""),
        developer_url=_or_default(result.artistViewUrl, ""),
        developer_website=result.sellerUrl,
        score=to_float(result.averageUserRating),
        reviews=to_int(result.userRatingCount),
        current_version_score=to_float(result.averageUserRatingForCurrentVersion),
        current_version_reviews=to_int(result.userRatingCountForCurrentVersion),
        screenshots=list(result.screenshotUrls or []),
        ipad_screenshots=list(result.ipadScreenshotUrls or []),
        appletv_screenshots=list(result.appletvScreenshotUrls or []),
        supported_devices=list(result.supportedDevices or []),
    )


# ── RSS feeds ─────────────────────────────────────────────────────────────────

def _label(node) -> str:
    if node is None or node.label is None:
        return ""
    return node.label


def feed_entry_id(entry: ListEntry) -> Optional[int]:
    """Track id of a list feed entry, or None when missing or non-numeric."""
    attrs = entry.id.attributes if entry.id else None
    raw = attrs.im_id if attrs else None
    match = selectors.LEADING_NUMBER.match(raw or "")
    return int(match.group(1), 10) if match else None


def _alternate_link(entry: ListEntry) -> str:
    for link in ensure_list(entry.link):
        if link.attributes and link.attributes.rel == "alternate":
            return link.attributes.href or ""
    return ""


def feed_entry_to_list_app(entry: ListEntry) -> Optional[ListApp]:
    """Map a list feed entry to a ListApp; None when it carries no usable id."""
    app_id = feed_entry_id(entry)
    if app_id is None:
        return None

    price_attrs = entry.im_price.attributes if entry.im_price else None
    # Non-numeric amounts (e.g. a textual "Get"/"Free" marker) count as free.
    price = to_float(price_attrs.amount if price_attrs else None)
    currency = (price_attrs.currency if price_attrs else None) or "USD"

    images = ensure_list(entry.im_image)
    icon = _label(images[-1]) if images else ""

    artist = entry.im_artist
    artist_href = artist.attributes.href if artist and artist.attributes else None

    category_attrs = entry.category.attributes if entry.category else None

    return ListApp(
        id=app_id,
        app_id=(entry.id.attributes.im_bundle_id or "") if entry.id and entry.id.attributes else "",
        title=_label(entry.im_name),
        icon=icon,
        url=_alternate_link(entry),
        price=price,
        currency=currency,
        free=price == 0,
        description=_label(entry.summary),
        developer=_label(artist),
        developer_url=artist_href or "",
        developer_id=parse_developer_id(artist_href),
        genre=(category_attrs.label or "") if category_attrs else "",
        genre_id=to_int(category_attrs.im_id if category_attrs else None),
        released=_label(entry.im_release_date),
    )


def feed_entry_to_review(entry: ReviewEntry) -> Review:
    author = entry.author
    return Review(
        id=_label(entry.id),
        user_name=_label(author.name) if author else "",
        user_url=_label(author.uri) if author else "",
        version=_label(entry.im_version),
        score=clamp_score(entry.im_rating.label if entry.im_rating else None),
        title=_label(entry.title),
        text=_label(entry.content),
        updated=_label(entry.updated),
    )


# ── Search hints ──────────────────────────────────────────────────────────────

def parse_hints(response: HintsResponse) -> List[Suggestion]:
    """Suggestions from the hints plist; the array holds bare strings or dicts."""
    plist_dict = response.plist.dict_ if response.plist else None
    array = plist_dict.array if plist_dict else None
    if array is None or isinstance(array, str):
        return []

    terms = [term for term in ensure_list(array.string) if term]
    for hint in ensure_list(array.dict_):
        strings = ensure_list(hint.string)
        if strings and strings[0]:
            terms.append(strings[0])
    return [Suggestion(term=term) for term in terms]


# ── HTML pages ────────────────────────────────────────────────────────────────

def _soup(html) -> BeautifulSoup:
    return html if isinstance(html, BeautifulSoup) else load_html(html)


def extract_screenshot_url(srcset: str) -> Optional[str]:
    """Pick the widest srcset candidate and rewrite it to the canonical size.

    The file extension (webp, jpg, png) and any query string are kept.
    """
    best_url = None
    best_width = -1
    for candidate in srcset.split(","):
        parts = candidate.strip().split()
        if not parts:
            continue
        width = 0
        if len(parts) > 1:
            match = selectors.SRCSET_WIDTH.search(parts[1])
            if match:
                width = int(match.group(1), 10)
        if width > best_width:
            best_url, best_width = parts[0], width

    if not best_url:
        return None
    return selectors.SCREENSHOT_SIZE_TOKEN.sub(
        lambda m: f"/{selectors.SCREENSHOT_SIZE}bb.{m.group(1).lower()}", best_url
    )


def parse_screenshots(html) -> Screenshots:
    soup = _soup(html)
    found = {}
    for field, selector in selectors.SCREENSHOT_SHELVES.items():
        seen = set()
        urls = []
        for source in soup.select(selector):
            srcset = source.get("srcset")
            url = extract_screenshot_url(srcset) if srcset else None
            if url and url not in seen:
                seen.add(url)
                urls.append(url)
        found[field] = urls
    return Screenshots(**found)


def _leading_int(text: str) -> int:
    match = selectors.LEADING_NUMBER.match(text)
    return int(match.group(1), 10) if match else 0


def parse_ratings(html) -> Ratings:
    """Total rating count and 1-5 histogram from the customer-reviews page.

    Bars are assumed to render in descending order (5 stars first); row labels
    are not checked, so an order flip upstream would invert the histogram
    without tripping the sum check below.
    """
    soup = _soup(html)

    count_text = "".join(el.get_text() for el in soup.select(selectors.RATING_COUNT))
    match = selectors.FIRST_NUMBER.search(count_text)
    total = int(match.group(), 10) if match else 0

    bars = [_leading_int(el.get_text()) for el in soup.select(selectors.RATING_BAR_TOTALS)]
    bars = bars[: selectors.HISTOGRAM_BUCKETS]

    histogram = {star: 0 for star in STARS}
    for index, count in enumerate(bars):
        histogram[5 - index] = max(0, count)

    if total > 0:
        bucket_sum = sum(histogram.values())
        if bucket_sum != total:
            logger.warning(
                "Ratings histogram sum (%d) does not match total count (%d); "
                "page structure may have changed",
                bucket_sum,
                total,
            )

    return Ratings(ratings=total, histogram=histogram)


def link_type_from_heading(text: str) -> SimilarLinkType:
    trimmed = text.strip()
    for pattern, link_type in selectors.SECTION_PATTERNS:
        if pattern.search(trimmed):
            return link_type
    return "other"


def parse_similar_entries(html, exclude_id: Optional[int] = None) -> List[Tuple[int, SimilarLinkType]]:
    """(app id, section) pairs for every app link, in document order.

    Each link is labelled with the most recent h2/h3/h4 heading above it.
    """
    soup = _soup(html)
    root = soup.body or soup
    entries: List[Tuple[int, SimilarLinkType]] = []
    current: SimilarLinkType = "other"

    for element in root.select(selectors.SIMILAR_WALK):
        tag = element.name.lower()
        if tag in selectors.SECTION_HEADING_TAGS:
            current = link_type_from_heading(element.get_text())
            continue
        match = selectors.APP_ID_IN_URL.search(element.get("href") or "")
        if match is None:
            continue
        found_id = int(match.group(1), 10)
        if found_id != exclude_id:
            entries.append((found_id, current))
    return entries


def parse_privacy(html) -> PrivacyDetails:
    soup = _soup(html)

    policy_url = None
    for link in soup.select(selectors.PRIVACY_POLICY_LINK):
        if selectors.PRIVACY_POLICY_LABEL in (link.get("aria-label") or ""):
            policy_url = link.get("href")
            break

    privacy_types = []
    for section in soup.select(selectors.PRIVACY_PURPOSE_SECTION):
        title = section.select_one(selectors.PRIVACY_PURPOSE_TITLE)
        purpose = title.get_text(strip=True) if title else ""
        for category in section.select(selectors.PRIVACY_CATEGORY):
            name_el = category.select_one(selectors.PRIVACY_CATEGORY_TITLE)
            name = name_el.get_text(strip=True) if name_el else ""
            data_types = [
                li.get_text(strip=True) for li in category.select(selectors.PRIVACY_DATA_TYPE)
            ]
            if name and data_types:
                privacy_types.append(
                    PrivacyType(
                        privacy_type=name,
                        name=name,
                        description=f"Used for {purpose}",
                        data_categories=data_types,
                        purposes=[purpose],
                    )
                )

    return PrivacyDetails(privacy_policy_url=policy_url or None, privacy_types=privacy_types)


def _version_articles(soup: BeautifulSoup) -> Iterator:
    # Other dialogs share data-testid="dialog"; only version entries carry a datetime.
    for article in soup.select(selectors.VERSION_ARTICLE):
        if article.select_one(selectors.VERSION_DATE) is not None:
            yield article


def parse_version_history(html) -> List[VersionHistory]:
    soup = _soup(html)
    versions = []
    for article in _version_articles(soup):
        label = "".join(el.get_text() for el in article.select(selectors.VERSION_LABEL)).strip()
        notes = "".join(el.get_text() for el in article.select(selectors.VERSION_NOTES)).strip()
        time_el = article.select_one(selectors.VERSION_DATE)
        versions.append(
            VersionHistory(
                version_display=label,
                release_date=time_el.get("datetime", "") if time_el else "",
                release_notes=notes or None,
            )
        )
    return versions
