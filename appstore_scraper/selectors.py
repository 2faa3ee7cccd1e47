"""CSS selectors and heading patterns for App Store HTML pages.

The pages are rendered web-app output, not an API. Prefer data-testid
attributes, element nesting and typed children (``time[datetime]``) over
generated class names. When the markup changes, edit this table.
"""

from __future__ import annotations

import re

# itunes.apple.com/<cc>/customer-reviews/id<id>
RATING_COUNT = ".rating-count"
RATING_BAR_TOTALS = ".vote .total"
HISTOGRAM_BUCKETS = 5
FIRST_NUMBER = re.compile(r"\d+")
LEADING_NUMBER = re.compile(r"\s*(\d+)")
LEADING_SIGNED_NUMBER = re.compile(r"\s*([+-]?\d+)")

# apps.apple.com/<cc>/app/id<id> screenshot shelves, keyed by Screenshots field.
SCREENSHOT_SHELVES = {
    "screenshots": 'ul.shelf-grid__list--grid-type-ScreenshotPhone source[type="image/webp"]',
    "ipad_screenshots": 'ul.shelf-grid__list--grid-type-ScreenshotPad source[type="image/webp"]',
    "appletv_screenshots": 'ul.shelf-grid__list--grid-type-ScreenshotAppleTv source[type="image/webp"]',
}
SCREENSHOT_SIZE = "392x696"
SCREENSHOT_SIZE_TOKEN = re.compile(r"/\d+x\d+bb(?:-\d+)?\.(webp|jpe?g|png)(?=$|\?)", re.IGNORECASE)
SRCSET_WIDTH = re.compile(r"(\d+)w")

# Similar apps: headings and app links walked in document order.
SIMILAR_WALK = 'h2, h3, h4, a[href*="/app/"]'
SECTION_HEADING_TAGS = frozenset({"h2", "h3", "h4"})
APP_ID_IN_URL = re.compile(r"/id(\d+)")
SECTION_PATTERNS = (
    (re.compile(r"customers\s+also\s+bought", re.I), "customers-also-bought"),
    (re.compile(r"more\s+from\s+(this\s+)?developer|more\s+by\s+developer", re.I), "more-by-developer"),
    (re.compile(r"you\s+might\s+also\s+like", re.I), "you-might-also-like"),
    (re.compile(r"similar\s+apps|related\s+apps", re.I), "similar-apps"),
)

# Privacy ("App Privacy") and version history dialogs.
DIALOG = 'dialog[data-testid="dialog"]'
PRIVACY_POLICY_LINK = f'{DIALOG} a[data-test-id="external-link"]'
PRIVACY_POLICY_LABEL = "Privacy Policy"
PRIVACY_PURPOSE_SECTION = f"{DIALOG} section.purpose-section"
PRIVACY_PURPOSE_TITLE = "h3"
PRIVACY_CATEGORY = "li.purpose-category"
PRIVACY_CATEGORY_TITLE = ".category-title"
PRIVACY_DATA_TYPE = ".privacy-data-types li"

VERSION_ARTICLE = f"{DIALOG} article"
VERSION_DATE = "time[datetime]"
VERSION_LABEL = ":scope > h4"
VERSION_NOTES = ":scope > p"

# Developer ids in artist/profile URLs: ".../identity-games/id284882218?mt=8".
DEVELOPER_ID_IN_URL = re.compile(r"(?:^|/)id(\d+)")
