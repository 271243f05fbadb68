"""Supported platforms, URL detection and fetch strategy table."""

from enum import Enum
from typing import Dict, Optional, Tuple
from urllib.parse import quote_plus

from pricetracker.core.exceptions import UnsupportedPlatformError


class Platform(str, Enum):
    """E-commerce platforms the tracker knows how to read."""

    AMAZON = "amazon"
    BESTBUY = "bestbuy"
    EBAY = "ebay"
    ETSY = "etsy"
    HOMEDEPOT = "homedepot"
    WALMART = "walmart"
    ZARA = "zara"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: "Platform | str") -> "Platform":
        """Map a tag string to a Platform, falling back to UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.UNKNOWN


SUPPORTED_PLATFORMS: Tuple[Platform, ...] = tuple(
    p for p in Platform if p is not Platform.UNKNOWN
)

# Checked in order, first match wins.
_DOMAIN_FRAGMENTS: Tuple[Tuple[str, Platform], ...] = (
    ("amazon.", Platform.AMAZON),
    ("ebay.", Platform.EBAY),
    ("walmart.", Platform.WALMART),
    ("etsy.", Platform.ETSY),
    ("bestbuy.", Platform.BESTBUY),
    ("homedepot.", Platform.HOMEDEPOT),
    ("zara.", Platform.ZARA),
)

# Bright Data dataset ids for platforms with a structured collector
DATASET_IDS: Dict[Platform, str] = {
    Platform.AMAZON: "gd_l7q7dkf244hwjntr0",
    Platform.BESTBUY: "gd_ltre1jqe1jfr7cccf",
    Platform.EBAY: "gd_ltr9mjt81n0zzdk1fb",
    Platform.ETSY: "gd_ltppk0jdv1jqz25mz",
    Platform.HOMEDEPOT: "gd_lmusivh019i7g97q2n",
    Platform.WALMART: "gd_l95fol7l1ru6rlo116",
    Platform.ZARA: "gd_lct4vafw1tgx27d4o0",
}

_SEARCH_URL_TEMPLATES: Dict[Platform, str] = {
    Platform.AMAZON: "https://www.amazon.com/s?k={query}",
    Platform.BESTBUY: "https://www.bestbuy.com/site/searchpage.jsp?st={query}&intl=nosplash",
    Platform.EBAY: "https://www.ebay.com/sch/i.html?_nkw={query}",
    Platform.ETSY: "https://www.etsy.com/search?q={query}",
    Platform.HOMEDEPOT: "https://www.homedepot.com/search?q={query}",
    Platform.WALMART: "https://www.walmart.com/search?q={query}",
    Platform.ZARA: "https://www.zara.com/us/en/search?q={query}",
}


def detect_platform(url: str) -> Platform:
    """Classify a URL by the storefront domain it contains.

    Args:
        url: Any URL string

    Returns:
        Matching Platform, or Platform.UNKNOWN
    """
    if not url:
        return Platform.UNKNOWN

    for fragment, platform in _DOMAIN_FRAGMENTS:
        if fragment in url:
            return platform
    return Platform.UNKNOWN


def dataset_id_for(platform: Platform | str) -> Optional[str]:
    """Dataset id for a platform, or None when only raw scraping is available."""
    return DATASET_IDS.get(Platform.coerce(platform))


def search_url_for(platform: Platform | str, query: str) -> str:
    """Build the storefront search URL for a query.

    Raises:
        UnsupportedPlatformError: If the platform has no search page
    """
    template = _SEARCH_URL_TEMPLATES.get(Platform.coerce(platform))
    if template is None:
        raise UnsupportedPlatformError(platform_tag(platform))
    return template.format(query=quote_plus(query))


def platform_tag(platform: Platform | str) -> str:
    """Plain string tag for logs, messages and JSON payloads."""
    return platform.value if isinstance(platform, Platform) else str(platform)
