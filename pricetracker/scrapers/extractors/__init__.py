"""Platform-specific field extractors.

Each module implements a BaseExtractor subclass for one storefront.
extract_detail / extract_search dispatch on the Platform tag.
"""

from typing import List, Optional

from pricetracker.core.exceptions import UnsupportedPlatformError
from pricetracker.scrapers.base import BaseExtractor, ProductRecord, SearchResultRecord
from pricetracker.scrapers.platforms import Platform, platform_tag

from .amazon import AmazonExtractor
from .bestbuy import BestBuyExtractor
from .ebay import EbayExtractor
from .etsy import EtsyExtractor
from .homedepot import HomeDepotExtractor
from .walmart import WalmartExtractor
from .zara import ZaraExtractor


def get_extractor(platform: Platform | str) -> Optional[BaseExtractor]:
    """Extractor for a platform, or None for UNKNOWN."""
    match Platform.coerce(platform):
        case Platform.AMAZON:
            return AmazonExtractor()
        case Platform.BESTBUY:
            return BestBuyExtractor()
        case Platform.EBAY:
            return EbayExtractor()
        case Platform.ETSY:
            return EtsyExtractor()
        case Platform.HOMEDEPOT:
            return HomeDepotExtractor()
        case Platform.WALMART:
            return WalmartExtractor()
        case Platform.ZARA:
            return ZaraExtractor()
        case Platform.UNKNOWN:
            return None


def extract_detail(html: str, platform: Platform | str, url: str) -> ProductRecord:
    """Extract a product record from a detail page.

    Args:
        html: Raw page HTML
        platform: Platform tag the page belongs to
        url: Page URL, used as record URL and to resolve relative links

    Raises:
        UnsupportedPlatformError: If the platform has no extraction rules
    """
    extractor = get_extractor(platform)
    if extractor is None:
        raise UnsupportedPlatformError(platform_tag(platform))
    return extractor.extract_detail(html, url)


def extract_search(html: str, platform: Platform | str, base_url: str) -> List[SearchResultRecord]:
    """Extract search results from a listing page.

    Unknown platforms yield an empty list so a multi-platform search
    keeps going.
    """
    extractor = get_extractor(platform)
    if extractor is None:
        return []
    return extractor.extract_search(html, base_url)


__all__ = [
    "AmazonExtractor",
    "BestBuyExtractor",
    "EbayExtractor",
    "EtsyExtractor",
    "HomeDepotExtractor",
    "WalmartExtractor",
    "ZaraExtractor",
    "get_extractor",
    "extract_detail",
    "extract_search",
]
