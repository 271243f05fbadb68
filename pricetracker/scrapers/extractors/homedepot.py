"""Home Depot product and search page extractor.

Home Depot renders prices as separate spans ("$", "19", "99") with no
decimal point, so both page types rebuild the price from its parts.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from pricetracker.scrapers.base import BaseExtractor
from pricetracker.scrapers.platforms import Platform
from pricetracker.scrapers.utils.normalizer import PriceNormalizer

# "1,299" or "99"; the "$" span is not a part
_PRICE_PART = re.compile(r"\d[\d,]*")


class HomeDepotExtractor(BaseExtractor):
    """HomeDepot.com extractor."""

    platform = Platform.HOMEDEPOT

    NAME = ".product-title__title, h1.product-details__title"
    PRICE = ".price-format__main-price"
    DESCRIPTION = ".product-description"
    BRAND = ".product-details__brand-name"
    AVAILABILITY = ".product-availability"
    IMAGE = ".highlight-image"
    SPEC_ROW = ".specifications__list li"
    SPEC_LABEL = ".specifications__name"
    SPEC_VALUE = ".specifications__value"

    ITEM = ".product-pod"
    ITEM_NAME = ".product-pod--title"
    ITEM_LINK = ".product-pod--link"
    ITEM_IMAGE = ".product-pod--photo img"

    def _price(self, soup: BeautifulSoup) -> Optional[float]:
        element = soup.select_one(self.PRICE) if self.PRICE else None
        if element is None:
            return None

        text = element.get_text("", strip=True)
        if "." in text:
            return PriceNormalizer.parse_price(text)

        digit_parts = [
            span.get_text(strip=True)
            for span in element.find_all("span")
            if _PRICE_PART.fullmatch(span.get_text(strip=True))
        ]
        if len(digit_parts) == 2:
            return PriceNormalizer.parse_split_price(digit_parts[0], digit_parts[1])
        return PriceNormalizer.parse_price(text)

    def _item_price(self, item: Tag) -> Optional[float]:
        dollars = self._text(item, ".price__dollars")
        if not dollars:
            return None
        cents = self._text(item, ".price__cents")
        if cents:
            return PriceNormalizer.parse_split_price(dollars, cents)
        return PriceNormalizer.parse_price(dollars)
