"""Amazon product and search page extractor.

Detail structure:
  - #productTitle (name)
  - #corePrice_feature_div .a-offscreen / legacy #priceblock_ourprice (price)
  - #averageCustomerReviews .a-icon-alt ("4.5 out of 5 stars")
  - #productDetails_techSpec_section_1 tr > th / td (specifications)
  - #variation_color_name li[title] (colour swatches)

Search structure: div.s-result-item[data-asin] with the price split into
.a-price-whole and .a-price-fraction.
"""

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from pricetracker.scrapers.base import BaseExtractor, VariantRecord
from pricetracker.scrapers.platforms import Platform
from pricetracker.scrapers.utils.normalizer import PriceNormalizer


class AmazonExtractor(BaseExtractor):
    """Amazon.com extractor."""

    platform = Platform.AMAZON

    NAME = "#productTitle"
    PRICE = "#priceblock_ourprice, #price_inside_buybox, #corePrice_feature_div .a-offscreen"
    DESCRIPTION = "#feature-bullets, #productDescription"
    BRAND = "#bylineInfo"
    SELLER = "#merchant-info"
    AVAILABILITY = "#availability"
    IMAGE = "#landingImage"
    SPEC_ROW = "#productDetails_techSpec_section_1 tr"
    SPEC_LABEL = "th"
    SPEC_VALUE = "td"

    ITEM = ".s-result-item[data-asin]"
    ITEM_NAME = "h2 span"
    ITEM_LINK = "h2 a, a:has(> h2)"
    ITEM_IMAGE = "img.s-image"

    RATING = "#averageCustomerReviews .a-icon-alt"
    SWATCH = "#variation_color_name li"
    SWATCH_PRICE = ".a-color-price"
    SWATCH_PREFIX = "Click to select "

    def _rating(self, soup: BeautifulSoup) -> Optional[float]:
        return PriceNormalizer.extract_number(self._text(soup, self.RATING))

    def _variants(self, soup: BeautifulSoup) -> List[VariantRecord]:
        variants = []
        for swatch in soup.select(self.SWATCH):
            name = (swatch.get("title") or "").strip()
            if name.startswith(self.SWATCH_PREFIX):
                name = name[len(self.SWATCH_PREFIX):]
            if not name:
                continue

            variants.append(
                VariantRecord(
                    name=name,
                    available=not self._has_class(swatch, "swatchUnavailable"),
                    price=PriceNormalizer.parse_price(self._text(swatch, self.SWATCH_PRICE)),
                )
            )
        return variants

    def _item_price(self, item: Tag) -> Optional[float]:
        return PriceNormalizer.parse_split_price(
            self._text(item, ".a-price-whole"),
            self._text(item, ".a-price-fraction"),
        )

    def _item_rating(self, item: Tag) -> Optional[float]:
        return PriceNormalizer.extract_number(self._text(item, ".a-icon-star-small .a-icon-alt"))

    def _item_reviews(self, item: Tag) -> Optional[int]:
        return PriceNormalizer.parse_count(self._text(item, ".a-size-base.s-underline-text"))
