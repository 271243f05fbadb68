"""Zara product and search page extractor."""

from typing import List

from bs4 import BeautifulSoup

from pricetracker.scrapers.base import BaseExtractor, VariantRecord
from pricetracker.scrapers.platforms import Platform


class ZaraExtractor(BaseExtractor):
    """Zara.com extractor.

    Sizes are listed as buttons in the size selector; disabled buttons
    are sold-out sizes.
    """

    platform = Platform.ZARA

    NAME = ".product-detail-info__header h1, h1.product-detail-info__header-name"
    PRICE = ".price-current__amount, .price__amount"
    DESCRIPTION = ".product-detail-description"
    AVAILABILITY = ".product-detail-size-info"
    IMAGE = ".product-detail-images img"
    SPEC_ROW = ".product-detail-info__section"
    SPEC_LABEL = ".product-detail-info__title"
    SPEC_VALUE = ".product-detail-info__content"

    ITEM = ".product-grid-product"
    ITEM_NAME = ".product-grid-product-info__name"
    ITEM_PRICE = ".price-current__amount"
    ITEM_LINK = "a[href]"
    ITEM_IMAGE = "img"

    SIZE_BUTTON = ".size-selector__size-list button"

    def _variants(self, soup: BeautifulSoup) -> List[VariantRecord]:
        variants = []
        for button in soup.select(self.SIZE_BUTTON):
            name = button.get_text(" ", strip=True)
            if not name:
                continue
            variants.append(
                VariantRecord(
                    name=name,
                    available=not self._has_class(button, "is-disabled"),
                )
            )
        return variants
