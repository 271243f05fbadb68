"""eBay item and search page extractor."""

from typing import Dict

from bs4 import BeautifulSoup

from pricetracker.scrapers.base import BaseExtractor
from pricetracker.scrapers.platforms import Platform


class EbayExtractor(BaseExtractor):
    """eBay.com extractor.

    Item titles carry a "Details about" prefix on the classic view page,
    and the item condition is reported as a specification.
    """

    platform = Platform.EBAY

    NAME = "#itemTitle, h1.x-item-title__mainTitle"
    PRICE = "#prcIsum, .x-price-primary"
    DESCRIPTION = "#ds_div"
    SELLER = ".mbg-nw, .x-sellercard-atf__info__about-seller"
    AVAILABILITY = "#qtySubTxt"
    IMAGE = "#icImg"
    SPEC_ROW = ".itemAttr table tr"
    SPEC_LABEL = "th"
    SPEC_VALUE = "td"
    CONDITION = "#vi-itm-cond"

    ITEM = ".s-item"
    ITEM_NAME = ".s-item__title"
    ITEM_PRICE = ".s-item__price"
    ITEM_LINK = ".s-item__link"
    ITEM_IMAGE = ".s-item__image-img"

    TITLE_PREFIX = "Details about"

    def _name(self, soup: BeautifulSoup) -> str:
        name = super()._name(soup)
        if name.startswith(self.TITLE_PREFIX):
            name = name[len(self.TITLE_PREFIX):].strip()
        return name

    def _specifications(self, soup: BeautifulSoup) -> Dict[str, str]:
        specs = super()._specifications(soup)
        condition = self._text(soup, self.CONDITION)
        if condition:
            specs["condition"] = condition
        return specs
