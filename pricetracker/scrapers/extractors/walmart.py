"""Walmart product and search page extractor."""

from pricetracker.scrapers.base import BaseExtractor
from pricetracker.scrapers.platforms import Platform


class WalmartExtractor(BaseExtractor):
    """Walmart.com extractor.

    Walmart marks most fields with data-testid / data-automation-id
    attributes; availability is only rendered when out of stock.
    """

    platform = Platform.WALMART

    NAME = '[data-testid="product-title"], h1[itemprop="name"]'
    PRICE = '[data-testid="price-value"], [itemprop="price"]'
    DESCRIPTION = ".about-product"
    SELLER = ".seller-name"
    AVAILABILITY = ".prod-ProductOffer-oosMsg"
    IMAGE = 'img[data-testid="hero-image"], [data-testid="hero-image"] img'
    SPEC_ROW = ".specification-table tr"
    SPEC_LABEL = ".specification-label"
    SPEC_VALUE = ".specification-value"

    ITEM = "[data-item-id]"
    ITEM_NAME = '[data-automation-id="product-title"]'
    ITEM_PRICE = '[data-automation-id="product-price"]'
    ITEM_LINK = 'a[href*="/ip/"]'
    ITEM_IMAGE = "img"
