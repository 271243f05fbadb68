"""Best Buy product and search page extractor."""

from pricetracker.scrapers.base import BaseExtractor
from pricetracker.scrapers.platforms import Platform


class BestBuyExtractor(BaseExtractor):
    """BestBuy.com extractor.

    Specifications come from .product-data-item key/value pairs; the
    brand is the first .product-data-value when no brand link exists.
    """

    platform = Platform.BESTBUY

    NAME = ".sku-title h1"
    PRICE = ".priceView-customer-price span"
    DESCRIPTION = ".product-description"
    BRAND = ".sku-title .brand-link, .product-data-value"
    AVAILABILITY = ".fulfillment-add-to-cart-button"
    IMAGE = ".primary-image"
    SPEC_ROW = ".product-data-item"
    SPEC_LABEL = ".product-data-key"
    SPEC_VALUE = ".product-data-value"

    ITEM = ".sku-item"
    ITEM_NAME = ".sku-header"
    ITEM_PRICE = ".priceView-customer-price span"
    ITEM_LINK = ".sku-header a"
    ITEM_IMAGE = "img.product-image"
