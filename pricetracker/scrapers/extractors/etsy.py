"""Etsy listing and search page extractor."""

from pricetracker.scrapers.base import BaseExtractor
from pricetracker.scrapers.platforms import Platform


class EtsyExtractor(BaseExtractor):
    """Etsy.com extractor."""

    platform = Platform.ETSY

    NAME = "h1[data-buy-box-listing-title], h1.wt-text-body-01"
    PRICE = "p.wt-text-title-03, .wt-text-title-03"
    DESCRIPTION = "#product-description-content"
    SELLER = ".shop-name-and-title-container"
    IMAGE = ".carousel-image"
    SPEC_ROW = "#product-details-content .wt-grid__item-xs-12"
    SPEC_LABEL = ".wt-text-caption"
    SPEC_VALUE = ".wt-text-body-01"

    ITEM = ".v2-listing-card"
    ITEM_NAME = ".v2-listing-card__title"
    ITEM_PRICE = ".currency-value"
    ITEM_LINK = "a.listing-link"
    ITEM_IMAGE = "img.main-image, img.wt-image"
