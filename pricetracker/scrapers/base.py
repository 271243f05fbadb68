"""Normalized records and the base class for platform extractors.

Every platform extractor subclasses BaseExtractor, sets its CSS selector
constants and overrides the hooks whose markup is platform specific
(split prices, variants, ratings).
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from pricetracker.scrapers.platforms import Platform
from pricetracker.scrapers.utils.normalizer import (
    PriceNormalizer,
    clean_text,
    normalize_url,
    resolve_url,
)


@dataclass(frozen=True)
class VariantRecord:
    """One selectable variant (size, colour) of a product."""

    name: str
    available: bool
    price: Optional[float] = None


@dataclass(frozen=True)
class ProductRecord:
    """Normalized product detail returned by every extractor."""

    platform: Platform
    url: str
    name: str
    price: Optional[float]
    currency: str = "USD"
    description: str = ""
    brand: str = ""
    seller: str = ""
    availability: str = ""
    image: Optional[str] = None
    rating: Optional[float] = None
    specifications: Dict[str, str] = field(default_factory=dict)
    variants: List[VariantRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["platform"] = self.platform.value
        return data


@dataclass(frozen=True)
class SearchResultRecord:
    """Normalized search listing entry.

    Only built when name, price and url are all present.
    """

    platform: Platform
    name: str
    price: float
    url: str
    currency: str = "USD"
    image: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.name:
            raise ValueError("name is required")
        if self.price is None:
            raise ValueError("price is required")
        if not self.url:
            raise ValueError("url is required")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["platform"] = self.platform.value
        return data


class BaseExtractor:
    """Selector-driven extraction shared by all platforms.

    Selectors may be comma-separated groups. Scalar fields read the first
    matching element; DESCRIPTION joins the text of every match.
    """

    platform: Platform = Platform.UNKNOWN
    currency: str = "USD"

    # Detail page selectors
    NAME: Optional[str] = None
    PRICE: Optional[str] = None
    DESCRIPTION: Optional[str] = None
    BRAND: Optional[str] = None
    SELLER: Optional[str] = None
    AVAILABILITY: Optional[str] = None
    IMAGE: Optional[str] = None
    SPEC_ROW: Optional[str] = None
    SPEC_LABEL: Optional[str] = None
    SPEC_VALUE: Optional[str] = None

    # Search page selectors, relative to ITEM
    ITEM: Optional[str] = None
    ITEM_NAME: Optional[str] = None
    ITEM_PRICE: Optional[str] = None
    ITEM_LINK: Optional[str] = None
    ITEM_IMAGE: Optional[str] = None

    def __init__(self):
        self.logger = structlog.get_logger(__name__).bind(platform=self.platform.value)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract_detail(self, html: str, url: str) -> ProductRecord:
        """Build a ProductRecord from a product page.

        Missing fields come back empty or None; this never fails on
        incomplete markup.
        """
        soup = BeautifulSoup(html or "", "html.parser")

        record = ProductRecord(
            platform=self.platform,
            url=normalize_url(url),
            name=self._name(soup),
            price=self._price(soup),
            currency=self.currency,
            description=self._joined_text(soup, self.DESCRIPTION),
            brand=self._text(soup, self.BRAND),
            seller=self._text(soup, self.SELLER),
            availability=self._text(soup, self.AVAILABILITY),
            image=resolve_url(url, self._attr(soup, self.IMAGE, "src")),
            rating=self._rating(soup),
            specifications=self._specifications(soup),
            variants=self._variants(soup),
        )

        self.logger.debug(
            "detail_extracted",
            url=record.url,
            has_name=bool(record.name),
            price=record.price,
            specifications=len(record.specifications),
            variants=len(record.variants),
        )
        return record

    def extract_search(self, html: str, base_url: str) -> List[SearchResultRecord]:
        """Build search results from a listing page.

        Items without a name, a parseable price or a resolvable link
        are skipped.
        """
        if not self.ITEM:
            return []

        soup = BeautifulSoup(html or "", "html.parser")
        items = soup.select(self.ITEM)

        results: List[SearchResultRecord] = []
        for item in items:
            record = self._search_item(item, base_url)
            if record is not None:
                results.append(record)

        self.logger.debug(
            "search_extracted",
            items_found=len(items),
            items_kept=len(results),
        )
        return results

    # ------------------------------------------------------------------
    # Detail hooks
    # ------------------------------------------------------------------

    def _name(self, soup: BeautifulSoup) -> str:
        return self._text(soup, self.NAME)

    def _price(self, soup: BeautifulSoup) -> Optional[float]:
        return PriceNormalizer.parse_price(self._text(soup, self.PRICE))

    def _rating(self, soup: BeautifulSoup) -> Optional[float]:
        return None

    def _specifications(self, soup: BeautifulSoup) -> Dict[str, str]:
        specs: Dict[str, str] = {}
        if not self.SPEC_ROW:
            return specs

        for row in soup.select(self.SPEC_ROW):
            label = self._text(row, self.SPEC_LABEL)
            value = self._text(row, self.SPEC_VALUE)
            if label and value:
                specs[label] = value
        return specs

    def _variants(self, soup: BeautifulSoup) -> List[VariantRecord]:
        return []

    # ------------------------------------------------------------------
    # Search hooks
    # ------------------------------------------------------------------

    def _search_item(self, item: Tag, base_url: str) -> Optional[SearchResultRecord]:
        name = self._text(item, self.ITEM_NAME)
        price = self._item_price(item)
        url = resolve_url(base_url, self._attr(item, self.ITEM_LINK, "href"))

        if not name or price is None or not url:
            return None

        return SearchResultRecord(
            platform=self.platform,
            name=name,
            price=price,
            url=url,
            currency=self.currency,
            image=resolve_url(base_url, self._attr(item, self.ITEM_IMAGE, "src")),
            rating=self._item_rating(item),
            reviews=self._item_reviews(item),
        )

    def _item_price(self, item: Tag) -> Optional[float]:
        return PriceNormalizer.parse_price(self._text(item, self.ITEM_PRICE))

    def _item_rating(self, item: Tag) -> Optional[float]:
        return None

    def _item_reviews(self, item: Tag) -> Optional[int]:
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _text(node: Tag, selector: Optional[str]) -> str:
        """Text of the first element matching selector, or ""."""
        if not selector:
            return ""
        element = node.select_one(selector)
        if element is None:
            return ""
        return clean_text(element.get_text(" ", strip=True))

    @staticmethod
    def _joined_text(node: Tag, selector: Optional[str]) -> str:
        """Text of every element matching selector, space joined."""
        if not selector:
            return ""
        parts = [el.get_text(" ", strip=True) for el in node.select(selector)]
        return clean_text(" ".join(p for p in parts if p))

    @staticmethod
    def _attr(node: Tag, selector: Optional[str], name: str) -> Optional[str]:
        """Attribute of the first element matching selector."""
        if not selector:
            return None
        element = node.select_one(selector)
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        return value or None

    @staticmethod
    def _has_class(element: Tag, class_name: str) -> bool:
        return class_name in (element.get("class") or [])
