"""Tests for per-platform HTML extractors.

Tests cover:
- Detail page field extraction for every platform
- Search listing extraction, including skipping malformed items
- Dispatch by platform tag and unknown-platform handling
"""

import pytest

from pricetracker.core.exceptions import UnsupportedPlatformError
from pricetracker.scrapers.base import SearchResultRecord, VariantRecord
from pricetracker.scrapers.extractors import (
    AmazonExtractor,
    ZaraExtractor,
    extract_detail,
    extract_search,
    get_extractor,
)
from pricetracker.scrapers.platforms import Platform, SUPPORTED_PLATFORMS


AMAZON_URL = "https://www.amazon.com/dp/B09XS7JWHH?utm_source=newsletter&th=1"


class TestDispatch:
    """Tests for extractor lookup."""

    @pytest.mark.parametrize("platform", SUPPORTED_PLATFORMS)
    def test_every_supported_platform_has_an_extractor(self, platform):
        extractor = get_extractor(platform)
        assert extractor is not None
        assert extractor.platform is platform

    def test_lookup_accepts_tag_strings(self):
        assert isinstance(get_extractor("amazon"), AmazonExtractor)
        assert isinstance(get_extractor("ZARA"), ZaraExtractor)

    def test_unknown_platform_has_no_extractor(self):
        assert get_extractor(Platform.UNKNOWN) is None
        assert get_extractor("target") is None

    def test_extract_detail_unknown_platform_raises(self):
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform: target"):
            extract_detail("<html></html>", "target", "https://www.target.com/p/1")

    def test_extract_search_unknown_platform_is_empty(self):
        assert extract_search("<html></html>", "target", "https://www.target.com") == []


class TestAmazonExtractor:
    """Tests for Amazon pages."""

    def test_detail_fields(self, load_fixture):
        record = extract_detail(load_fixture("amazon_detail.html"), Platform.AMAZON, AMAZON_URL)

        assert record.platform is Platform.AMAZON
        assert record.name == "Sony WH-1000XM5 Wireless Headphones"
        assert record.price == 348.0
        assert record.currency == "USD"
        assert record.brand == "Visit the Sony Store"
        assert record.availability == "In Stock"
        assert record.seller == "Ships from and sold by Amazon.com."
        assert record.rating == 4.6
        assert record.description == "Industry leading noise cancellation Eight microphones."
        assert record.image == "https://www.amazon.com/images/I/61vJtKbAssL.jpg"

    def test_detail_url_drops_tracking_params(self, load_fixture):
        record = extract_detail(load_fixture("amazon_detail.html"), Platform.AMAZON, AMAZON_URL)

        assert record.url == "https://www.amazon.com/dp/B09XS7JWHH?th=1"

    def test_detail_specifications_skip_empty_values(self, load_fixture):
        record = extract_detail(load_fixture("amazon_detail.html"), Platform.AMAZON, AMAZON_URL)

        assert record.specifications == {"Brand": "Sony", "Color": "Black"}

    def test_detail_colour_swatches(self, load_fixture):
        record = extract_detail(load_fixture("amazon_detail.html"), Platform.AMAZON, AMAZON_URL)

        assert record.variants == [
            VariantRecord(name="Black", available=True, price=348.0),
            VariantRecord(name="Silver", available=False, price=None),
        ]

    def test_search_results(self, load_fixture):
        results = extract_search(
            load_fixture("amazon_search.html"),
            Platform.AMAZON,
            "https://www.amazon.com/s?k=sony+headphones",
        )

        assert len(results) == 2
        first, second = results
        assert first.name == "Sony WH-1000XM5"
        assert first.price == 1348.99
        assert first.url == "https://www.amazon.com/Sony-WH-1000XM5/dp/B09XS7JWHH?ref=sr_1_1"
        assert first.rating == 4.5
        assert first.reviews == 12034
        assert first.image == "https://m.media-amazon.com/images/I/51.jpg"

        # Link wraps the heading instead of sitting inside it
        assert second.name == "Sony WH-1000XM4"
        assert second.price == 248.0
        assert second.url == "https://www.amazon.com/Sony-WH-1000XM4/dp/B0863TXGM3"
        assert second.rating is None
        assert second.reviews is None

    def test_empty_page_yields_empty_record(self):
        record = extract_detail("", Platform.AMAZON, "https://www.amazon.com/dp/X")

        assert record.name == ""
        assert record.price is None
        assert record.image is None
        assert record.specifications == {}
        assert record.variants == []


class TestEbayExtractor:
    """Tests for eBay pages."""

    URL = "https://www.ebay.com/itm/1234567890"

    def test_detail_strips_title_prefix(self, load_fixture):
        record = extract_detail(load_fixture("ebay_detail.html"), Platform.EBAY, self.URL)

        assert record.name == "Apple iPhone 13 128GB Midnight"
        assert record.price == 499.99
        assert record.seller == "phone_seller_99"
        assert record.availability == "3 available"

    def test_detail_condition_in_specifications(self, load_fixture):
        record = extract_detail(load_fixture("ebay_detail.html"), Platform.EBAY, self.URL)

        assert record.specifications == {
            "Storage Capacity": "128 GB",
            "Color": "Midnight",
            "condition": "Used",
        }

    def test_search_skips_price_ranges_and_script_links(self, load_fixture):
        results = extract_search(
            load_fixture("ebay_search.html"),
            Platform.EBAY,
            "https://www.ebay.com/sch/i.html?_nkw=iphone+13",
        )

        assert [r.name for r in results] == ["Apple iPhone 13 128GB"]
        assert results[0].price == 459.0
        assert results[0].url == "https://www.ebay.com/itm/1234567890"


class TestWalmartExtractor:
    """Tests for Walmart pages."""

    def test_detail_fields(self, load_fixture):
        record = extract_detail(
            load_fixture("walmart_detail.html"),
            Platform.WALMART,
            "https://www.walmart.com/ip/Instant-Pot-Duo/111",
        )

        assert record.name == "Instant Pot Duo 7-in-1 Electric Pressure Cooker"
        assert record.price == 79.0
        assert record.seller == "Walmart.com"
        assert record.availability == ""
        assert record.image == "https://i5.walmartimages.com/asr/pot.jpeg"
        assert record.specifications == {"Capacity": "6 qt"}

    def test_search_resolves_relative_links(self, load_fixture):
        results = extract_search(
            load_fixture("walmart_search.html"),
            Platform.WALMART,
            "https://www.walmart.com/search?q=instant+pot",
        )

        assert [(r.name, r.price) for r in results] == [
            ("Instant Pot Duo 6 qt", 79.0),
            ("Instant Pot Duo Plus", 99.95),
        ]
        assert results[0].url == "https://www.walmart.com/ip/Instant-Pot-Duo/111"
        assert results[1].image is None

    def test_search_skips_placeholder_anchor(self):
        html = (
            '<div data-item-id="1">'
            '<a href="#">Save</a>'
            '<a href="/ip/Pot/1"><span data-automation-id="product-title">Pot</span></a>'
            '<div data-automation-id="product-price">$19.99</div>'
            "</div>"
        )
        results = extract_search(html, Platform.WALMART, "https://www.walmart.com/search?q=pot")

        assert [(r.name, r.url) for r in results] == [("Pot", "https://www.walmart.com/ip/Pot/1")]


class TestEtsyExtractor:
    """Tests for Etsy pages."""

    def test_detail_fields(self, load_fixture):
        record = extract_detail(
            load_fixture("etsy_detail.html"),
            Platform.ETSY,
            "https://www.etsy.com/listing/101/leather-wallet",
        )

        assert record.name == "Personalized Leather Wallet"
        assert record.price == 42.5
        assert record.seller == "LeatherCraftCo"
        assert record.specifications == {"Materials": "Leather"}

    def test_search_results(self, load_fixture):
        results = extract_search(
            load_fixture("etsy_search.html"),
            Platform.ETSY,
            "https://www.etsy.com/search?q=wallet",
        )

        assert [r.price for r in results] == [42.5, 1020.0]
        assert results[1].url == "https://www.etsy.com/listing/102/card-holder"


class TestBestBuyExtractor:
    """Tests for Best Buy pages."""

    def test_detail_brand_falls_back_to_spec_value(self, load_fixture):
        record = extract_detail(
            load_fixture("bestbuy_detail.html"),
            Platform.BESTBUY,
            "https://www.bestbuy.com/site/samsung-65-qled/6501.p",
        )

        assert record.name == 'Samsung 65" Class QLED 4K Smart TV'
        assert record.price == 899.99
        assert record.brand == "Samsung"
        assert record.specifications["Screen Size"] == "65 inches"

    def test_search_skips_items_without_price(self, load_fixture):
        results = extract_search(
            load_fixture("bestbuy_search.html"),
            Platform.BESTBUY,
            "https://www.bestbuy.com/site/searchpage.jsp?st=tv",
        )

        assert len(results) == 1
        assert results[0].url == "https://www.bestbuy.com/site/samsung-65-qled/6501.p?skuId=6501"


class TestHomeDepotExtractor:
    """Tests for Home Depot pages."""

    def test_detail_split_price(self, load_fixture):
        record = extract_detail(
            load_fixture("homedepot_detail.html"),
            Platform.HOMEDEPOT,
            "https://www.homedepot.com/p/DEWALT-Drill/204373168",
        )

        assert record.name == "20V MAX Cordless Drill/Driver Kit"
        assert record.price == 99.0
        assert record.brand == "DEWALT"
        assert record.image == "https://images.thdstatic.com/drill.jpg"
        assert record.specifications == {"Voltage": "20 V"}

    def test_search_dollars_and_cents(self, load_fixture):
        results = extract_search(
            load_fixture("homedepot_search.html"),
            Platform.HOMEDEPOT,
            "https://www.homedepot.com/search?q=drill",
        )

        assert [(r.name, r.price) for r in results] == [
            ("DEWALT 20V Drill", 99.0),
            ("RYOBI Drill", 59.0),
        ]

    def test_detail_split_price_with_thousands_separator(self):
        html = (
            '<div class="price-format__main-price">'
            "<span>$</span><span>1,299</span><span>00</span>"
            "</div>"
        )
        record = extract_detail(
            html,
            Platform.HOMEDEPOT,
            "https://www.homedepot.com/p/Generator/318",
        )

        assert record.price == 1299.0


class TestZaraExtractor:
    """Tests for Zara pages."""

    def test_detail_sizes_as_variants(self, load_fixture):
        record = extract_detail(
            load_fixture("zara_detail.html"),
            Platform.ZARA,
            "https://www.zara.com/us/en/wool-blend-coat-p0001.html",
        )

        assert record.name == "WOOL BLEND COAT"
        assert record.price == 129.0
        assert record.specifications == {"Composition": "60% wool"}
        assert [(v.name, v.available) for v in record.variants] == [
            ("S", True),
            ("M", False),
            ("L", True),
        ]

    def test_search_results(self, load_fixture):
        results = extract_search(
            load_fixture("zara_search.html"),
            Platform.ZARA,
            "https://www.zara.com/us/en/search?q=coat",
        )

        assert [r.url for r in results] == [
            "https://www.zara.com/us/en/wool-blend-coat-p0001.html",
            "https://www.zara.com/us/en/scarf-p0002.html",
        ]
        assert results[1].price == 29.9


class TestRecords:
    """Tests for record invariants and serialization."""

    def test_search_record_requires_price(self):
        with pytest.raises(ValueError, match="price is required"):
            SearchResultRecord(platform=Platform.EBAY, name="x", price=None, url="https://e.com")

    def test_product_record_to_dict_uses_plain_tags(self, load_fixture):
        record = extract_detail(load_fixture("zara_detail.html"), "zara", "https://www.zara.com/p")
        data = record.to_dict()

        assert data["platform"] == "zara"
        assert data["variants"][1] == {"name": "M", "available": False, "price": None}
