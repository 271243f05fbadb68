"""Tests for tool handlers and their JSON envelopes."""

import json
from datetime import datetime

import pytest
from jsonschema import validate

from pricetracker.api.tools import PriceTrackerTools
from pricetracker.core.exceptions import NotFoundError, ProviderRequestError
from pricetracker.scrapers.dataset_poller import DatasetJobPoller
from pricetracker.scrapers.pipeline import ProductPipeline

from conftest import FakeProviderClient, read_fixture


SEARCH_SCHEMA = {
    "type": "object",
    "required": ["query", "platforms_searched", "results"],
    "properties": {
        "query": {"type": "string"},
        "platforms_searched": {"type": "array", "items": {"type": "string"}},
        "results": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["platform", "search_url"],
                "oneOf": [
                    {"required": ["results"], "not": {"required": ["error"]}},
                    {"required": ["error"], "not": {"required": ["results"]}},
                ],
                "properties": {
                    "results": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["platform", "name", "price", "url"],
                            "properties": {"price": {"type": "number"}},
                        },
                    },
                    "error": {"type": "string"},
                },
            },
        },
    },
}

ENVELOPE_SCHEMA = {
    "type": "object",
    "required": ["data", "method", "platform", "url"],
    "properties": {
        "method": {"enum": ["structured_dataset", "scraping"]},
        "platform": {"type": "string"},
        "url": {"type": "string"},
    },
}

COMPARISON_SCHEMA = {
    "type": "object",
    "required": ["type", "query", "results", "timestamp"],
    "properties": {
        "type": {"enum": ["url_comparison", "search_comparison"]},
        "query": {"type": ["string", "null"]},
        "results": {"type": "array"},
        "timestamp": {"type": "string"},
    },
}

TRACKED_PRODUCT_SCHEMA = {
    "type": "object",
    "required": ["id", "name", "platform", "url", "tracking_type", "created_at"],
    "properties": {
        "id": {"type": "string"},
        "prices": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["amount", "created_at"],
                "properties": {"amount": {"type": "number"}},
            },
        },
    },
}


@pytest.fixture
def provider():
    return FakeProviderClient(
        pages={
            "amazon": read_fixture("amazon_search.html"),
            "ebay": ProviderRequestError(500, "upstream"),
            "walmart": read_fixture("walmart_search.html"),
        },
        progress=["ready"],
        snapshot=[{"title": "Snapshot item", "final_price": 10.0}],
    )


@pytest.fixture
def tools(provider, session_factory, fake_sleep):
    poller = DatasetJobPoller(provider, poll_interval=0.1, max_attempts=3, sleep=fake_sleep)
    pipeline = ProductPipeline(provider, poller)
    return PriceTrackerTools(pipeline, session_factory)


class TestLiveDataTools:
    """Tests for search, details, comparison and refresh."""

    async def test_search_products_defaults(self, tools):
        result = await tools.search_products("sony")

        validate(result, SEARCH_SCHEMA)
        assert result["platforms_searched"] == ["amazon", "ebay", "walmart"]
        assert "error" in result["results"][1]
        json.dumps(result)

    async def test_get_product_details(self, tools):
        result = await tools.get_product_details("https://www.walmart.com/ip/111")

        validate(result, ENVELOPE_SCHEMA)
        assert result["method"] == "structured_dataset"
        assert result["data"] == [{"title": "Snapshot item", "final_price": 10.0}]

    async def test_compare_by_urls_keeps_failures(self, tools):
        result = await tools.compare_prices(
            urls=["https://www.amazon.com/dp/1", "https://www.target.com/p/2"]
        )

        validate(result, COMPARISON_SCHEMA)
        assert result["type"] == "url_comparison"
        assert result["query"] is None
        validate(result["results"][0], ENVELOPE_SCHEMA)
        assert result["results"][1] == {
            "url": "https://www.target.com/p/2",
            "platform": "unknown",
            "error": "Unsupported platform: unknown",
        }
        datetime.fromisoformat(result["timestamp"])

    async def test_compare_by_query(self, tools):
        result = await tools.compare_prices(platforms=["amazon", "walmart"], query="pot")

        validate(result, COMPARISON_SCHEMA)
        assert result["type"] == "search_comparison"
        assert [r["platform"] for r in result["results"]] == ["amazon", "walmart"]

    async def test_compare_requires_query_or_urls(self, tools):
        with pytest.raises(ValueError, match="Either query or urls must be provided"):
            await tools.compare_prices()

        with pytest.raises(ValueError):
            await tools.compare_prices(urls=[])

    async def test_price_update_defaults_to_tracked_urls(self, tools, provider):
        await tools.register_user("user-1")
        await tools.track_product("user-1", "https://www.amazon.com/dp/1", {"currentPrice": 5})
        await tools.track_product("user-1", "https://www.target.com/p/2")

        result = await tools.get_price_update()

        assert result["updated_products"] == 1
        assert [(u["url"], u["status"]) for u in result["updates"]] == [
            ("https://www.amazon.com/dp/1", "updated"),
            ("https://www.target.com/p/2", "error"),
        ]
        validate(result["updates"][0]["data"], ENVELOPE_SCHEMA)
        json.dumps(result)

    async def test_price_update_with_nothing_tracked(self, tools):
        result = await tools.get_price_update([])

        assert result["updated_products"] == 0
        assert result["updates"] == []


class TestTrackingTools:
    """Tests for user and tracking tools."""

    async def test_register_user(self, tools):
        first = await tools.register_user("agent-1")
        second = await tools.register_user("agent-1")

        assert first["user"]["userId"] == "agent-1"
        assert first["user"]["id"] == second["user"]["id"]

    async def test_track_list_update_untrack(self, tools):
        await tools.register_user("user-1")
        tracked = await tools.track_product(
            "user-1",
            "https://www.ebay.com/itm/1234567890",
            {"name": "iPhone 13", "platform": "ebay", "currentPrice": 499.99},
        )
        product = tracked["product"]
        validate(product, TRACKED_PRODUCT_SCHEMA)
        assert product["prices"][0]["amount"] == 499.99

        updated = await tools.update_product_prices([{"id": product["id"], "currentPrice": 459.0}])
        assert updated["updated"] == 1
        assert [p["amount"] for p in updated["products"][0]["prices"]] == [499.99, 459.0]

        listing = await tools.get_user_tracked_products("user-1", include_price_history=True)
        assert listing["count"] == 1
        validate(listing["products"][0], TRACKED_PRODUCT_SCHEMA)
        assert len(listing["products"][0]["prices"]) == 2

        without_history = await tools.get_user_tracked_products("user-1")
        assert "prices" not in without_history["products"][0]
        assert without_history["products"][0]["latest_price"] == 459.0

        removed = await tools.untrack_product("user-1", product["id"])
        assert removed["untracked"] is True
        assert (await tools.get_user_tracked_products("user-1"))["count"] == 0
        json.dumps(listing)

    async def test_track_for_unknown_user(self, tools):
        with pytest.raises(NotFoundError):
            await tools.track_product("ghost", "https://www.ebay.com/itm/1")
