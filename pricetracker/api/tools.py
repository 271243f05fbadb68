"""Tool handlers.

Each handler returns a JSON-serializable dict. Handlers that touch the
database open their own transactional session, so tool calls never
share state.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pricetracker.db.utils import session_scope
from pricetracker.schemas import (
    TrackedProductDetailResponse,
    TrackedProductResponse,
    UserResponse,
)
from pricetracker.scrapers.pipeline import ProductPipeline
from pricetracker.scrapers.platforms import detect_platform, platform_tag
from pricetracker.services.product_service import ProductService
from pricetracker.services.user_service import UserService

logger = structlog.get_logger(__name__)

DEFAULT_SEARCH_PLATFORMS = ("amazon", "ebay", "walmart")

URL_COMPARISON = "url_comparison"
SEARCH_COMPARISON = "search_comparison"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PriceTrackerTools:
    """Tool handlers backed by a product pipeline and a session factory."""

    def __init__(
        self,
        pipeline: ProductPipeline,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.pipeline = pipeline
        self.session_factory = session_factory
        self.logger = logger.bind(service="tools")

    # Live data

    async def search_products(
        self,
        query: str,
        platforms: Optional[Sequence[str]] = None,
        max_results: int = 10,
    ) -> Dict[str, Any]:
        """Search several storefronts for a query.

        One failing platform shows up as an error entry; the rest still
        return their results.
        """
        platforms = list(platforms or DEFAULT_SEARCH_PLATFORMS)
        outcomes = await self.pipeline.search_products(query, platforms, max_results)
        return {
            "query": query,
            "platforms_searched": [platform_tag(p) for p in platforms],
            "results": [o.to_dict() for o in outcomes],
        }

    async def get_product_details(self, url: str) -> Dict[str, Any]:
        envelope = await self.pipeline.fetch_product_detail(url)
        return envelope.to_dict()

    async def _fetch_each(self, urls: Sequence[str]) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        for url in urls:
            try:
                envelope = await self.pipeline.fetch_product_detail(url)
            except Exception as e:
                self.logger.error("product_fetch_failed", url=url, error=str(e))
                results.append({"url": url, "platform": detect_platform(url).value, "error": str(e)})
                continue
            results.append(envelope.to_dict())
        return results

    async def compare_prices(
        self,
        platforms: Optional[Sequence[str]] = None,
        query: Optional[str] = None,
        urls: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Compare a product across storefronts.

        With urls, each page is fetched; a failing URL becomes an error
        entry. Otherwise query is searched on platforms.

        Raises:
            ValueError: If neither urls nor query is given
        """
        if urls:
            comparison_type = URL_COMPARISON
            results = await self._fetch_each(urls)
        elif query:
            comparison_type = SEARCH_COMPARISON
            search = await self.search_products(query, platforms)
            results = search["results"]
        else:
            raise ValueError("Either query or urls must be provided")

        self.logger.info("prices_compared", type=comparison_type, count=len(results))
        return {
            "type": comparison_type,
            "query": query,
            "results": results,
            "timestamp": _now_iso(),
        }

    async def get_price_update(self, urls: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """Re-fetch product pages; with no urls, every tracked product URL."""
        if not urls:
            async with session_scope(self.session_factory) as db:
                products = await ProductService(db).get_all_tracked_products()
            # Several users may track the same page
            urls = list(dict.fromkeys(p.url for p in products))

        updates: List[Dict[str, Any]] = []
        for url in urls:
            try:
                envelope = await self.pipeline.fetch_product_detail(url)
            except Exception as e:
                self.logger.error("price_update_failed", url=url, error=str(e))
                updates.append({"url": url, "status": "error", "error": str(e)})
                continue
            updates.append({"url": url, "status": "updated", "data": envelope.to_dict()})

        updated = sum(1 for u in updates if u["status"] == "updated")
        self.logger.info("price_update_complete", requested=len(updates), updated=updated)
        return {
            "timestamp": _now_iso(),
            "updated_products": updated,
            "updates": updates,
        }

    # Tracking

    async def register_user(self, user_id: str) -> Dict[str, Any]:
        async with session_scope(self.session_factory) as db:
            user = await UserService(db).create_or_update_user(user_id)
            data = UserResponse.model_validate(user).model_dump(mode="json", by_alias=True)
        return {"user": data}

    async def track_product(
        self,
        user_id: str,
        url: str,
        product_details: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        async with session_scope(self.session_factory) as db:
            product = await ProductService(db).track_product(user_id, url, product_details)
            data = TrackedProductDetailResponse.model_validate(product).model_dump(mode="json")
        return {"product": data}

    async def untrack_product(self, user_id: str, product_id: str) -> Dict[str, Any]:
        async with session_scope(self.session_factory) as db:
            product = await ProductService(db).untrack_product(user_id, product_id)
            data = TrackedProductResponse.model_validate(product).model_dump(mode="json")
        return {"product": data, "untracked": True}

    async def get_user_tracked_products(
        self,
        user_id: str,
        include_price_history: bool = False,
    ) -> Dict[str, Any]:
        """List a user's products; without history each carries latest_price."""
        async with session_scope(self.session_factory) as db:
            service = ProductService(db)
            products = await service.get_user_tracked_products(
                user_id, include_price_history=include_price_history
            )
            data = []
            for product in products:
                if include_price_history:
                    data.append(TrackedProductDetailResponse.model_validate(product).model_dump(mode="json"))
                    continue
                item = TrackedProductResponse.model_validate(product).model_dump(mode="json")
                latest = await service.get_latest_price(product.id)
                item["latest_price"] = float(latest.amount) if latest is not None else None
                data.append(item)
        return {"user_id": user_id, "count": len(data), "products": data}

    async def update_product_prices(self, updates: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """Append one price entry per update, all in one transaction."""
        async with session_scope(self.session_factory) as db:
            products = await ProductService(db).update_all_products(updates)
            data = [
                TrackedProductDetailResponse.model_validate(p).model_dump(mode="json")
                for p in products
            ]
        return {"updated": len(data), "products": data}
