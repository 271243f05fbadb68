"""PriceTracker MCP server entry point."""

import sys
from contextlib import asynccontextmanager
from typing import Annotated, Any, AsyncIterator, Dict, List, Literal, Optional

import structlog
from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from pricetracker.api.tools import PriceTrackerTools
from pricetracker.config import settings
from pricetracker.core.exceptions import ConfigurationError
from pricetracker.core.logging_config import configure_logging
from pricetracker.db.session import async_session_factory, engine
from pricetracker.db.utils import init_db
from pricetracker.schemas import PriceUpdateInput, ProductDetailsInput
from pricetracker.scrapers.pipeline import ProductPipeline

logger = structlog.get_logger(__name__)

SearchPlatform = Literal["amazon", "ebay", "walmart", "etsy", "bestbuy", "homedepot", "zara"]
ComparePlatform = Literal["amazon", "ebay", "walmart", "etsy", "bestbuy"]


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[PriceTrackerTools]:
    """Server lifespan: create tables, open the provider client."""
    await init_db(engine)
    pipeline = ProductPipeline.from_settings(settings)
    logger.info("server_started", zone=settings.WEB_UNLOCKER_ZONE)
    try:
        yield PriceTrackerTools(pipeline, async_session_factory)
    finally:
        await pipeline.aclose()
        await engine.dispose()
        logger.info("server_stopped")


mcp = FastMCP("PriceTracker", lifespan=lifespan)


def _tools(ctx: Context) -> PriceTrackerTools:
    return ctx.request_context.lifespan_context


@mcp.tool()
async def search_products(
    ctx: Context,
    query: Annotated[str, Field(description="Product search query")],
    platforms: Annotated[
        Optional[List[SearchPlatform]],
        Field(description="Storefronts to search; amazon, ebay and walmart if omitted"),
    ] = None,
    max_results: Annotated[int, Field(ge=1, le=50, description="Results per platform")] = 10,
) -> Dict[str, Any]:
    """Search for products across e-commerce platforms."""
    return await _tools(ctx).search_products(query, platforms, max_results)


@mcp.tool()
async def get_product_details(
    ctx: Context,
    url: Annotated[str, Field(description="Product page URL")],
) -> Dict[str, Any]:
    """Get detailed information about a specific product."""
    return await _tools(ctx).get_product_details(url)


@mcp.tool()
async def compare_prices(
    ctx: Context,
    platforms: Optional[List[ComparePlatform]] = None,
    query: Optional[str] = None,
    urls: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Compare prices for a product across platforms, by search query or product URLs."""
    return await _tools(ctx).compare_prices(platforms, query, urls)


@mcp.tool()
async def get_price_update(
    ctx: Context,
    urls: Annotated[
        Optional[List[str]],
        Field(description="Product URLs to refresh; every tracked product if empty"),
    ] = None,
) -> Dict[str, Any]:
    """Get latest prices for tracked products."""
    return await _tools(ctx).get_price_update(urls)


@mcp.tool()
async def register_user(ctx: Context, userId: str) -> Dict[str, Any]:
    """Register a user, or return the existing one."""
    return await _tools(ctx).register_user(userId)


@mcp.tool()
async def track_product(
    ctx: Context,
    userId: str,
    url: str,
    productDetails: Optional[ProductDetailsInput] = None,
) -> Dict[str, Any]:
    """Start tracking a product's price for a user."""
    details = productDetails.model_dump(exclude_none=True) if productDetails else None
    return await _tools(ctx).track_product(userId, url, details)


@mcp.tool()
async def untrack_product(ctx: Context, userId: str, productId: str) -> Dict[str, Any]:
    """Stop tracking a product."""
    return await _tools(ctx).untrack_product(userId, productId)


@mcp.tool()
async def get_user_tracked_products(
    ctx: Context,
    userId: str,
    include_price_history: bool = False,
) -> Dict[str, Any]:
    """List the products a user tracks, optionally with price history."""
    return await _tools(ctx).get_user_tracked_products(userId, include_price_history)


@mcp.tool()
async def update_product_prices(
    ctx: Context,
    updates: List[PriceUpdateInput],
) -> Dict[str, Any]:
    """Record a new price for each tracked product in updates."""
    return await _tools(ctx).update_product_prices([u.model_dump() for u in updates])


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    try:
        settings.require_api_token()
    except ConfigurationError as e:
        logger.error("startup_failed", error=e.message)
        sys.exit(1)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
