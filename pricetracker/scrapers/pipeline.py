"""Product pipeline: detect platform, pick a fetch strategy, normalize.

This is the bridge between the provider client, the dataset poller and
the extractors. It owns no state beyond its injected collaborators.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import structlog

from pricetracker.config import Settings
from pricetracker.core.exceptions import UnsupportedPlatformError
from pricetracker.scrapers.dataset_poller import DatasetJobPoller
from pricetracker.scrapers.extractors import extract_detail, extract_search, get_extractor
from pricetracker.scrapers.platforms import (
    Platform,
    dataset_id_for,
    detect_platform,
    platform_tag,
    search_url_for,
)
from pricetracker.scrapers.provider import BrightDataClient

logger = structlog.get_logger(__name__)

METHOD_DATASET = "structured_dataset"
METHOD_SCRAPING = "scraping"


@dataclass(frozen=True)
class ProductEnvelope:
    """Detail fetch result.

    method tells a structured dataset payload apart from a best-effort
    HTML extraction, which may have empty fields.
    """

    data: Any
    method: str
    platform: Platform
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "method": self.method,
            "platform": self.platform.value,
            "url": self.url,
        }


@dataclass
class PlatformSearchResult:
    """Outcome of searching one platform: results or an error."""

    platform: str
    search_url: str
    results: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"platform": self.platform, "search_url": self.search_url}
        if self.error is not None:
            entry["error"] = self.error
        else:
            entry["results"] = self.results
        return entry


class ProductPipeline:
    """Fetches and normalizes product data for any supported storefront."""

    def __init__(
        self,
        client: BrightDataClient,
        poller: Optional[DatasetJobPoller] = None,
        disabled_datasets: Iterable[Platform | str] = (),
    ):
        """Initialize the pipeline.

        Args:
            client: Provider client used for raw requests
            poller: Dataset poller; built from client with defaults if omitted
            disabled_datasets: Platforms that skip the dataset and are scraped raw
        """
        self.client = client
        self.poller = poller or DatasetJobPoller(client)
        self.disabled_datasets = frozenset(Platform.coerce(p) for p in disabled_datasets)
        self.logger = logger.bind(service="product_pipeline")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProductPipeline":
        client = BrightDataClient.from_settings(settings)
        poller = DatasetJobPoller(
            client,
            poll_interval=settings.DATASET_POLL_INTERVAL,
            max_attempts=settings.DATASET_MAX_ATTEMPTS,
        )
        return cls(client, poller, settings.get_disabled_dataset_platforms())

    async def aclose(self) -> None:
        await self.client.aclose()

    def select_dataset(self, platform: Platform) -> Optional[str]:
        """Dataset id to use for platform, or None for raw scraping."""
        if platform in self.disabled_datasets:
            return None
        return dataset_id_for(platform)

    async def fetch_product_detail(self, url: str) -> ProductEnvelope:
        """Fetch one product page.

        Platforms with a dataset go through the dataset job protocol and
        return the provider payload as-is; all others are scraped raw and
        run through the platform extractor.

        Raises:
            UnsupportedPlatformError: Raw scrape of an unrecognised storefront
            ProviderError: Any provider-side failure
        """
        platform = detect_platform(url)
        dataset_id = self.select_dataset(platform)

        self.logger.info(
            "fetching_product_detail",
            url=url,
            platform=platform.value,
            strategy=METHOD_DATASET if dataset_id else METHOD_SCRAPING,
        )

        if dataset_id:
            payload = await self.poller.collect(dataset_id, url)
            return ProductEnvelope(data=payload, method=METHOD_DATASET, platform=platform, url=url)

        # No extraction rules: fail before spending a provider request
        if get_extractor(platform) is None:
            raise UnsupportedPlatformError(platform.value)

        html = await self.client.request_raw(url)
        record = extract_detail(html, platform, url)
        return ProductEnvelope(
            data=record.to_dict(),
            method=METHOD_SCRAPING,
            platform=platform,
            url=url,
        )

    async def search_products(
        self,
        query: str,
        platforms: Iterable[Platform | str],
        max_results: int = 10,
    ) -> List[PlatformSearchResult]:
        """Search several storefronts one after another.

        A failing platform becomes an error entry; the others still
        report their results.
        """
        outcomes: List[PlatformSearchResult] = []

        for platform in platforms:
            tag = platform_tag(platform)
            search_url = ""
            try:
                search_url = search_url_for(platform, query)
                html = await self.client.request_raw(search_url)
                records = extract_search(html, platform, search_url)
            except Exception as e:
                self.logger.error(
                    "search_platform_failed",
                    platform=tag,
                    query=query,
                    error=str(e),
                )
                outcomes.append(PlatformSearchResult(platform=tag, search_url=search_url, error=str(e)))
                continue

            self.logger.info(
                "search_platform_complete",
                platform=tag,
                query=query,
                found=len(records),
            )
            outcomes.append(
                PlatformSearchResult(
                    platform=tag,
                    search_url=search_url,
                    results=[r.to_dict() for r in records[:max_results]],
                )
            )

        return outcomes
