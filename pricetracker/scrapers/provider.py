"""Bright Data API client.

Wraps the endpoints the tracker uses:
- POST /request                          raw page content through the unlocker zone
- POST /datasets/v3/trigger              start a structured dataset collection
- GET  /datasets/v3/progress/{snapshot}  collection status
- GET  /datasets/v3/snapshot/{snapshot}  collected records
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from pricetracker.config import Settings
from pricetracker.core.exceptions import ProviderRequestError
from pricetracker.scrapers.utils.retry import transport_retry

logger = structlog.get_logger(__name__)


class BrightDataClient:
    """Async client for the scraping provider.

    Every request carries the bearer token and the configured user agent.
    Non-2xx answers raise ProviderRequestError.
    """

    def __init__(
        self,
        api_token: str,
        zone: str,
        base_url: str = "https://api.brightdata.com",
        user_agent: str = "pricetracker/1.0.0",
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client.

        Args:
            api_token: Bright Data API token
            zone: Web unlocker zone name used for raw requests
            base_url: API root
            user_agent: Value sent as User-Agent
            timeout: Request timeout in seconds (ignored if http_client is given)
            http_client: Optional pre-built httpx.AsyncClient (closed by its owner)
        """
        self.api_token = api_token
        self.zone = zone
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None
        self.logger = logger.bind(client="brightdata")

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrightDataClient":
        return cls(
            api_token=settings.require_api_token(),
            zone=settings.WEB_UNLOCKER_ZONE,
            base_url=settings.BRIGHT_DATA_API_URL,
            user_agent=settings.USER_AGENT,
            timeout=settings.HTTP_TIMEOUT,
        )

    async def __aenter__(self) -> "BrightDataClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "User-Agent": self.user_agent,
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        response = await self._client.request(method, url, headers=self._headers(), **kwargs)

        if response.is_error:
            self.logger.error(
                "provider_http_error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise ProviderRequestError(response.status_code, response.text[:200])

        return response

    @transport_retry
    async def request_raw(self, url: str) -> str:
        """Fetch the rendered content of a page through the unlocker zone.

        Args:
            url: Target page URL

        Returns:
            Page body as text (HTML)
        """
        self.logger.info("raw_request", url=url, zone=self.zone)
        response = await self._request(
            "POST",
            "/request",
            json={"url": url, "zone": self.zone, "format": "raw"},
        )
        return response.text

    async def trigger_dataset(self, dataset_id: str, url: str) -> Dict[str, Any]:
        """Start a dataset collection for one URL.

        Returns:
            Trigger response body; carries "snapshot_id" on success
        """
        self.logger.info("dataset_trigger", dataset_id=dataset_id, url=url)
        response = await self._request(
            "POST",
            "/datasets/v3/trigger",
            params={"dataset_id": dataset_id, "include_errors": "true"},
            json=[{"url": url}],
        )
        body = response.json()
        return body if isinstance(body, dict) else {}

    async def get_progress(self, snapshot_id: str) -> Dict[str, Any]:
        """Current status of a dataset collection."""
        response = await self._request("GET", f"/datasets/v3/progress/{snapshot_id}")
        body = response.json()
        return body if isinstance(body, dict) else {}

    async def get_snapshot(self, snapshot_id: str) -> Any:
        """Collected records of a finished dataset job.

        Returns:
            Decoded JSON payload, or the raw text when the body is not JSON
        """
        response = await self._request("GET", f"/datasets/v3/snapshot/{snapshot_id}")
        try:
            return response.json()
        except ValueError:
            return response.text
