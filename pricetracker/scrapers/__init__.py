"""Scraping layer for fetching and normalizing e-commerce product data.

This package provides:
- Platform detection and the dataset/scrape strategy table
- Per-platform HTML extractors producing normalized records
- The Bright Data client and dataset job poller
- ProductPipeline, which composes all of the above
"""

from .base import BaseExtractor, ProductRecord, SearchResultRecord, VariantRecord
from .platforms import (
    Platform,
    SUPPORTED_PLATFORMS,
    dataset_id_for,
    detect_platform,
    search_url_for,
)
from .pipeline import ProductEnvelope, ProductPipeline, PlatformSearchResult

__all__ = [
    # Records
    "BaseExtractor",
    "ProductRecord",
    "SearchResultRecord",
    "VariantRecord",
    # Platforms
    "Platform",
    "SUPPORTED_PLATFORMS",
    "dataset_id_for",
    "detect_platform",
    "search_url_for",
    # Pipeline
    "ProductEnvelope",
    "ProductPipeline",
    "PlatformSearchResult",
]
