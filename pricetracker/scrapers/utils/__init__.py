"""Scraper utilities for data normalization and retries."""

from .normalizer import (
    PriceNormalizer,
    clean_text,
    normalize_url,
    resolve_url,
)
from .retry import transport_retry


__all__ = [
    # Normalization
    "PriceNormalizer",
    "clean_text",
    "normalize_url",
    "resolve_url",
    # Retry decorators
    "transport_retry",
]
