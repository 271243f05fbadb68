"""Data normalization utilities for price parsing, text and URL cleanup."""

import math
import re
from typing import Optional
from urllib.parse import parse_qs, urlencode, urljoin, urlparse, urlunparse


_NON_PRICE_CHARS = re.compile(r"[^\d.]")
_NON_DIGITS = re.compile(r"\D")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_WHITESPACE = re.compile(r"\s+")


class PriceNormalizer:
    """Price and number parsing utilities.

    Parsing never raises: text that does not yield a finite number
    comes back as None.
    """

    @staticmethod
    def parse_price(raw: Optional[str]) -> Optional[float]:
        """Parse a price string into a float.

        Every character that is not a digit or a decimal point is removed
        before parsing:
        - "$19.99" -> 19.99
        - "US $1,234.50" -> 1234.5
        - "" -> None
        - "1.2.3" -> None

        Args:
            raw: Raw price string

        Returns:
            Float price value, or None if parsing fails
        """
        if not raw:
            return None

        cleaned = _NON_PRICE_CHARS.sub("", raw)
        if not cleaned:
            return None

        try:
            value = float(cleaned)
        except ValueError:
            return None

        if not math.isfinite(value):
            return None
        return value

    @staticmethod
    def parse_split_price(whole: Optional[str], fraction: Optional[str]) -> Optional[float]:
        """Parse a price rendered as separate dollars and cents elements.

        Args:
            whole: Dollars part, possibly with separators or a trailing dot
            fraction: Cents part

        Returns:
            Combined float price, or None if neither part has digits
        """
        whole_digits = _NON_DIGITS.sub("", whole or "")
        fraction_digits = _NON_DIGITS.sub("", fraction or "")
        if not whole_digits and not fraction_digits:
            return None
        return PriceNormalizer.parse_price(f"{whole_digits or '0'}.{fraction_digits or '0'}")

    @staticmethod
    def extract_number(text: Optional[str]) -> Optional[float]:
        """Extract the first number from text ("4.5 out of 5 stars" -> 4.5)."""
        if not text:
            return None
        match = _LEADING_NUMBER.search(text)
        if not match:
            return None
        return float(match.group(0))

    @staticmethod
    def parse_count(text: Optional[str]) -> Optional[int]:
        """Parse an integer count, ignoring separators ("1,204 ratings" -> 1204)."""
        if not text:
            return None
        digits = _NON_DIGITS.sub("", text)
        if not digits:
            return None
        return int(digits)


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def resolve_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolve a possibly relative href against the page URL.

    Returns:
        Absolute http(s) URL, or None when href is empty or not resolvable
    """
    if not href or not href.strip():
        return None

    href = href.strip()
    if href.startswith(("javascript:", "#", "mailto:")):
        return None

    absolute = urljoin(base_url, href)
    if urlparse(absolute).scheme not in ("http", "https"):
        return None
    return absolute


def normalize_url(url: str) -> str:
    """Normalize a URL by removing tracking parameters.

    Args:
        url: URL to normalize

    Returns:
        Normalized URL
    """
    if not url:
        return url

    # Common tracking parameters to remove
    tracking_params = [
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_content",
        "utm_term",
        "ref",
        "ref_",
        "fbclid",
        "gclid",
        "mc_cid",
        "mc_eid",
    ]

    parsed = urlparse(url)
    query_params = parse_qs(parsed.query, keep_blank_values=True)

    # Remove tracking parameters
    filtered_params = {
        k: v for k, v in query_params.items() if k not in tracking_params
    }

    # Rebuild query string
    new_query = urlencode(filtered_params, doseq=True)

    # Rebuild URL
    return urlunparse(
        (parsed.scheme, parsed.netloc, parsed.path, parsed.params, new_query, "")
    )
