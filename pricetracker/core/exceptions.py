"""Custom exception classes for the application."""

from typing import Optional


class PriceTrackerError(Exception):
    """Base exception for all PriceTracker errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(PriceTrackerError):
    """Raised when a required setting is missing at startup."""


class NotFoundError(PriceTrackerError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class UnsupportedPlatformError(PriceTrackerError):
    """Raised when no extraction rule exists for a platform."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class ProviderError(PriceTrackerError):
    """Base class for scraping provider failures."""


class ProviderRequestError(ProviderError):
    """Raised when the provider answers with a non-success status."""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        super().__init__(f"Provider request failed ({status_code}): {message}")


class ProviderTriggerError(ProviderError):
    """Raised when a dataset trigger returns no snapshot id."""

    def __init__(self, message: str = "Failed to trigger dataset collection"):
        super().__init__(message)


class ProviderCollectionFailedError(ProviderError):
    """Raised when the provider reports a dataset job as failed."""

    def __init__(self, snapshot_id: str):
        self.snapshot_id = snapshot_id
        super().__init__(f"Dataset collection failed for snapshot {snapshot_id}")


class ProviderTimeoutError(ProviderError):
    """Raised when a dataset job does not finish within the poll budget."""

    def __init__(self, snapshot_id: str, attempts: int):
        self.snapshot_id = snapshot_id
        self.attempts = attempts
        super().__init__(
            f"Timeout waiting for dataset results (snapshot {snapshot_id}, {attempts} polls)"
        )
