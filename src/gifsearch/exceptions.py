"""Error taxonomy for the GIF acquisition pipeline."""

from __future__ import annotations

__all__ = [
    "GifSearchError",
    "ProviderError",
    "UploadError",
    "UploadTimeoutError",
    "UploadRejectedError",
    "CacheError",
]


class GifSearchError(Exception):
    """Base class for pipeline specific errors."""


class ProviderError(GifSearchError):
    """Raised when the search provider fails or returns an unusable page."""


class UploadError(GifSearchError):
    """Raised when re-hosting a rendition did not produce a usable URL."""


class UploadTimeoutError(UploadError):
    """Raised when the media host does not answer within the upload budget."""


class UploadRejectedError(UploadError):
    """Raised when the media host answered with a non first-party URL."""


class CacheError(GifSearchError):
    """Raised by cache stores when a read or write cannot be completed."""
