"""Domain models of the GIF acquisition pipeline."""

from .models import (
    RENDITION_COMPACT,
    RENDITION_FULL,
    RENDITION_MP4,
    CachedResultSet,
    ItemMetadataDigest,
    MediaItem,
    Rendition,
)

__all__ = [
    "CachedResultSet",
    "ItemMetadataDigest",
    "MediaItem",
    "RENDITION_COMPACT",
    "RENDITION_FULL",
    "RENDITION_MP4",
    "Rendition",
]
