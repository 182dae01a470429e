"""Domain models for the GIF acquisition pipeline.

``MediaItem`` instances are created fresh for every provider page, enriched
in place with ``hosted_url`` by the uploader, and treated as immutable once
they are written to the cache. Items whose ``hosted_url`` is empty are never
handed to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

RENDITION_FULL = "full"
RENDITION_COMPACT = "compact"
RENDITION_MP4 = "mp4"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, frozen=True)
class Rendition:
    """One encoded variant of a media item."""

    url: str = ""
    width: int = 0
    height: int = 0
    duration_seconds: float = 0.0
    size_bytes: int = 0

    @classmethod
    def empty(cls) -> "Rendition":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "width": self.width,
            "height": self.height,
            "duration_seconds": self.duration_seconds,
            "size_bytes": self.size_bytes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rendition":
        return cls(
            url=str(data.get("url") or ""),
            width=int(data.get("width") or 0),
            height=int(data.get("height") or 0),
            duration_seconds=float(data.get("duration_seconds") or 0.0),
            size_bytes=int(data.get("size_bytes") or 0),
        )


@dataclass(slots=True)
class MediaItem:
    """Provider search result normalized to the pipeline shape."""

    id: str
    title: str
    description: str
    renditions: dict[str, Rendition] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
    source_url: str = ""
    hosted_url: str = ""

    def rendition(self, name: str) -> Rendition:
        """Return rendition ``name`` or an empty placeholder."""

        return self.renditions.get(name) or Rendition.empty()

    @property
    def is_hosted(self) -> bool:
        return bool(self.hosted_url)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "renditions": {name: r.to_dict() for name, r in self.renditions.items()},
            "created_at": self.created_at.isoformat(),
            "source_url": self.source_url,
            "hosted_url": self.hosted_url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MediaItem":
        renditions = {
            str(name): Rendition.from_dict(value)
            for name, value in (data.get("renditions") or {}).items()
            if isinstance(value, Mapping)
        }
        created_raw = data.get("created_at")
        created_at = datetime.fromisoformat(created_raw) if created_raw else _utcnow()
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            renditions=renditions,
            created_at=created_at,
            source_url=str(data.get("source_url") or ""),
            hosted_url=str(data.get("hosted_url") or ""),
        )


@dataclass(slots=True, frozen=True)
class ItemMetadataDigest:
    """Signals derived from a ``MediaItem`` for near-duplicate detection."""

    aspect_ratio: float
    duration: float
    token_set: frozenset[str]
    identity_key: str


@dataclass(slots=True)
class CachedResultSet:
    """Accepted items stored for a normalized query."""

    query: str
    items: list[MediaItem]
    expires_at: datetime

    def is_expired(self, *, now: datetime) -> bool:
        return now >= self.expires_at

    def satisfies(self, limit: int, *, now: datetime) -> bool:
        """A cached set only answers requests it holds enough items for."""

        return not self.is_expired(now=now) and len(self.items) >= limit

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "items": [item.to_dict() for item in self.items],
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CachedResultSet":
        return cls(
            query=str(data["query"]),
            items=[MediaItem.from_dict(item) for item in data.get("items") or []],
            expires_at=datetime.fromisoformat(data["expires_at"]),
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
