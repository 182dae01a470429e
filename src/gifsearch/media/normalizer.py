"""Convert raw GIPHY search results into :class:`MediaItem` objects."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from ..domain.models import (
    RENDITION_COMPACT,
    RENDITION_FULL,
    RENDITION_MP4,
    MediaItem,
    Rendition,
)

# fixed_height (~200px tall) is preferred for the compact preview
_COMPACT_SOURCES = ("fixed_height", "downsized", "fixed_height_small")
_IMPORT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def normalize_giphy_result(raw: Mapping[str, Any], query: str) -> MediaItem:
    """Build a ``MediaItem`` from one GIPHY result, degrading instead of failing."""

    images = _as_mapping(raw.get("images"))
    original = _as_mapping(images.get("original"))

    compact_source: Mapping[str, Any] = {}
    for name in _COMPACT_SOURCES:
        candidate = _as_mapping(images.get(name))
        if candidate.get("url"):
            compact_source = candidate
            break

    renditions = {
        RENDITION_FULL: _to_rendition(original),
        RENDITION_COMPACT: _to_rendition(compact_source),
    }
    if original.get("mp4"):
        renditions[RENDITION_MP4] = Rendition(
            url=str(original["mp4"]),
            width=_parse_int(original.get("width")),
            height=_parse_int(original.get("height")),
            size_bytes=_parse_int(original.get("mp4_size")),
        )

    title = str(raw.get("title") or "")
    description = str(raw.get("alt_text") or "") or title or f"{query} media"

    return MediaItem(
        id=str(raw.get("id") or ""),
        title=title,
        description=description,
        renditions=renditions,
        created_at=_parse_import_datetime(raw.get("import_datetime")),
        source_url=str(raw.get("url") or ""),
    )


def _to_rendition(block: Mapping[str, Any]) -> Rendition:
    url = block.get("url")
    if not url:
        return Rendition.empty()
    return Rendition(
        url=str(url),
        width=_parse_int(block.get("width")),
        height=_parse_int(block.get("height")),
        size_bytes=_parse_int(block.get("size")),
    )


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _parse_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parse_import_datetime(value: Any) -> datetime:
    if not isinstance(value, str) or not value:
        return datetime.now(timezone.utc)
    # legacy uploads report "0000-00-00 00:00:00", which both parsers reject
    try:
        parsed = datetime.strptime(value, _IMPORT_DATETIME_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = ["normalize_giphy_result"]
