"""Near-duplicate detection over heterogeneous provider metadata.

Providers return the same clip at several resolutions and crops under
different ids. Aspect ratio catches re-encodes, caption token overlap catches
re-tagged reposts; neither is reliable alone, so a candidate is only a
duplicate when both agree (or when its identity key was already accepted).
Missed duplicates are acceptable, dropping a unique item is not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from ..domain.models import (
    RENDITION_COMPACT,
    RENDITION_FULL,
    ItemMetadataDigest,
    MediaItem,
)

STOP_WORDS = frozenset(
    {"gif", "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "with", "from"}
)
_MEDIA_SEGMENT = re.compile(r"/media/([^/]+)/")


def tokenize(text: str) -> frozenset[str]:
    """Lower-case whitespace tokens longer than two chars, minus stop words."""

    return frozenset(
        word
        for word in text.lower().split()
        if len(word) > 2 and word not in STOP_WORDS
    )


def identity_key(item: MediaItem) -> str:
    if item.id:
        return item.id
    url = item.rendition(RENDITION_COMPACT).url or item.rendition(RENDITION_FULL).url
    match = _MEDIA_SEGMENT.search(url)
    return match.group(1) if match else url


def build_digest(item: MediaItem) -> ItemMetadataDigest:
    full = item.rendition(RENDITION_FULL)
    chosen = full if full.url else item.rendition(RENDITION_COMPACT)
    aspect_ratio = chosen.width / chosen.height if chosen.width > 0 and chosen.height > 0 else 0.0
    return ItemMetadataDigest(
        aspect_ratio=aspect_ratio,
        duration=round(chosen.duration_seconds, 1),
        token_set=tokenize(item.description or item.title),
        identity_key=identity_key(item),
    )


def token_overlap(first: frozenset[str], second: frozenset[str]) -> float:
    """Return ``|A & B| / max(|A|, |B|)``; empty sets never overlap."""

    total = max(len(first), len(second))
    if total == 0:
        return 0.0
    return len(first & second) / total


@dataclass(slots=True, frozen=True)
class SimilarityDetector:
    """Decide whether a candidate duplicates an already accepted item."""

    aspect_ratio_epsilon: float = 0.1
    token_overlap_threshold: float = 0.6

    def is_duplicate(self, candidate: MediaItem, accepted: Iterable[MediaItem]) -> bool:
        return self.is_duplicate_digest(
            build_digest(candidate), [build_digest(item) for item in accepted]
        )

    def is_duplicate_digest(
        self,
        candidate: ItemMetadataDigest,
        accepted: Iterable[ItemMetadataDigest],
    ) -> bool:
        accepted = list(accepted)
        if any(existing.identity_key == candidate.identity_key for existing in accepted):
            return True
        return any(self._looks_alike(candidate, existing) for existing in accepted)

    def _looks_alike(self, first: ItemMetadataDigest, second: ItemMetadataDigest) -> bool:
        # unknown dimensions cannot vouch for a match
        if first.aspect_ratio <= 0 or second.aspect_ratio <= 0:
            return False
        if abs(first.aspect_ratio - second.aspect_ratio) >= self.aspect_ratio_epsilon:
            return False
        return token_overlap(first.token_set, second.token_set) > self.token_overlap_threshold


__all__ = [
    "STOP_WORDS",
    "SimilarityDetector",
    "build_digest",
    "identity_key",
    "token_overlap",
    "tokenize",
]
