"""Metadata normalization and near-duplicate detection."""

from .normalizer import normalize_giphy_result
from .similarity import SimilarityDetector, build_digest

__all__ = ["SimilarityDetector", "build_digest", "normalize_giphy_result"]
