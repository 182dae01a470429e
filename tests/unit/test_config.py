from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.gifsearch.config import GifSearchConfig


def test_defaults_match_observed_rate_limit_settings(monkeypatch) -> None:
    monkeypatch.delenv("GIFSEARCH_GIPHY_API_KEY", raising=False)

    config = GifSearchConfig()

    assert config.giphy_api_key is None
    assert config.page_size == 50
    assert config.max_pages == 10
    assert config.content_rating == "g"
    assert config.upload_timeout_seconds == 2.5
    assert config.inter_item_delay_seconds == 0.4
    assert (config.backoff_base_seconds, config.backoff_cap_seconds) == (0.5, 1.5)
    assert config.max_consecutive_failures == 3
    assert (config.aspect_ratio_epsilon, config.token_overlap_threshold) == (0.1, 0.6)
    assert (config.batch_deadline_seconds, config.batch_stagger_seconds) == (30.0, 0.2)
    assert config.cache_ttl_seconds == 86400


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("GIFSEARCH_TOKEN_OVERLAP_THRESHOLD", "0.7")
    monkeypatch.setenv("GIFSEARCH_BATCH_STAGGER_SECONDS", "0.5")

    config = GifSearchConfig.build_default()

    assert config.token_overlap_threshold == 0.7
    assert config.batch_stagger_seconds == 0.5


def test_page_size_is_bounded_by_provider_limit() -> None:
    with pytest.raises(ValidationError):
        GifSearchConfig(page_size=51)
