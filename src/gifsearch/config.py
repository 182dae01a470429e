"""Runtime configuration for the GIF acquisition pipeline.

Defaults are the values observed to keep the provider and the media host
below their rate limits. They are tunable through ``GIFSEARCH_*`` environment
variables rather than fixed, since none of them were derived analytically.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GifSearchConfig(BaseSettings):
    """Pydantic settings container for provider, host, cache and pacing knobs."""

    model_config = SettingsConfigDict(env_prefix="GIFSEARCH_")

    giphy_api_key: str | None = Field(
        default=None,
        description="GIPHY API key; searches return nothing while it is unset.",
    )
    giphy_api_url: str = Field(
        default="https://api.giphy.com/v1/gifs/search",
        description="GIPHY search endpoint.",
    )
    content_rating: str = Field(
        default="g",
        min_length=1,
        description="Content-safety rating sent with every search request.",
    )
    provider_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout for a single provider page request.",
    )
    page_size: int = Field(
        default=50,
        ge=1,
        le=50,
        description="Raw results requested per provider page.",
    )
    max_pages: int = Field(
        default=10,
        ge=1,
        description="Upper bound on provider pages fetched per query run.",
    )

    media_host_url: str | None = Field(
        default=None,
        description="Upload endpoint of the first-party media host.",
    )
    media_host_token: str | None = Field(
        default=None,
        description="Bearer token for the media host upload endpoint.",
    )
    media_type: str = Field(
        default="gif",
        description="Media type declared to the media host on upload.",
    )
    first_party_url_pattern: str = Field(
        default=r"^https://i\.redd\.it/",
        description="Regular expression a hosted URL must match to be trusted.",
    )
    upload_timeout_seconds: float = Field(
        default=2.5,
        gt=0,
        description="Budget for a single upload call before it counts as failed.",
    )

    inter_item_delay_seconds: float = Field(
        default=0.4,
        ge=0,
        description="Pause after each accepted item while more items are needed.",
    )
    backoff_base_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Backoff step multiplied by the consecutive failure count.",
    )
    backoff_cap_seconds: float = Field(
        default=1.5,
        ge=0,
        description="Upper bound on a single backoff sleep.",
    )
    max_consecutive_failures: int = Field(
        default=3,
        ge=1,
        description="Consecutive upload failures that abort a query run.",
    )

    aspect_ratio_epsilon: float = Field(
        default=0.1,
        ge=0,
        description="Aspect ratio difference below which two items may be duplicates.",
    )
    token_overlap_threshold: float = Field(
        default=0.6,
        ge=0,
        le=1,
        description="Token overlap ratio above which two items may be duplicates.",
    )

    batch_deadline_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Overall deadline for one batch search call.",
    )
    batch_stagger_seconds: float = Field(
        default=0.2,
        ge=0,
        description="Start offset between consecutive uncached pipelines in a batch.",
    )

    cache_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        ge=1,
        description="Lifetime of cached result sets and hosted items.",
    )
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the persistent cache; in-memory when unset.",
    )

    @classmethod
    def build_default(cls) -> "GifSearchConfig":
        """Construct configuration from the environment."""

        return cls()


__all__ = ["GifSearchConfig"]
