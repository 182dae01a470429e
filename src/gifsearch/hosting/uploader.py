"""Re-host a compact rendition on first-party infrastructure."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field

from ..exceptions import UploadError, UploadRejectedError, UploadTimeoutError
from .media_host import MediaHost

logger = logging.getLogger(__name__)

DEFAULT_FIRST_PARTY_PATTERN = r"^https://i\.redd\.it/"


def is_first_party_url(url: str | None, pattern: str | re.Pattern[str] = DEFAULT_FIRST_PARTY_PATTERN) -> bool:
    if not url or not url.strip():
        return False
    compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
    return compiled.search(url) is not None


@dataclass(slots=True)
class RehostUploader:
    """Single-attempt upload raced against a timeout.

    Retries belong to the caller. A successful upload is trusted as is; the
    hosted URL is not fetched again, because verification requests count
    against the same rate limit the pipeline is trying to stay under.
    """

    host: MediaHost
    first_party_pattern: str = DEFAULT_FIRST_PARTY_PATTERN
    timeout_seconds: float = 2.5
    media_type: str = "gif"
    log: logging.Logger = field(default_factory=lambda: logger)
    _pattern: re.Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._pattern = re.compile(self.first_party_pattern)

    def is_first_party(self, url: str | None) -> bool:
        return is_first_party_url(url, self._pattern)

    async def upload(self, source_url: str) -> str:
        """Return the first-party URL for ``source_url`` or raise ``UploadError``."""

        if not source_url:
            raise UploadRejectedError("No compact rendition to upload")

        try:
            result = await asyncio.wait_for(
                self.host.upload(source_url, self.media_type),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            self.log.info(
                "rehost.upload.timeout",
                extra={"source_url": source_url, "timeout_seconds": self.timeout_seconds},
            )
            raise UploadTimeoutError(
                f"Upload timed out after {self.timeout_seconds:.1f}s"
            ) from exc
        except UploadError:
            raise
        except Exception as exc:
            raise UploadError(f"Media host failed: {exc}") from exc

        # some hosts echo the third-party URL back on soft failure
        if not self.is_first_party(result.media_url):
            self.log.info(
                "rehost.upload.not_first_party",
                extra={"source_url": source_url, "media_url": result.media_url},
            )
            raise UploadRejectedError("Upload did not land on the first-party host")
        return result.media_url


__all__ = ["DEFAULT_FIRST_PARTY_PATTERN", "RehostUploader", "is_first_party_url"]
