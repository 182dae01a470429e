"""Re-hosting of provider media on the first-party content host."""

from .media_host import HttpMediaHost, MediaHost, MediaHostUpload
from .uploader import RehostUploader, is_first_party_url

__all__ = [
    "HttpMediaHost",
    "MediaHost",
    "MediaHostUpload",
    "RehostUploader",
    "is_first_party_url",
]
