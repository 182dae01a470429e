from __future__ import annotations

import pytest

from src.gifsearch.exceptions import UploadError, UploadRejectedError, UploadTimeoutError
from src.gifsearch.hosting.uploader import RehostUploader, is_first_party_url
from tests.mocks.fakes import FakeMediaHost

SOURCE = "https://media.giphy.com/media/abc/200.gif"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://i.redd.it/abc.gif", True),
        ("https://media.giphy.com/media/abc/200.gif", False),
        ("http://i.redd.it/abc.gif", False),
        ("", False),
        (None, False),
    ],
)
def test_is_first_party_url(url, expected) -> None:
    assert is_first_party_url(url) is expected


@pytest.mark.asyncio
async def test_upload_returns_first_party_url() -> None:
    host = FakeMediaHost()
    uploader = RehostUploader(host=host)

    hosted = await uploader.upload(SOURCE)

    assert hosted == "https://i.redd.it/abc.gif"
    assert host.uploads == [SOURCE]


@pytest.mark.asyncio
async def test_upload_rejects_third_party_echo() -> None:
    uploader = RehostUploader(host=FakeMediaHost(echo_source=True))

    with pytest.raises(UploadRejectedError):
        await uploader.upload(SOURCE)


@pytest.mark.asyncio
async def test_upload_times_out_without_retry() -> None:
    host = FakeMediaHost(delay_seconds=0.5)
    uploader = RehostUploader(host=host, timeout_seconds=0.01)

    with pytest.raises(UploadTimeoutError):
        await uploader.upload(SOURCE)

    assert host.uploads == [SOURCE]


@pytest.mark.asyncio
async def test_upload_propagates_host_failure() -> None:
    uploader = RehostUploader(host=FakeMediaHost(fail=True))

    with pytest.raises(UploadError):
        await uploader.upload(SOURCE)


@pytest.mark.asyncio
async def test_upload_without_source_is_rejected_before_calling_host() -> None:
    host = FakeMediaHost()
    uploader = RehostUploader(host=host)

    with pytest.raises(UploadRejectedError):
        await uploader.upload("")

    assert host.uploads == []


@pytest.mark.asyncio
async def test_custom_first_party_pattern() -> None:
    uploader = RehostUploader(host=FakeMediaHost(echo_source=True), first_party_pattern=r"^https://media\.giphy\.com/")

    assert await uploader.upload(SOURCE) == SOURCE
