from __future__ import annotations

from datetime import datetime, timezone

from src.gifsearch.domain.models import RENDITION_COMPACT, RENDITION_FULL, RENDITION_MP4
from src.gifsearch.media.normalizer import normalize_giphy_result
from tests.mocks.fakes import make_raw_result


def test_normalize_maps_renditions_and_metadata() -> None:
    raw = make_raw_result("abc123", title="Coffee Time", alt_text="a cup of coffee steaming")

    item = normalize_giphy_result(raw, "coffee")

    assert item.id == "abc123"
    assert item.title == "Coffee Time"
    assert item.description == "a cup of coffee steaming"
    assert item.source_url == "https://giphy.com/gifs/abc123"
    assert item.hosted_url == ""
    full = item.rendition(RENDITION_FULL)
    assert full.url.endswith("/abc123/giphy.gif")
    assert (full.width, full.height, full.size_bytes) == (480, 270, 123456)
    compact = item.rendition(RENDITION_COMPACT)
    assert compact.url.endswith("/abc123/200.gif")
    assert compact.height == 200
    assert item.rendition(RENDITION_MP4).size_bytes == 65432
    assert item.created_at == datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


def test_compact_falls_back_to_downsized() -> None:
    raw = make_raw_result("xyz", compact=False)
    raw["images"]["downsized"] = {"url": "https://media.giphy.com/media/xyz/downsized.gif", "width": "250", "height": "141"}

    item = normalize_giphy_result(raw, "coffee")

    assert item.rendition(RENDITION_COMPACT).url.endswith("downsized.gif")
    assert item.rendition(RENDITION_COMPACT).width == 250


def test_missing_renditions_degrade_to_empty() -> None:
    raw = {"id": "bare", "images": {"original": {"width": "oops"}, "fixed_height": None}}

    item = normalize_giphy_result(raw, "coffee")

    compact = item.rendition(RENDITION_COMPACT)
    assert compact.url == ""
    assert (compact.width, compact.height) == (0, 0)
    assert item.rendition(RENDITION_FULL).url == ""
    assert RENDITION_MP4 not in item.renditions


def test_description_falls_back_to_title_then_query() -> None:
    with_title = normalize_giphy_result({"id": "1", "title": "Sleepy cat"}, "cat")
    without_title = normalize_giphy_result({"id": "2", "images": "not-a-mapping"}, "cat")

    assert with_title.description == "Sleepy cat"
    assert without_title.description == "cat media"


def test_unparsable_import_datetime_uses_now() -> None:
    before = datetime.now(timezone.utc)
    item = normalize_giphy_result({"id": "1", "import_datetime": "0000-00-00 00:00:00"}, "cat")

    assert item.created_at >= before
