"""Tests for URL → article lookup and republish links."""

from datetime import UTC, datetime
from pathlib import Path

import pytest
from republish.content.models import ContentItem
from republish.content.store import ContentStore
from republish.content.urls import bare_host, parse_item_id, republish_url, url_to_item_id

SITE = "https://x.test"


@pytest.fixture
def store(tmp_path: Path) -> ContentStore:
    store = ContentStore(tmp_path)
    store.upsert(
        ContentItem(
            id=11,
            slug="hello-world",
            title="Hello",
            published_at=datetime(2024, 1, 15, 12, 0, tzinfo=UTC),
            canonical_url="https://x.test/2024/01/hello-world/",
        )
    )
    return store


class TestUrlToItemId:
    @pytest.mark.parametrize(
        "url",
        [
            "https://x.test/2024/01/hello-world/",
            "https:/x.test/2024/01/hello-world/",
            "x.test/2024/01/hello-world",
            "https://www.x.test/2024/01/hello-world/",
            "/2024/01/hello-world/",
            "2024/01/hello-world",
            "hello-world",
            "?p=11",
            "https://x.test/?p=11",
        ],
    )
    def test_resolves(self, store: ContentStore, url: str):
        assert url_to_item_id(url, store, SITE) == 11

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "   ",
            "https://other.test/2024/01/hello-world/",
            "no-such-post",
            "?p=999",
            "?p=\u00b2",
            "?page_id=\u0661",
            "https://x.test/",
            "http://[::1",
            "%%%",
        ],
    )
    def test_does_not_resolve(self, store: ContentStore, url: str):
        assert url_to_item_id(url, store, SITE) is None

    def test_site_in_subdirectory(self, tmp_path: Path):
        store = ContentStore(tmp_path)
        store.upsert(
            ContentItem(
                id=3,
                slug="story",
                title="Story",
                published_at=datetime(2024, 1, 15, tzinfo=UTC),
                canonical_url="https://x.test/news/2024/story/",
            )
        )
        assert url_to_item_id("2024/story", store, "https://x.test/news") == 3


class TestRepublishUrl:
    def test_uses_permalink_path(self, store: ContentStore):
        item = store.get(11)
        assert republish_url(item, "https://x.test/", "republish") == (
            "https://x.test/republish/2024/01/hello-world/"
        )

    def test_falls_back_to_id_query(self, store: ContentStore):
        item = store.get(11).model_copy(update={"canonical_url": "https://x.test/"})
        assert republish_url(item, SITE, "/share/") == "https://x.test/share/?p=11"


class TestParseItemId:
    @pytest.mark.parametrize(("value", "expected"), [("11", 11), (" 7 ", 7), ("007", 7)])
    def test_ascii_digits(self, value: str, expected: int):
        assert parse_item_id(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "-1", "1.5", "²", "١"])
    def test_rejects_non_ascii_or_non_digits(self, value: str):
        assert parse_item_id(value) is None


class TestBareHost:
    def test_strips_www_and_credentials(self):
        assert bare_host("user:pw@WWW.X.test") == "x.test"

    def test_keeps_port(self):
        assert bare_host("x.test:8000") == "x.test:8000"
