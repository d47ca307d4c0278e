"""Tests for post extraction"""
from conftest import FakeWebDriver, make_post_element, tweet, tweet_url

from hashtag_scraper.extractor import build_post, extract_posts

BASE_URL = "https://twitter.com"


class TestBuildPost:
    """Test suite for field validation"""

    def test_relative_links_are_absolutized(self):
        post = build_post("hi there", "/alice", "/alice/status/42", "2025-01-01T00:00:00.000Z", BASE_URL)

        assert post.author_profile_url == "https://twitter.com/alice"
        assert post.post_url == "https://twitter.com/alice/status/42"
        assert post.content == "hi there"

    def test_absolute_links_are_kept(self):
        post = build_post("hi", "https://x.com/alice", "https://x.com/alice/status/42",
                          "2025-01-01T00:00:00.000Z", BASE_URL)

        assert post.post_url == "https://x.com/alice/status/42"

    def test_content_is_stripped(self):
        post = build_post("  padded  ", "/a", "/a/status/1", "2025-01-01T00:00:00.000Z", BASE_URL)

        assert post.content == "padded"

    def test_missing_fields_yield_none(self):
        assert build_post(None, "/a", "/a/status/1", "2025", BASE_URL) is None
        assert build_post("   ", "/a", "/a/status/1", "2025", BASE_URL) is None
        assert build_post("x", None, "/a/status/1", "2025", BASE_URL) is None
        assert build_post("x", "/a", "", "2025", BASE_URL) is None
        assert build_post("x", "/a", "/a/status/1", None, BASE_URL) is None


class TestExtractPosts:
    """Test suite for page extraction"""

    def test_drops_candidate_missing_date(self):
        driver = FakeWebDriver(pages=[[tweet(1), make_post_element(date=None)]])

        posts = extract_posts(driver, BASE_URL)

        assert len(posts) == 1
        assert posts[0].post_url == tweet_url(1)

    def test_keeps_document_order(self):
        driver = FakeWebDriver(pages=[[tweet(3), tweet(1), tweet(2)]])

        posts = extract_posts(driver, BASE_URL)

        assert [p.post_url for p in posts] == [tweet_url(3), tweet_url(1), tweet_url(2)]

    def test_stale_container_is_skipped(self):
        driver = FakeWebDriver(pages=[[make_post_element(stale=True), tweet(7)]])

        posts = extract_posts(driver, BASE_URL)

        assert [p.post_url for p in posts] == [tweet_url(7)]

    def test_empty_page(self):
        assert extract_posts(FakeWebDriver(), BASE_URL) == []

    def test_wire_format(self):
        driver = FakeWebDriver(pages=[[tweet(5)]])

        post = extract_posts(driver, BASE_URL)[0]

        assert post.to_dict() == {
            "content": "post number 5",
            "profile": "https://twitter.com/user5",
            "url": tweet_url(5),
            "date": "2025-01-01T12:00:05.000Z",
        }
