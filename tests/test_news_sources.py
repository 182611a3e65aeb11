"""Tests for news topic discovery."""

import asyncio
import random
from unittest.mock import patch

import httpx
import pytest

from neuroblog.services.errors import SourceUnavailable
from neuroblog.services.news_sources import (
    NewsAggregator,
    NewsApiSource,
    RssFeedSource,
    TopicItem,
    categorize_article,
    fallback_topics,
    make_unique_id,
)
from neuroblog.utils.constants import FALLBACK_TOPICS

RSS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Tech Wire</title>
    <item>
      <title>New AI model tops benchmark</title>
      <link>https://example.com/a</link>
      <description>Researchers released a new model.</description>
      <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Central bank holds rates</title>
      <link>https://example.com/b</link>
      <description>The economy shows mixed signals.</description>
    </item>
    <item>
      <title></title>
      <link>https://example.com/c</link>
    </item>
  </channel>
</rss>
"""


def _mock_async_client(handler):
    real = httpx.AsyncClient

    def factory(*args, **kwargs):
        return real(*args, transport=httpx.MockTransport(handler), **kwargs)

    return patch("neuroblog.services.news_sources.httpx.AsyncClient", side_effect=factory)


class _StaticSource:
    def __init__(self, name, items=None, error=None):
        self.name = name
        self.items = items or []
        self.error = error

    async def fetch(self):
        if self.error:
            raise self.error
        return list(self.items)


class TestHelpers:
    def test_unique_id_is_deterministic_12_hex(self):
        a = make_unique_id("Title", "2024-01-01")
        b = make_unique_id("Title", "2024-01-01")
        assert a == b
        assert len(a) == 12
        assert all(c in "0123456789abcdef" for c in a)

    def test_unique_id_changes_with_input(self):
        assert make_unique_id("Title", "x") != make_unique_id("Title", "y")

    def test_categorize_article(self):
        assert categorize_article("New AI model tops benchmark") == "Technology"
        assert categorize_article("The economy shows mixed signals") == "Business"
        assert categorize_article("Nothing to see") == "General"

    def test_categorize_does_not_match_ai_inside_words(self):
        assert categorize_article("Said the captain") == "General"


class TestFallbackTopics:
    def test_one_topic_per_category(self):
        topics = fallback_topics(random.Random(1))
        assert len(topics) == len(FALLBACK_TOPICS)
        assert sorted(t.category for t in topics) == sorted(FALLBACK_TOPICS)

    def test_topics_come_from_the_static_pool(self):
        for t in fallback_topics(random.Random(7)):
            pool = {title for title, _, _ in FALLBACK_TOPICS[t.category]}
            assert t.title in pool
            assert t.unique_id == make_unique_id(t.title, t.category)


class TestNewsAggregator:
    def test_falls_back_when_every_source_fails(self):
        agg = NewsAggregator(
            [_StaticSource("a", error=SourceUnavailable("down")), _StaticSource("b", error=SourceUnavailable("empty"))],
            rng=random.Random(3),
        )
        topics = asyncio.run(agg.fetch_topics())
        assert len(topics) == len(FALLBACK_TOPICS)

    def test_failed_source_does_not_stop_the_next(self):
        item = TopicItem("Some long enough headline", "desc", "Wire", None, "Technology", "abc")
        agg = NewsAggregator([_StaticSource("a", error=SourceUnavailable("down")), _StaticSource("b", [item])])
        assert asyncio.run(agg.fetch_topics()) == [item]

    def test_results_keep_source_priority_order(self):
        first = TopicItem("First source headline here", "d", "A", None, "Technology", "1")
        second = TopicItem("Second source headline here", "d", "B", None, "Business", "2")
        agg = NewsAggregator([_StaticSource("a", [first]), _StaticSource("b", [second])])
        assert asyncio.run(agg.fetch_topics()) == [first, second]


class TestNewsApiSource:
    def test_missing_key_is_unavailable(self):
        with pytest.raises(SourceUnavailable):
            asyncio.run(NewsApiSource("").fetch())

    def test_filters_articles(self):
        payload = {
            "articles": [
                {"title": "A perfectly reasonable headline", "description": "desc", "source": {"name": "Wire"},
                 "url": "https://e.com/1", "publishedAt": "2024-01-01T00:00:00Z"},
                {"title": "[Removed]", "description": "desc"},
                {"title": "Too short", "description": "desc"},
                {"title": "Headline without any description", "description": None},
            ]
        }

        def handler(request):
            assert request.url.params["apiKey"] == "key"
            return httpx.Response(200, json=payload)

        with _mock_async_client(handler):
            items = asyncio.run(NewsApiSource("key", rng=random.Random(0)).fetch())

        assert [i.title for i in items] == ["A perfectly reasonable headline"]
        assert items[0].source == "Wire"
        assert items[0].unique_id == make_unique_id("A perfectly reasonable headline", "2024-01-01T00:00:00Z")

    def test_http_error_is_unavailable(self):
        with _mock_async_client(lambda request: httpx.Response(500)):
            with pytest.raises(SourceUnavailable):
                asyncio.run(NewsApiSource("key").fetch())


class TestRssFeedSource:
    def test_parses_entries(self):
        with _mock_async_client(lambda request: httpx.Response(200, content=RSS_XML)):
            items = asyncio.run(RssFeedSource(["https://feed.example/rss"]).fetch())

        assert [i.title for i in items] == ["New AI model tops benchmark", "Central bank holds rates"]
        assert items[0].source == "Example Tech Wire"
        assert items[0].category == "Technology"
        assert items[1].category == "Business"
        assert items[0].url == "https://example.com/a"

    def test_failing_feeds_are_unavailable(self):
        with _mock_async_client(lambda request: httpx.Response(404)):
            with pytest.raises(SourceUnavailable):
                asyncio.run(RssFeedSource(["https://feed.example/rss"]).fetch())

    def test_no_feeds_configured(self):
        with pytest.raises(SourceUnavailable):
            asyncio.run(RssFeedSource([]).fetch())
