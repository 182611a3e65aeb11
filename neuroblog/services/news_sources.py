from __future__ import annotations

import hashlib
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol, Sequence

import feedparser
import httpx

from neuroblog.services.errors import SourceUnavailable
from neuroblog.services.response_parser import repair_text
from neuroblog.utils.constants import (
    ARTICLE_CATEGORY_KEYWORDS,
    FALLBACK_TOPICS,
    NEWS_KEYWORDS_BY_CATEGORY,
)

logger = logging.getLogger(__name__)

NEWS_API_URL = "https://newsapi.org/v2/everything"
USER_AGENT = "NeuroBlogBot/1.0 (topic discovery)"


@dataclass
class TopicItem:
    title: str
    description: str
    source: str
    url: str | None
    category: str
    unique_id: str
    published_at: str | None = None


def make_unique_id(*parts: str | None) -> str:
    raw = "|".join(p or "" for p in parts)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:12]


def categorize_article(text: str) -> str:
    lowered = f" {(text or '').lower()} "
    for category, keywords in ARTICLE_CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return "General"


def fallback_topics(rng: random.Random | None = None) -> list[TopicItem]:
    """One topic per predefined category, order randomized."""
    rng = rng or random.Random()
    items: list[TopicItem] = []
    for category, topics in FALLBACK_TOPICS.items():
        title, description, source = rng.choice(topics)
        items.append(
            TopicItem(
                title=title,
                description=description,
                source=source,
                url=None,
                category=category,
                unique_id=make_unique_id(title, category),
            )
        )
    rng.shuffle(items)
    return items


class NewsSource(Protocol):
    name: str

    async def fetch(self) -> list[TopicItem]:
        ...


class NewsApiSource:
    name = "newsapi"

    def __init__(self, api_key: str, timeout_s: float = 15.0, rng: random.Random | None = None):
        self.api_key = (api_key or "").strip()
        self.timeout_s = timeout_s
        self.rng = rng or random.Random()

    async def fetch(self) -> list[TopicItem]:
        if not self.api_key:
            raise SourceUnavailable("No NewsAPI key configured")

        category = self.rng.choice(list(NEWS_KEYWORDS_BY_CATEGORY))
        keyword = self.rng.choice(NEWS_KEYWORDS_BY_CATEGORY[category])
        since = datetime.now(timezone.utc) - timedelta(hours=8)
        logger.info("Searching NewsAPI: category=%s keyword=%s", category, keyword)

        params = {
            "q": keyword,
            "language": "en",
            "sortBy": "publishedAt",
            "from": since.isoformat(),
            "pageSize": 20,
            "apiKey": self.api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, headers={"User-Agent": USER_AGENT}) as client:
                r = await client.get(NEWS_API_URL, params=params)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SourceUnavailable(f"NewsAPI request failed: {e}") from e

        items: list[TopicItem] = []
        for article in data.get("articles") or []:
            title = (article.get("title") or "").strip()
            description = repair_text(article.get("description") or "")
            if not title or not description or "[Removed]" in title or len(title) <= 20:
                continue
            published = article.get("publishedAt")
            items.append(
                TopicItem(
                    title=title,
                    description=description[:300],
                    source=((article.get("source") or {}).get("name") or "NewsAPI").strip(),
                    url=article.get("url"),
                    category=category.capitalize(),
                    unique_id=make_unique_id(title, published),
                    published_at=published,
                )
            )
            if len(items) >= 10:
                break

        if not items:
            raise SourceUnavailable(f"NewsAPI returned no usable articles for '{keyword}'")
        return items


class RssFeedSource:
    name = "rss"

    def __init__(self, feeds: Sequence[str], timeout_s: float = 10.0, per_feed: int = 3):
        self.feeds = list(feeds)
        self.timeout_s = timeout_s
        self.per_feed = per_feed

    async def fetch(self) -> list[TopicItem]:
        if not self.feeds:
            raise SourceUnavailable("No RSS feeds configured")

        items: list[TopicItem] = []
        async with httpx.AsyncClient(
            timeout=self.timeout_s, follow_redirects=True, headers={"User-Agent": USER_AGENT}
        ) as client:
            for url in self.feeds:
                try:
                    r = await client.get(url)
                    r.raise_for_status()
                except httpx.HTTPError as e:
                    logger.warning("RSS feed %s failed: %s", url, e)
                    continue
                items.extend(self._parse_feed(r.content))

        if not items:
            raise SourceUnavailable("RSS feeds returned no entries")
        return items

    def _parse_feed(self, content: bytes) -> list[TopicItem]:
        feed = feedparser.parse(content)
        source = (feed.feed.get("title") or "RSS").strip() if getattr(feed, "feed", None) else "RSS"

        out: list[TopicItem] = []
        for entry in feed.entries:
            title = (entry.get("title") or "").strip()
            if not title:
                continue
            # feed summaries are often HTML
            description = repair_text(entry.get("summary") or "")[:300]
            published = entry.get("published") or entry.get("updated")
            out.append(
                TopicItem(
                    title=title,
                    description=description,
                    source=source,
                    url=entry.get("link"),
                    category=categorize_article(f"{title} {description}"),
                    unique_id=make_unique_id(title, published),
                    published_at=published,
                )
            )
            if len(out) >= self.per_feed:
                break
        return out


class NewsAggregator:
    """Queries sources in priority order; falls back to the static topic pool."""

    def __init__(self, sources: Sequence[NewsSource], rng: random.Random | None = None):
        self.sources = list(sources)
        self.rng = rng

    async def fetch_topics(self) -> list[TopicItem]:
        topics: list[TopicItem] = []
        for source in self.sources:
            try:
                found = await source.fetch()
            except SourceUnavailable as e:
                logger.info("News source %s unavailable: %s", source.name, e)
                continue
            logger.info("Fetched %d topics from %s", len(found), source.name)
            topics.extend(found)

        if not topics:
            logger.info("All news sources empty, using fallback topics")
            return fallback_topics(self.rng)
        return topics
