from __future__ import annotations

import logging
import random
import re
from typing import Optional

from sqlalchemy.orm import Session

from neuroblog.models.suggestion import Suggestion
from neuroblog.services.ai_generator import GenerativeClient
from neuroblog.services.duplicates import DuplicateDetector
from neuroblog.services.errors import AIServiceUnavailable
from neuroblog.services.image_source import ImageResult, PexelsImageSource, fetch_relevant_images
from neuroblog.services.news_sources import NewsAggregator, TopicItem
from neuroblog.services.prompt_builder import build_generation_request
from neuroblog.services.response_parser import ParsedSuggestion, ResponseParser, repair_text
from neuroblog.services.suggestion_manager import SuggestionManager
from neuroblog.utils.dates import format_publish_date, utcnow

logger = logging.getLogger(__name__)


def format_blog_content(content: str, images: list[ImageResult], topic: str, news_url: Optional[str]) -> str:
    """Append the image and provenance sections shown under every generated post."""
    clean = re.sub(r"<[^>]*>", "", content or "")
    clean = re.sub(r"\n{3,}", "\n\n", clean).strip()

    parts = [clean, "", "## Featured Images", ""]
    if images:
        parts += [f"Image: {images[0].url}", f"Photo Credit: {images[0].credit}", ""]
    if len(images) > 1:
        parts += [f"Additional Image: {images[1].url}", ""]
    parts += [
        "## Additional Information",
        "",
        f"- **Original Source**: {news_url or 'Not available'}",
        f"- **Topic**: {topic}",
        f"- **Published**: {format_publish_date()}",
        "- **Reading Time**: 8-12 minutes",
        "",
        "*Stay updated with the latest insights!*",
        "",
        f"© {utcnow().year} NeuroBlog - All rights reserved.",
    ]
    return "\n".join(parts)


def fallback_suggestion(topic: TopicItem) -> ParsedSuggestion:
    """Minimal suggestion built from the raw topic when the AI call fails."""
    category = topic.category or "General"
    title = repair_text(topic.title)
    description = repair_text(topic.description)
    return ParsedSuggestion(
        title=title[:80],
        content=(
            f"# {title}\n\n{description}\n\n"
            f"This is a trending topic in {category.lower()} that deserves deeper analysis and discussion."
        ),
        summary=description or f"A trending {category.lower()} topic worth exploring.",
        tags=[category.lower(), "trends", "innovation"],
        category=category,
        publish_date=format_publish_date(),
        strategy="fallback",
    )


class SuggestionPipeline:
    """
    News topic -> prompt -> AI text -> parsed suggestion -> saved Suggestion.

    Batches run strictly one topic at a time, so duplicate checks for later
    topics see the suggestions saved earlier in the same batch.
    """

    def __init__(
        self,
        aggregator: NewsAggregator,
        generator: GenerativeClient,
        manager: SuggestionManager,
        parser: ResponseParser | None = None,
        detector: DuplicateDetector | None = None,
        image_source: PexelsImageSource | None = None,
        rng: random.Random | None = None,
        batch_size: int = 10,
        duplicate_window_hours: float = 2.0,
        auto_duplicate_window_hours: float = 3.0,
        auto_max_pending: int = 15,
        image_count: int = 2,
    ):
        self.aggregator = aggregator
        self.generator = generator
        self.manager = manager
        self.parser = parser or ResponseParser()
        self.detector = detector or DuplicateDetector()
        self.image_source = image_source
        self.rng = rng or random.Random()
        self.batch_size = batch_size
        self.duplicate_window_hours = duplicate_window_hours
        self.auto_duplicate_window_hours = auto_duplicate_window_hours
        self.auto_max_pending = auto_max_pending
        self.image_count = image_count

    async def generate_for_topic(
        self,
        db: Session,
        topic: TopicItem,
        window_hours: float,
        source_label: str,
        fallback_on_ai_error: bool = False,
    ) -> Optional[Suggestion]:
        """
        Returns the saved suggestion, or None when the topic was a duplicate.
        AIServiceUnavailable propagates unless `fallback_on_ai_error` is set.
        """
        if self.detector.is_duplicate(db, topic, window_hours):
            return None

        request = build_generation_request(topic, rng=self.rng)
        try:
            raw = await self.generator.generate(
                request.prompt,
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
        except AIServiceUnavailable as e:
            if not fallback_on_ai_error:
                raise
            logger.warning("AI generation failed for '%s', saving fallback: %s", topic.title, e)
            return self.manager.create(db, fallback_suggestion(topic), topic, source_label)

        parsed = self.parser.parse(raw)
        logger.info("Parsed AI response for '%s' via %s", topic.title, parsed.strategy)

        images = await fetch_relevant_images(self.image_source, topic.title, self.image_count)
        parsed.content = format_blog_content(parsed.content, images, topic.title, topic.url)

        if self.detector.title_exists(db, parsed.title):
            parsed.title = self.detector.disambiguate_title(parsed.title)
            logger.info("Made title unique: %s", parsed.title)

        return self.manager.create(db, parsed, topic, source_label)

    async def generate_batch(self, db: Session, limit: Optional[int] = None) -> list[Suggestion]:
        limit = limit or self.batch_size
        topics = await self.aggregator.fetch_topics()
        created: list[Suggestion] = []

        for topic in topics[:limit]:
            try:
                s = await self.generate_for_topic(
                    db,
                    topic,
                    window_hours=self.duplicate_window_hours,
                    source_label=f"{topic.source} - {topic.title}",
                    fallback_on_ai_error=True,
                )
            except Exception:
                db.rollback()
                logger.exception("Failed to generate suggestion for '%s'", topic.title)
                continue
            if s is None:
                logger.info("Skipping duplicate content: %s", topic.title)
                continue
            created.append(s)

        logger.info("Generated %d suggestions from %d topics", len(created), min(limit, len(topics)))
        return created

    async def run_scheduled_tick(self, db: Session) -> Optional[Suggestion]:
        pending = self.manager.count_pending(db)
        if pending >= self.auto_max_pending:
            logger.info("Too many pending suggestions (%d), skipping auto-generation", pending)
            return None

        topics = await self.aggregator.fetch_topics()
        if not topics:
            return None

        topic = topics[0]
        try:
            s = await self.generate_for_topic(
                db,
                topic,
                window_hours=self.auto_duplicate_window_hours,
                source_label=f"Auto: {topic.source}",
            )
        except AIServiceUnavailable as e:
            logger.warning("Auto-generation skipped, AI unavailable: %s", e)
            return None

        if s is None:
            logger.info("Auto-generation skipped: similar content exists for '%s'", topic.title)
        else:
            logger.info("Auto-generated suggestion: %s", s.title)
        return s
