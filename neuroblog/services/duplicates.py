from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from neuroblog.models.post import Post
from neuroblog.models.suggestion import Suggestion
from neuroblog.services.news_sources import TopicItem
from neuroblog.services.similarity import KeywordSimilarityMatcher, SimilarityMatcher, escape_like
from neuroblog.utils.constants import TITLE_SUFFIXES
from neuroblog.utils.dates import utcnow

logger = logging.getLogger(__name__)


class DuplicateDetector:
    def __init__(self, matcher: SimilarityMatcher | None = None, rng: random.Random | None = None):
        self.matcher = matcher or KeywordSimilarityMatcher()
        self.rng = rng or random.Random()

    # --- before the AI call -------------------------------------------------

    def find_topic_duplicate(self, db: Session, topic: TopicItem, window_hours: float) -> Optional[str]:
        """
        Returns a short description of the first existing record that makes
        `topic` a duplicate, or None.
        """
        now = utcnow()
        keywords = self.matcher.keywords(topic.title)

        source = (topic.source or "").strip()
        source_like = f"%{escape_like(source)}%"

        since = now - timedelta(hours=window_hours)
        conds = []
        title_filter = self.matcher.prefilter(Suggestion.title, keywords)
        if title_filter is not None:
            conds.append(title_filter)
        if topic.unique_id:
            conds.append(Suggestion.unique_id == topic.unique_id)
        if source:
            conds.append(Suggestion.source.ilike(source_like, escape="\\"))
        if conds:
            rows = (
                db.query(Suggestion)
                .filter(Suggestion.generated_at >= since, or_(*conds))
                .order_by(Suggestion.generated_at.desc())
                .all()
            )
            for s in rows:
                if (topic.unique_id and s.unique_id == topic.unique_id) or self.matcher.is_similar(keywords, s.title):
                    return f"suggestion '{s.title}'"
                if source and source.lower() in (s.source or "").lower():
                    return f"suggestion from source '{source}'"

        post_since = now - timedelta(hours=window_hours * 2)
        conds = []
        title_filter = self.matcher.prefilter(Post.title, keywords)
        if title_filter is not None:
            conds.append(title_filter)
        if source:
            conds.append(Post.news_source.ilike(source_like, escape="\\"))
        if conds:
            rows = (
                db.query(Post)
                .filter(Post.created_at >= post_since, or_(*conds))
                .order_by(Post.created_at.desc())
                .all()
            )
            for p in rows:
                if self.matcher.is_similar(keywords, p.title):
                    return f"post '{p.title}'"
                if source and source.lower() in (p.news_source or "").lower():
                    return f"post from source '{source}'"

        return None

    def is_duplicate(self, db: Session, topic: TopicItem, window_hours: float) -> bool:
        hit = self.find_topic_duplicate(db, topic, window_hours)
        if hit:
            logger.info("Duplicate topic '%s' (matches %s)", topic.title, hit)
        return hit is not None

    # --- after the AI call --------------------------------------------------

    def title_exists(self, db: Session, title: str) -> bool:
        """Exact title or same first-three-words, over all history."""
        if not title:
            return False
        prefix = self.matcher.keywords(title, prefix=True)

        for model in (Suggestion, Post):
            if db.query(model.id).filter(model.title == title).first() is not None:
                return True
            title_filter = self.matcher.prefilter(model.title, prefix)
            if title_filter is None:
                continue
            for (existing,) in db.query(model.title).filter(title_filter).all():
                if self.matcher.is_similar(prefix, existing):
                    return True
        return False

    def disambiguate_title(self, title: str, now: datetime | None = None) -> str:
        now = now or utcnow()
        suffix = self.rng.choice(TITLE_SUFFIXES)
        return f"{title[:55]} - {suffix} {now:%H%M}"
