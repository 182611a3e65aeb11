from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from fastapi import Request
from sqlalchemy.orm import Session

from neuroblog.config import Settings
from neuroblog.services.ai_generator import GenerativeClient
from neuroblog.services.image_source import PexelsImageSource
from neuroblog.services.news_sources import NewsAggregator, NewsApiSource, RssFeedSource
from neuroblog.services.pipeline import SuggestionPipeline
from neuroblog.services.scheduler import SchedulerHandle
from neuroblog.services.suggestion_manager import SuggestionManager

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    session_factory: Callable[[], Session]
    manager: SuggestionManager
    pipeline: SuggestionPipeline
    scheduler: SchedulerHandle

    async def scheduled_tick(self) -> None:
        # fresh session per tick, like any background job
        db = self.session_factory()
        try:
            await self.pipeline.run_scheduled_tick(db)
        finally:
            db.close()


def build_container(
    settings: Settings,
    session_factory: Callable[[], Session],
    generator: GenerativeClient | None = None,
    aggregator: NewsAggregator | None = None,
) -> ServiceContainer:
    manager = SuggestionManager(settings.system_principal)
    aggregator = aggregator or NewsAggregator(
        [NewsApiSource(settings.news_api_key), RssFeedSource(settings.rss_feeds)]
    )
    generator = generator or GenerativeClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_s=settings.ai_timeout_seconds,
        max_attempts=settings.ai_max_attempts,
    )
    pipeline = SuggestionPipeline(
        aggregator=aggregator,
        generator=generator,
        manager=manager,
        image_source=PexelsImageSource(settings.pexels_api_key) if settings.pexels_api_key else None,
        batch_size=settings.batch_size,
        duplicate_window_hours=settings.duplicate_window_hours,
        auto_duplicate_window_hours=settings.auto_duplicate_window_hours,
        auto_max_pending=settings.auto_max_pending,
    )

    container = ServiceContainer(
        settings=settings,
        session_factory=session_factory,
        manager=manager,
        pipeline=pipeline,
        scheduler=None,  # type: ignore[arg-type]
    )
    container.scheduler = SchedulerHandle(settings.auto_generation_interval_seconds, container.scheduled_tick)
    return container


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container
