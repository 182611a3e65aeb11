from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RSS_FEEDS = (
    "https://feeds.feedburner.com/TechCrunch",
    "https://www.wired.com/feed/rss",
    "https://feeds.bbci.co.uk/news/business/rss.xml",
    "https://feeds.feedburner.com/venturebeat/SZYF",
    "https://feeds.feedburner.com/oreilly/radar",
)


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    return tuple(x.strip() for x in raw.split(",") if x.strip())


@dataclass(frozen=True)
class SystemPrincipal:
    """The non-human admin used for automated publishing."""

    username: str = "admin"
    email: str = "admin@neuroblog.com"
    password: str = "admin123"


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    database_url: str = "sqlite:///./neuroblog.db"

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    ai_timeout_seconds: float = 30.0
    ai_max_attempts: int = 3

    news_api_key: str = ""
    rss_feeds: tuple[str, ...] = DEFAULT_RSS_FEEDS
    pexels_api_key: str = ""

    auto_generation_enabled: bool = True
    auto_generation_interval_seconds: float = 300.0
    auto_max_pending: int = 15
    manual_max_pending: int = 8
    batch_size: int = 10
    duplicate_window_hours: float = 2.0
    auto_duplicate_window_hours: float = 3.0

    system_principal: SystemPrincipal = field(default_factory=SystemPrincipal)
    session_days: int = 7
    cors_origins: tuple[str, ...] = ("http://localhost:3000", "http://127.0.0.1:3000")

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            env=_env_str("ENV", "development"),
            database_url=_env_str("DATABASE_URL", "sqlite:///./neuroblog.db"),
            openai_api_key=_env_str("OPENAI_API_KEY"),
            openai_model=_env_str("OPENAI_MODEL", "gpt-4o-mini"),
            ai_timeout_seconds=_env_float("AI_TIMEOUT_SECONDS", 30.0),
            ai_max_attempts=_env_int("AI_MAX_ATTEMPTS", 3),
            news_api_key=_env_str("NEWS_API_KEY"),
            rss_feeds=_env_list("NEWS_RSS_FEEDS", DEFAULT_RSS_FEEDS),
            pexels_api_key=_env_str("PEXELS_API_KEY"),
            auto_generation_enabled=_env_bool("AUTO_GENERATION_ENABLED", True),
            auto_generation_interval_seconds=_env_float("AUTO_GENERATION_INTERVAL_SECONDS", 300.0),
            auto_max_pending=_env_int("AUTO_MAX_PENDING", 15),
            manual_max_pending=_env_int("MANUAL_MAX_PENDING", 8),
            batch_size=_env_int("BATCH_SIZE", 10),
            duplicate_window_hours=_env_float("DUPLICATE_WINDOW_HOURS", 2.0),
            auto_duplicate_window_hours=_env_float("AUTO_DUPLICATE_WINDOW_HOURS", 3.0),
            system_principal=SystemPrincipal(
                username=_env_str("ADMIN_USERNAME", "admin"),
                email=_env_str("ADMIN_EMAIL", "admin@neuroblog.com"),
                password=_env_str("ADMIN_PASSWORD", "admin123"),
            ),
            session_days=_env_int("SESSION_DAYS", 7),
            cors_origins=_env_list("CORS_ORIGINS", ("http://localhost:3000", "http://127.0.0.1:3000")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
