from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass

import httpx

from neuroblog.services.errors import SourceUnavailable

logger = logging.getLogger(__name__)

PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"

# first keyword hit wins
IMAGE_THEMES = (
    (("ai", "artificial"), "artificial-intelligence"),
    (("crypto", "blockchain"), "cryptocurrency"),
    (("mobile", "app"), "mobile-technology"),
    (("cloud", "server"), "cloud-computing"),
    (("cyber", "security"), "cybersecurity"),
    (("health", "medical"), "healthcare"),
    (("business", "finance"), "business"),
    (("education", "learning"), "education"),
    (("environment", "climate"), "nature"),
    (("entertainment", "gaming"), "entertainment"),
    (("travel", "lifestyle"), "lifestyle"),
    (("science", "research"), "science"),
)


@dataclass
class ImageResult:
    url: str
    alt: str
    credit: str
    credit_url: str = "#"


def image_theme(topic: str) -> str:
    words = set(re.findall(r"[a-z]+", (topic or "").lower()))
    text = (topic or "").lower()
    for keys, theme in IMAGE_THEMES:
        # short keys match whole words only ("ai" must not hit "said")
        if any((k in words) if len(k) <= 3 else (k in text) for k in keys):
            return theme
    return "business"


def placeholder_images(topic: str, count: int = 3) -> list[ImageResult]:
    """Same topic always yields the same URLs."""
    theme = image_theme(topic)
    seed = int(hashlib.sha256((topic or "").encode("utf-8")).hexdigest()[:8], 16)
    templates = (
        "https://picsum.photos/seed/{seed}/800/400",
        "https://loremflickr.com/800/400/{theme}?lock={seed}",
    )
    return [
        ImageResult(
            url=templates[i % len(templates)].format(seed=seed + i, theme=theme),
            alt=f"{topic} - Professional {theme} Image",
            credit="Free Stock Photos",
        )
        for i in range(count)
    ]


class PexelsImageSource:
    def __init__(self, api_key: str, timeout_s: float = 8.0):
        self.api_key = (api_key or "").strip()
        self.timeout_s = timeout_s

    async def search(self, topic: str, count: int = 3) -> list[ImageResult]:
        if not self.api_key:
            raise SourceUnavailable("No Pexels API key configured")

        query = re.sub(r"[^a-zA-Z0-9\s]", "", topic or "").strip()
        params = {"query": query, "per_page": count, "orientation": "landscape"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                r = await client.get(PEXELS_SEARCH_URL, params=params, headers={"Authorization": self.api_key})
                r.raise_for_status()
                photos = r.json().get("photos") or []
        except (httpx.HTTPError, ValueError) as e:
            raise SourceUnavailable(f"Pexels request failed: {e}") from e

        out = []
        for p in photos[:count]:
            src = (p.get("src") or {}).get("large")
            if not src:
                continue
            out.append(
                ImageResult(
                    url=src,
                    alt=f"{topic} - Professional Image",
                    credit=p.get("photographer") or "Pexels",
                    credit_url=p.get("photographer_url") or "#",
                )
            )
        if not out:
            raise SourceUnavailable(f"Pexels returned no images for '{query}'")
        return out


async def fetch_relevant_images(source: PexelsImageSource | None, topic: str, count: int = 3) -> list[ImageResult]:
    if source is not None:
        try:
            images = await source.search(topic, count)
            logger.info("Fetched %d images from Pexels", len(images))
            return images
        except SourceUnavailable as e:
            logger.info("Image search unavailable, using placeholders: %s", e)
    return placeholder_images(topic, count)
