from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from typing import Any

from neuroblog.services.news_sources import TopicItem
from neuroblog.utils.constants import ANGLES
from neuroblog.utils.dates import format_publish_date, utcnow


@dataclass
class GenerationRequest:
    topic: TopicItem
    angle: str
    target_words: int
    prompt: str
    output_schema: dict[str, Any] = field(default_factory=dict)
    temperature: float = 0.7
    max_tokens: int = 4096


def _output_schema(topic: TopicItem, publish_date: str, year: int) -> dict[str, Any]:
    category = topic.category or "General"
    return {
        "title": "Compelling SEO title (NO dates, NO years, NO numbers)",
        "summary": "Engaging 2-3 sentence summary",
        "content": (
            "## Introduction\n\nOpening paragraph (150+ words) explaining the significance...\n\n"
            "## Background and Context\n\nDetailed background (200+ words)...\n\n"
            "## Key Statistics and Data\n\n- Statistic with specific numbers and sources\n\n"
            "## In-Depth Analysis\n\nAnalysis (300+ words) examining all aspects...\n\n"
            "## Expert Perspectives\n\n> \"Quote with full attribution\"\n\n"
            "## Industry Impact\n\nHow this affects stakeholders (250+ words)...\n\n"
            "## Future Implications\n\nForward-looking analysis (200+ words)...\n\n"
            "## Conclusion\n\nConclusion (150+ words)..."
        ),
        "tags": [category.lower(), "analysis", "insights", "trends", str(year)],
        "category": category,
        "featured": True,
        "readTime": "10-15 min read",
        "publishDate": publish_date,
    }


def build_generation_request(
    topic: TopicItem,
    *,
    target_words: int = 1500,
    rng: random.Random | None = None,
) -> GenerationRequest:
    """
    Turn a topic into a prompt for the generative client.
    The angle is picked at random, so equal topics give different prompts.
    """
    rng = rng or random.Random()
    angle = rng.choice(ANGLES)
    now = utcnow()
    category = topic.category or "General"
    schema = _output_schema(topic, format_publish_date(now), now.year)

    prompt = f"""
BREAKING NEWS: "{topic.title}" - {topic.description}

Source: {topic.source} | Category: {category}
News URL: {topic.url or "N/A"}

Write a COMPLETE, COMPREHENSIVE blog post (minimum {target_words} words) with {angle} for the {category.lower()} field.

CRITICAL REQUIREMENTS:
- Write FULL LENGTH article (at least {target_words} words)
- Use ONLY markdown formatting: ## for headings, **bold**, *italic*
- NO HTML tags, NO escaped entities
- Include 6-8 major sections with detailed content
- Professional expert quotes with full attribution
- Statistics and data points, deep analysis with multiple perspectives
- Technical accuracy for {category}

Return ONLY valid JSON:
{json.dumps(schema, indent=2, ensure_ascii=False)}
""".strip()

    return GenerationRequest(
        topic=topic,
        angle=angle,
        target_words=target_words,
        prompt=prompt,
        output_schema=schema,
    )
