from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from neuroblog.services.errors import ParseFailure
from neuroblog.utils.constants import PLACEHOLDER_SUMMARY, PLACEHOLDER_TITLE
from neuroblog.utils.dates import format_publish_date, utcnow

logger = logging.getLogger(__name__)

MAX_TITLE_LEN = 75
MIN_EXTRACTED_CONTENT = 500
DEFAULT_READ_TIME = "10-15 min read"
EMPTY_CONTENT = "Content is being prepared. Check back soon for the full analysis."


@dataclass
class ParsedSuggestion:
    title: str
    content: str
    summary: str = ""
    tags: list[str] = field(default_factory=list)
    category: str = "General"
    featured: bool = True
    read_time: str = DEFAULT_READ_TIME
    publish_date: str = ""
    strategy: str = ""


@dataclass
class ParseResult:
    """Tagged result: exactly one of `value` / `error` is set."""

    value: Optional[ParsedSuggestion] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @classmethod
    def success(cls, value: ParsedSuggestion) -> "ParseResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(error=error)


ParseStrategy = Callable[[str], ParseResult]


# --- repair helpers ---------------------------------------------------------

_TAG_RE = re.compile(r"<[^>]+>")
_MONTHS = r"(?:January|February|March|April|May|June|July|August|September|October|November|December)"


def repair_text(text: str) -> str:
    if not text:
        return ""
    out = (
        text.replace("\\n", "\n")
        .replace('\\"', '"')
        .replace("\\u0026", "&")
        .replace("\\u003c", "<")
        .replace("\\u003e", ">")
    )
    out = html.unescape(out)
    out = _TAG_RE.sub("", out)
    out = re.sub(r"\n{3,}", "\n\n", out)
    return out.strip()


def clean_title(title: str) -> str:
    t = repair_text(title or "")
    t = re.sub(rf"\b{_MONTHS}\s+\d{{1,2}},?\s+\d{{4}}\b", "", t, flags=re.IGNORECASE)
    t = re.sub(r"\b\d{4}-\d{2}-\d{2}\b", "", t)
    t = re.sub(r"\(\s*(?:19|20)\d{2}\s*\)", "", t)
    t = re.sub(r"\(\s*\d+\s*\)", "", t)
    t = re.sub(r"\s*-\s*(?:Analysis|Insights|Update|Perspective|Guide|Deep Dive)\s+\d{3,4}\s*$", "", t, flags=re.IGNORECASE)
    t = t.replace("#", "")
    t = re.sub(r"\s+", " ", t).strip(" -:|")
    return t[:MAX_TITLE_LEN].strip()


def _strip_fences(raw: str) -> str:
    return re.sub(r"```(?:json)?", "", raw or "", flags=re.IGNORECASE).strip()


def _as_tags(value) -> list[str]:
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    if isinstance(value, str):
        return [v.strip().strip('"') for v in value.split(",") if v.strip().strip('"')]
    return []


def _default_tags() -> list[str]:
    return [str(utcnow().year), "trending"]


def _build(data: dict, strategy: str) -> ParsedSuggestion:
    return ParsedSuggestion(
        title=clean_title(str(data.get("title") or "")),
        content=repair_text(str(data.get("content") or "")),
        summary=repair_text(str(data.get("summary") or "")),
        tags=_as_tags(data.get("tags")) or _default_tags(),
        category=str(data.get("category") or "General").strip() or "General",
        featured=bool(data.get("featured", True)),
        read_time=str(data.get("readTime") or DEFAULT_READ_TIME),
        publish_date=str(data.get("publishDate") or format_publish_date()),
        strategy=strategy,
    )


# --- strategies -------------------------------------------------------------

class StructuredJsonStrategy:
    name = "json"

    def __call__(self, raw: str) -> ParseResult:
        text = _strip_fences(raw)
        start, end = text.find("{"), text.rfind("}")
        if start < 0 or end <= start:
            return ParseResult.failure("no JSON object found")
        try:
            data = json.loads(text[start:end + 1], strict=False)
        except (ValueError, RecursionError) as e:
            # RecursionError: pathologically nested arrays/objects
            return ParseResult.failure(f"invalid JSON: {e}")
        if not isinstance(data, dict):
            return ParseResult.failure("JSON is not an object")

        parsed = _build(data, self.name)
        if not parsed.title or not parsed.content:
            return ParseResult.failure("missing title or content")
        return ParseResult.success(parsed)


class FieldExtractionStrategy:
    name = "fields"

    def __init__(self, min_content: int = MIN_EXTRACTED_CONTENT):
        self.min_content = min_content

    @staticmethod
    def _field(raw: str, name: str) -> str:
        m = re.search(rf'"{name}"\s*:\s*"((?:[^"\\]|\\.)*)"', raw, flags=re.DOTALL)
        return m.group(1) if m else ""

    def __call__(self, raw: str) -> ParseResult:
        text = _strip_fences(raw)

        content = self._field(text, "content") or text
        content = repair_text(content)
        if len(content) <= self.min_content:
            return ParseResult.failure(f"content too short ({len(content)} chars)")

        title = self._field(text, "title")
        summary = self._field(text, "summary")
        category = self._field(text, "category")
        tags_m = re.search(r'"tags"\s*:\s*\[([^\]]*)\]', text)

        paragraphs = [p.strip() for p in content.split("\n\n") if p.strip()]
        if not title:
            first = next((ln for ln in content.splitlines() if ln.strip()), "")
            title = first
        if not summary and len(paragraphs) > 1:
            summary = paragraphs[1][:300]

        parsed = _build(
            {
                "title": title,
                "content": content,
                "summary": summary,
                "category": category,
                "tags": _as_tags(tags_m.group(1)) if tags_m else None,
            },
            self.name,
        )
        if not parsed.title:
            return ParseResult.failure("no title recoverable")
        return ParseResult.success(parsed)


class ResponseParser:
    """
    Turns raw model output into a ParsedSuggestion.

    Strategies are tried in order; the first success wins. `parse` never
    raises: when every strategy fails, a placeholder built from the cleaned
    text is returned.
    """

    def __init__(self, strategies: Sequence[ParseStrategy] | None = None):
        self.strategies = list(strategies) if strategies is not None else [
            StructuredJsonStrategy(),
            FieldExtractionStrategy(),
        ]

    def parse(self, raw: str) -> ParsedSuggestion:
        raw = raw if isinstance(raw, str) else str(raw or "")
        try:
            return self._run(raw)
        except ParseFailure as e:
            logger.warning("AI response unparseable, using placeholder: %s", e)
            return self.placeholder(raw)

    def _run(self, raw: str) -> ParsedSuggestion:
        errors = []
        for strategy in self.strategies:
            try:
                result = strategy(raw)
            except Exception as e:
                logger.warning("Parse strategy %s crashed: %r", getattr(strategy, "name", strategy), e)
                result = ParseResult.failure(f"strategy error: {type(e).__name__}")
            if result.ok:
                return result.value
            errors.append(f"{getattr(strategy, 'name', strategy)}: {result.error}")
        raise ParseFailure("; ".join(errors) or "no strategies")

    @staticmethod
    def placeholder(raw: str) -> ParsedSuggestion:
        cleaned = repair_text(_strip_fences(raw))
        return ParsedSuggestion(
            title=PLACEHOLDER_TITLE,
            content=cleaned or EMPTY_CONTENT,
            summary=PLACEHOLDER_SUMMARY,
            tags=_default_tags(),
            category="General",
            publish_date=format_publish_date(),
            strategy="placeholder",
        )
