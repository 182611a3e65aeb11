from __future__ import annotations

import re
from typing import Protocol, Sequence

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

_WORD_RE = re.compile(r"[A-Za-z0-9']+")


def title_words(title: str) -> list[str]:
    return _WORD_RE.findall(title or "")


class SimilarityMatcher(Protocol):
    def keywords(self, title: str, prefix: bool = False) -> list[str]:
        ...

    def prefilter(self, column, keywords: Sequence[str]) -> ColumnElement | None:
        ...

    def is_similar(self, keywords: Sequence[str], title: str) -> bool:
        ...


def escape_like(word: str) -> str:
    return word.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class KeywordSimilarityMatcher:
    """
    Titles are similar when one contains any keyword of the other.

    keywords(prefix=False) -> the three longest words longer than 3 chars
    keywords(prefix=True)  -> the first three words, as one phrase

    Punctuation is ignored on both sides, so "AI Revolution: What" and
    "AI Revolution What" share a prefix.
    """

    def __init__(self, count: int = 3, min_len: int = 4):
        self.count = count
        self.min_len = min_len

    def keywords(self, title: str, prefix: bool = False) -> list[str]:
        words = title_words(title)
        if prefix:
            head = words[: self.count]
            return [" ".join(head)] if len(head) == self.count else []
        long_words = [w for w in words if len(w) >= self.min_len]
        long_words.sort(key=len, reverse=True)
        return long_words[: self.count]

    def prefilter(self, column, keywords: Sequence[str]) -> ColumnElement | None:
        # coarse SQL filter; is_similar() makes the final call
        clauses = []
        for k in keywords:
            parts = [column.ilike(f"%{escape_like(w)}%", escape="\\") for w in k.split()]
            if parts:
                clauses.append(and_(*parts))
        return or_(*clauses) if clauses else None

    def is_similar(self, keywords: Sequence[str], title: str) -> bool:
        if not keywords or not title:
            return False
        haystack = " ".join(title_words(title))
        pattern = "|".join(re.escape(k) for k in keywords)
        return re.search(pattern, haystack, flags=re.IGNORECASE) is not None
