import re

from neuroblog.utils.constants import TAG_SYNONYMS


def normalize_tag(tag: str | None) -> str:
    if not tag:
        return ""
    clean = re.sub(r"\s+", "-", str(tag).strip().lower())
    return TAG_SYNONYMS.get(clean, clean)


def normalize_tags(tags) -> list[str]:
    if not isinstance(tags, (list, tuple)):
        return []
    out: list[str] = []
    seen = set()
    for t in tags:
        n = normalize_tag(t)
        if n and n not in seen:
            out.append(n)
            seen.add(n)
    return out
