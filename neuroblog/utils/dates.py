from datetime import datetime, timezone


def utcnow() -> datetime:
    # naive UTC, matching what the DateTime columns store
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_publish_date(dt: datetime | None = None) -> str:
    """'July 23, 2025' style date used on posts and suggestions."""
    dt = dt or utcnow()
    return f"{dt:%B} {dt.day}, {dt.year}"
