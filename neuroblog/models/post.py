import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import String, DateTime, Text, ForeignKey, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from neuroblog.database import Base, JSONType
from neuroblog.utils.dates import utcnow


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    tags: Mapped[list[str]] = mapped_column(JSONType, default=list)

    # draft | published
    status: Mapped[str] = mapped_column(String(20), default="draft")
    schedule_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # [{"emoji": "...", "user": "<user id>"}], at most one per user
    reactions: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list)

    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    read_time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    publish_date: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # provenance when materialized from an AI suggestion
    news_source: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
