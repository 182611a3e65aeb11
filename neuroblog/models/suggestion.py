import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, Text, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from neuroblog.database import Base, JSONType
from neuroblog.utils.dates import utcnow


class Suggestion(Base):
    __tablename__ = "blog_suggestions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(300), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSONType, default=list)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    source: Mapped[str] = mapped_column(String(1000), nullable=False)  # news source or topic label
    news_url: Mapped[str | None] = mapped_column(String(1500), nullable=True)

    # weak link to the originating TopicItem, only used for duplicate lookups
    unique_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)

    featured: Mapped[bool] = mapped_column(Boolean, default=True)
    read_time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    publish_date: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # pending | approved | rejected | published
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    generated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # set exactly once, on the transition to published
    post_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
