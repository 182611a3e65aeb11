from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from neuroblog.config import SystemPrincipal
from neuroblog.models.category import Category
from neuroblog.models.post import Post
from neuroblog.models.suggestion import Suggestion
from neuroblog.models.user import User
from neuroblog.services.authz import Principal
from neuroblog.services.errors import Forbidden, NotFound, PublishFailed
from neuroblog.services.news_sources import TopicItem
from neuroblog.services.passwords import hash_password
from neuroblog.services.response_parser import ParsedSuggestion
from neuroblog.services.state_machine import ensure_transition
from neuroblog.utils.dates import utcnow
from neuroblog.utils.tags import normalize_tags

logger = logging.getLogger(__name__)


class SuggestionManager:
    """
    Owns every state change of a Suggestion.

    pending  -> approved   approve(should_publish=False)
    pending  -> published  approve(should_publish=True) / publish()
    approved -> published  publish()
    pending  -> rejected   reject()
    """

    def __init__(self, system_principal: SystemPrincipal | None = None):
        self.system_principal = system_principal or SystemPrincipal()

    # --- reads / creation ---------------------------------------------------

    def create(self, db: Session, parsed: ParsedSuggestion, topic: TopicItem, source: str) -> Suggestion:
        s = Suggestion(
            title=parsed.title,
            content=parsed.content,
            summary=parsed.summary or parsed.title,
            tags=list(parsed.tags),
            category=topic.category or parsed.category,
            source=source,
            news_url=topic.url,
            unique_id=topic.unique_id,
            featured=parsed.featured,
            read_time=parsed.read_time,
            publish_date=parsed.publish_date,
            status="pending",
        )
        db.add(s)
        db.commit()
        db.refresh(s)
        logger.info("Saved suggestion %s: %s", s.id, s.title)
        return s

    def list_pending(self, db: Session, limit: int = 10) -> list[Suggestion]:
        return (
            db.query(Suggestion)
            .filter(Suggestion.status == "pending")
            .order_by(Suggestion.generated_at.desc())
            .limit(limit)
            .all()
        )

    def count_pending(self, db: Session) -> int:
        return db.query(func.count(Suggestion.id)).filter(Suggestion.status == "pending").scalar() or 0

    # --- transitions --------------------------------------------------------

    def approve(
        self,
        db: Session,
        suggestion_id: uuid.UUID,
        actor: Principal,
        admin_notes: Optional[str] = None,
        should_publish: bool = True,
    ) -> tuple[Suggestion, Optional[Post]]:
        self._require_admin(actor)
        s = self._get(db, suggestion_id)

        if should_publish:
            ensure_transition(s.status, "published")
            post = self._publish(db, s, actor, admin_notes=admin_notes, approved=True)
            return s, post

        ensure_transition(s.status, "approved")
        s.status = "approved"
        s.approved_at = utcnow()
        if admin_notes is not None:
            s.admin_notes = admin_notes
        db.commit()
        logger.info("Approved suggestion %s without publishing", s.id)
        return s, None

    def publish(self, db: Session, suggestion_id: uuid.UUID, actor: Principal) -> tuple[Suggestion, Post]:
        self._require_admin(actor)
        s = self._get(db, suggestion_id)
        ensure_transition(s.status, "published")
        post = self._publish(db, s, actor)
        return s, post

    def reject(
        self,
        db: Session,
        suggestion_id: uuid.UUID,
        actor: Principal,
        admin_notes: Optional[str] = None,
    ) -> Suggestion:
        self._require_admin(actor)
        s = self._get(db, suggestion_id)
        ensure_transition(s.status, "rejected")
        s.status = "rejected"
        if admin_notes is not None:
            s.admin_notes = admin_notes
        db.commit()
        logger.info("Rejected suggestion %s", s.id)
        return s

    def delete(self, db: Session, suggestion_id: uuid.UUID, actor: Principal) -> None:
        # published posts stay where they are
        self._require_admin(actor)
        s = self._get(db, suggestion_id)
        db.delete(s)
        db.commit()
        logger.info("Deleted suggestion %s", suggestion_id)

    # --- internals ----------------------------------------------------------

    @staticmethod
    def _require_admin(actor: Principal | None) -> None:
        if actor is None or not actor.is_admin:
            raise Forbidden("Admin access required")

    @staticmethod
    def _get(db: Session, suggestion_id: uuid.UUID) -> Suggestion:
        s = db.query(Suggestion).filter(Suggestion.id == suggestion_id).first()
        if not s:
            raise NotFound("Suggestion not found")
        return s

    def _publish(
        self,
        db: Session,
        s: Suggestion,
        actor: Principal,
        admin_notes: Optional[str] = None,
        approved: bool = False,
    ) -> Post:
        """Post creation and the suggestion update commit together or not at all."""
        try:
            now = utcnow()
            post = self._create_post(db, s, self._resolve_author(db, actor))

            s.status = "published"
            s.published_at = now
            if approved:
                s.approved_at = now
            if admin_notes is not None:
                s.admin_notes = admin_notes
            s.post_id = post.id
            db.commit()
        except Exception as e:
            db.rollback()
            logger.exception("Publishing suggestion %s failed", s.id)
            raise PublishFailed(f"Failed to publish suggestion: {e}") from e

        logger.info("Published suggestion %s as post %s", s.id, post.id)
        return post

    def _create_post(self, db: Session, s: Suggestion, author_id: uuid.UUID) -> Post:
        category_id = None
        if s.category:
            category_id = db.query(Category.id).filter(Category.name == s.category).scalar()

        post = Post(
            title=s.title,
            body=s.content,
            summary=s.summary,
            author_id=author_id,
            category_id=category_id,
            tags=normalize_tags(s.tags),
            status="published",
            featured=s.featured,
            read_time=s.read_time,
            publish_date=s.publish_date,
            news_source=s.source,
        )
        db.add(post)
        db.flush()
        return post

    def _resolve_author(self, db: Session, actor: Principal) -> uuid.UUID:
        if not actor.is_system:
            return actor.user_id

        sp = self.system_principal
        user = db.query(User).filter(User.username == sp.username).first()
        if user is None:
            user = db.query(User).filter(User.email == sp.email).first()
        if user is None:
            logger.info("Creating system admin account '%s'", sp.username)
            user = User(
                username=sp.username,
                email=sp.email,
                password_hash=hash_password(sp.password),
                role="admin",
            )
            db.add(user)
            db.flush()
        return user.id
