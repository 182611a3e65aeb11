from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session as DbSession

from neuroblog.config import get_settings
from neuroblog.database import get_db
from neuroblog.models.session import Session
from neuroblog.models.user import User
from neuroblog.services.sessions import COOKIE_NAME, hash_session_token
from neuroblog.utils.dates import utcnow


@dataclass(frozen=True)
class Principal:
    """Who is calling. `user_id` is None for the system principal."""

    user_id: uuid.UUID | None
    role: str
    is_system: bool = False
    username: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def owns(self, owner_id) -> bool:
        return self.user_id is not None and str(self.user_id) == str(owner_id)


def read_session_token(req: Request) -> str | None:
    raw = req.cookies.get(COOKIE_NAME)
    if raw:
        return raw
    auth = req.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


def _resolve(req: Request, db: DbSession) -> Principal | None:
    raw = read_session_token(req)
    if not raw:
        return None

    sh = hash_session_token(raw)
    sess = db.query(Session).filter(Session.session_token == sh, Session.revoked_at.is_(None)).first()
    if not sess or sess.expires_at < utcnow():
        raise HTTPException(status_code=401, detail="Session expired")

    if sess.is_system:
        return Principal(user_id=None, role="admin", is_system=True, username=get_settings().system_principal.username)

    user = db.query(User).filter(User.id == sess.user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")
    return Principal(user_id=user.id, role=user.role or "user", username=user.username)


def get_current_principal(req: Request, db: DbSession = Depends(get_db)) -> Principal:
    principal = _resolve(req, db)
    if principal is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return principal


def get_optional_principal(req: Request, db: DbSession = Depends(get_db)) -> Principal | None:
    try:
        return _resolve(req, db)
    except HTTPException:
        return None


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal
