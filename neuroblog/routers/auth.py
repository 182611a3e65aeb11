import logging
import secrets
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy import or_
from sqlalchemy.orm import Session as DbSession

from neuroblog.config import get_settings
from neuroblog.database import get_db
from neuroblog.models.session import Session
from neuroblog.models.user import User
from neuroblog.schemas.auth import LoginIn, RegisterIn
from neuroblog.services.authz import Principal, get_current_principal, read_session_token
from neuroblog.services.passwords import hash_password, verify_and_upgrade
from neuroblog.services.sessions import clear_session_cookie, hash_session_token, new_session_token, set_session_cookie
from neuroblog.utils.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _open_session(req: Request, resp: Response, db: DbSession, user: User | None) -> str:
    days = get_settings().session_days
    st = new_session_token()
    sess = Session(
        user_id=user.id if user else None,
        is_system=user is None,
        session_token=hash_session_token(st),
        expires_at=utcnow() + timedelta(days=days),
        revoked_at=None,
        user_agent=req.headers.get("user-agent"),
        ip_address=req.client.host if req.client else None,
    )
    db.add(sess)
    db.commit()

    set_session_cookie(resp, st, minutes=days * 24 * 60)
    return st


def _is_system_login(payload: LoginIn) -> bool:
    sp = get_settings().system_principal
    login = payload.login.strip().lower()
    if login not in (sp.username.lower(), sp.email.lower()):
        return False
    return secrets.compare_digest(payload.password, sp.password)


@router.post("/register")
def register(payload: RegisterIn, req: Request, resp: Response, db: DbSession = Depends(get_db)):
    email = payload.email.lower().strip()
    username = payload.username.strip()

    exists = db.query(User).filter(or_(User.email == email, User.username == username)).first()
    if exists:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(username=username, email=email, password_hash=hash_password(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)

    token = _open_session(req, resp, db, user)
    logger.info("Registered user %s", user.username)
    return {"ok": True, "token": token, "user": {"id": str(user.id), "username": user.username, "role": user.role}}


@router.post("/login")
def login(payload: LoginIn, req: Request, resp: Response, db: DbSession = Depends(get_db)):
    if _is_system_login(payload):
        token = _open_session(req, resp, db, None)
        sp = get_settings().system_principal
        return {"ok": True, "token": token, "user": {"id": None, "username": sp.username, "role": "admin"}}

    login = payload.login.strip()
    user = db.query(User).filter(or_(User.email == login.lower(), User.username == login)).first()

    ok, new_hash = verify_and_upgrade(payload.password, user.password_hash) if user else (False, None)
    if not ok:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")
    if new_hash:
        user.password_hash = new_hash

    token = _open_session(req, resp, db, user)
    return {"ok": True, "token": token, "user": {"id": str(user.id), "username": user.username, "role": user.role}}


@router.post("/logout")
def logout(req: Request, resp: Response, db: DbSession = Depends(get_db)):
    raw = read_session_token(req)
    if raw:
        sh = hash_session_token(raw)
        sess = db.query(Session).filter(Session.session_token == sh, Session.revoked_at.is_(None)).first()
        if sess:
            sess.revoked_at = utcnow()
            db.commit()
    clear_session_cookie(resp)
    return {"ok": True}


@router.get("/me")
def me(principal: Principal = Depends(get_current_principal), db: DbSession = Depends(get_db)):
    if principal.is_system:
        sp = get_settings().system_principal
        return {"id": None, "username": sp.username, "email": sp.email, "role": "admin", "is_system": True}

    user = db.query(User).filter(User.id == principal.user_id).first()
    return {"id": str(user.id), "username": user.username, "email": user.email, "role": user.role, "is_system": False}
