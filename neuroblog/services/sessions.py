from fastapi import Response

from neuroblog.config import get_settings
from .tokens import new_token, hash_token

COOKIE_NAME = "nb_session"

def new_session_token() -> str:
    return new_token()

def hash_session_token(token: str) -> str:
    return hash_token(token)

def set_session_cookie(resp: Response, token: str, minutes: int = 60 * 24 * 7):
    resp.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=get_settings().is_production,   # True in prod (HTTPS)
        samesite="lax",
        max_age=minutes * 60,
        path="/",
    )

def clear_session_cookie(resp: Response):
    resp.delete_cookie(COOKIE_NAME, path="/")
