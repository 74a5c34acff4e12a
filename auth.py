"""
Password hashing and cookie sessions.

Sessions are server side: the cookie only carries a random token that is
looked up in the in-memory store.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, Response
from passlib.context import CryptContext

from config import BCRYPT_ROUNDS, MAX_PASSWORD_BYTES, SESSION_COOKIE_NAME, SESSION_TTL_SECONDS
from database import MemoryStore, store
from schemas import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    # a longer password would match on its 72-byte prefix alone
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return pwd_context.verify(password, password_hash)


def authenticate(db: MemoryStore, username: str, password: str) -> Optional[User]:
    user = db.get_user_by_username(username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %r", username)
        return None
    return user


def login(response: Response, db: MemoryStore, user: User) -> None:
    session = db.create_session(user.id, SESSION_TTL_SECONDS)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.token,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )


def logout(request: Request, response: Response, db: MemoryStore) -> None:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        db.delete_session(token)
    response.delete_cookie(SESSION_COOKIE_NAME)


def _session_user(request: Request, db: MemoryStore) -> Optional[User]:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    session = db.get_session(token)
    if session is None:
        return None
    return db.get_user(session.user_id)


# ===================== Dependencies =====================
# Route dependencies read the process-wide store, as the routes in main.py do.
def get_current_user(request: Request) -> User:
    user = _session_user(request, store)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_admin(request: Request) -> User:
    user = _session_user(request, store)
    if user is None or not user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
