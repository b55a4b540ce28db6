"""
Centralized auth service — the authentication collaborator of the chat API.

No JWT decoding should happen outside this module. Handlers never read ambient
session state: they receive the resolved user (or None for anonymous) through
the dependencies in app/api/deps.py.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User

# ── Password ──────────────────────────────────────────────────────────────────


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


# ── Token ─────────────────────────────────────────────────────────────────────


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Create a JWT for a local user. 'sub' is the qualified name (username@home_server)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": user.qualified_name,
        "user_id": user.id,
        "home_server": user.home_server,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT. Returns payload dict or None on failure."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# ── User Lookup ───────────────────────────────────────────────────────────────


def get_user_from_token(token: str, db: Session) -> User | None:
    """
    Resolve a JWT to an active local User.

    Only tokens issued by this server (home_server == SERVER_DOMAIN) are
    accepted. Restricted users still authenticate; what they may do is decided
    by the chat services.
    """
    payload = decode_access_token(token)
    if payload is None:
        return None

    if payload.get("home_server") != settings.SERVER_DOMAIN:
        return None

    user_id = payload.get("user_id")
    if user_id is None:
        return None
    return db.query(User).filter(User.id == int(user_id), User.is_active == True).first()  # noqa: E712


def authenticate(db: Session, username: str, password: str) -> User | None:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
