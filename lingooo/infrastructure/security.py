from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings


def create_access_token(sub: str, minutes: int | None = None) -> str:
    # role is never put in the token, it is always read from the users collection
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": sub, "iat": now, "exp": exp}
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Return the user identifier (sub) of a token or raise JWTError."""
    payload = jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    sub = payload.get("sub")
    if not sub:
        raise JWTError("No subject")
    return sub
