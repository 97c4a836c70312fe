"""JWT utilities.

Tokens are minted by the account service; this API only needs to read the
``sub`` claim (the Mongo user id). ``create_access_token`` exists for local
tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from beacon.core.config import settings


def create_access_token(subject: str, extra: dict[str, Any] | None = None) -> str:
    """Sign a token whose ``sub`` is the user id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
        "iat": now,
        **(extra or {}),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verified claims, or None if the signature or expiry check fails."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def token_subject(token: str) -> str | None:
    """User id carried by a valid token; None for invalid tokens or a missing ``sub``."""
    claims = decode_access_token(token)
    if not claims or not claims.get("sub"):
        return None
    return str(claims["sub"])
