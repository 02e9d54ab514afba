import logging

from jose import jwt, JWTError
from fastapi import Header, HTTPException

from petbook.config import settings

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> dict:
    """
    Verify a Supabase Auth access token and return its claims.
    Session management itself lives in Supabase; ``sub`` is the user id.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except JWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid token")

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")

    return payload  # contains sub + email


def get_current_user(authorization: str = Header(None)) -> dict:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing auth header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid auth header")

    return decode_access_token(authorization.replace("Bearer ", "", 1))
