from datetime import timedelta

from jose import jwt

from petbook.config import settings
from petbook.utils.time import utcnow


def make_token(user_id, email=None):
    """An access token shaped like the ones Supabase Auth issues."""
    claims = {
        "sub": user_id,
        "email": email,
        "aud": settings.SUPABASE_JWT_AUDIENCE,
        "exp": utcnow() + timedelta(hours=1),
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.ALGORITHM)


def auth_headers(user, pet=None):
    headers = {"Authorization": f"Bearer {make_token(user.id, user.email)}"}
    if pet is not None:
        headers["X-Pet-Id"] = pet.id
    return headers
