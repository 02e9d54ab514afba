from typing import Optional

from sqlalchemy.orm import Session

from petbook.core.errors import NotFoundError, ValidationError
from petbook.models.user import User
from petbook.utils.time import utcnow

ACCOUNT_TYPES = ("user", "professional")


def get_account(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("Account is not set up")
    return user


def upsert_account(
    db: Session,
    user_id: str,
    email: Optional[str],
    account_type: str = "user",
    full_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> User:
    """
    Mirror of the identity provider's user, created on first call.
    ``account_type`` decides whether the account acts through its pets
    or as a professional.
    """
    if account_type not in ACCOUNT_TYPES:
        raise ValidationError(f"Unknown account type: {account_type}")

    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id, email=email, created_at=utcnow())
        db.add(user)

    user.account_type = account_type
    if email:
        user.email = email
    if full_name is not None:
        user.full_name = full_name
    if avatar_url is not None:
        user.avatar_url = avatar_url

    db.commit()
    db.refresh(user)
    return user
