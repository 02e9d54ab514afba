import uuid

from sqlalchemy import Column, String, DateTime, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from petbook.database import Base
from petbook.utils.time import utcnow


class User(Base):
    __tablename__ = "users"

    # Same id as the Supabase Auth user (token "sub")
    id = Column(
        String,
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        index=True,
    )

    email = Column(String, unique=True, index=True, nullable=True)

    # user = guardian acting through a pet
    # professional = acting directly as this account
    account_type = Column(String, nullable=False, default="user")

    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    pets = relationship(
        "Pet",
        back_populates="owner",
        order_by="Pet.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "account_type IN ('user', 'professional')",
            name="ck_users_account_type",
        ),
    )
