
from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Index,
)

from petbook.database import Base
from petbook.utils.time import utcnow


class Follower(Base):
    __tablename__ = "followers"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # ------------------------------------
    # Who follows
    # ------------------------------------
    # Pet id, or user id when is_user_follower is set.
    # Not a foreign key: the column spans two tables.
    follower_id = Column(String, nullable=False)
    is_user_follower = Column(Boolean, nullable=False, default=False)

    # ------------------------------------
    # Who is followed (always a pet)
    # ------------------------------------
    target_pet_id = Column(
        String,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "follower_id",
            "is_user_follower",
            "target_pet_id",
            name="uq_followers_edge",
        ),
        Index(
            "ix_followers_follower",
            "follower_id",
            "is_user_follower",
        ),
    )
