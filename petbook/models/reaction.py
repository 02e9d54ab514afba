
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
)

from petbook.database import Base
from petbook.utils.time import utcnow


REACTION_TYPES = ("paw", "hug", "treat")


class Reaction(Base):
    __tablename__ = "reactions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    post_id = Column(
        String,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Exactly one of these is set, depending on the acting party
    pet_id = Column(String, ForeignKey("pets.id", ondelete="CASCADE"), nullable=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    type = Column(String, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(pet_id IS NULL) != (user_id IS NULL)",
            name="ck_reactions_one_actor",
        ),
        CheckConstraint(
            "type IN ('paw', 'hug', 'treat')",
            name="ck_reactions_type",
        ),
        # One reaction per actor per post
        UniqueConstraint("post_id", "pet_id", name="uq_reactions_post_pet"),
        UniqueConstraint("post_id", "user_id", name="uq_reactions_post_user"),
    )
