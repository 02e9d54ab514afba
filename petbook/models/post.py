# petbook/models/post.py

import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, CheckConstraint, Index
from sqlalchemy.orm import relationship

from petbook.database import Base
from petbook.utils.time import utcnow


class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    pet_id = Column(
        String,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # post | story
    type = Column(String, nullable=False, default="post")

    description = Column(Text, nullable=True)
    media_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Stories only: created_at + STORY_TTL_HOURS
    expires_at = Column(DateTime, nullable=True)

    # -------------------------
    # RELATIONSHIPS
    # -------------------------

    pet = relationship("Pet", back_populates="posts", lazy="joined")

    reactions = relationship(
        "Reaction",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    comments = relationship(
        "Comment",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    views = relationship(
        "StoryView",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("type IN ('post', 'story')", name="ck_posts_type"),
        CheckConstraint(
            "type = 'post' OR expires_at IS NOT NULL",
            name="ck_posts_story_expiry",
        ),
        Index("ix_posts_type_created", "type", "created_at"),
    )
