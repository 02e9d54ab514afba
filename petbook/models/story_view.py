
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


class StoryView(Base):
    __tablename__ = "story_views"

    id = Column(Integer, primary_key=True, autoincrement=True)

    story_id = Column(
        String,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    viewer_pet_id = Column(String, ForeignKey("pets.id", ondelete="CASCADE"), nullable=True)
    viewer_user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(viewer_pet_id IS NULL) != (viewer_user_id IS NULL)",
            name="ck_story_views_one_viewer",
        ),
        # One view per viewer per story
        UniqueConstraint("story_id", "viewer_pet_id", name="uq_story_views_pet"),
        UniqueConstraint("story_id", "viewer_user_id", name="uq_story_views_user"),
    )
