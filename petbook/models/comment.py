# petbook/models/comment.py


from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, CheckConstraint

from petbook.database import Base
from petbook.utils.time import utcnow


class Comment(Base):
    __tablename__ = "comments"

    # Autoincrement id breaks created_at ties
    id = Column(Integer, primary_key=True, autoincrement=True)

    post_id = Column(
        String,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    pet_id = Column(String, ForeignKey("pets.id", ondelete="CASCADE"), nullable=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    text = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(pet_id IS NULL) != (user_id IS NULL)",
            name="ck_comments_one_actor",
        ),
    )
