# petbook/models/notification.py


from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    CheckConstraint,
    Index,
)

from petbook.database import Base
from petbook.utils.time import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # ------------------------------------
    # Owner: a pet, or a professional account
    # ------------------------------------
    pet_id = Column(String, ForeignKey("pets.id", ondelete="CASCADE"), nullable=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    # reaction | comment | follow | message | paw | hug | treat
    type = Column(String, nullable=False)
    message = Column(Text, nullable=False)

    # ------------------------------------
    # Who caused it
    # ------------------------------------
    related_pet_id = Column(
        String,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=True,
    )
    related_user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )

    is_read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(pet_id IS NULL) != (user_id IS NULL)",
            name="ck_notifications_one_owner",
        ),
        CheckConstraint(
            "(related_pet_id IS NULL) != (related_user_id IS NULL)",
            name="ck_notifications_one_related",
        ),
        Index("ix_notifications_pet_read", "pet_id", "is_read"),
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )
