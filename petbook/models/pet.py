# petbook/models/pet.py

import uuid

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from petbook.database import Base
from petbook.utils.time import utcnow


class Pet(Base):
    __tablename__ = "pets"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    species = Column(String, nullable=False)
    breed = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)

    # Guardian display data shown next to every post
    guardian_name = Column(String, nullable=True)
    guardian_instagram_username = Column(String, nullable=True)
    guardian_instagram_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    # -------------------------
    # RELATIONSHIPS
    # -------------------------

    owner = relationship("User", back_populates="pets")

    posts = relationship(
        "Post",
        back_populates="pet",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    health_records = relationship(
        "HealthRecord",
        back_populates="pet",
        order_by="HealthRecord.record_date",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
