# petbook/models/chat.py

import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from petbook.database import Base
from petbook.utils.time import utcnow


class ChatRoom(Base):
    __tablename__ = "chat_rooms"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Parties in the order the room was first opened.
    # *_is_user tells whether the id is a professional account or a pet.
    party_1_id = Column(String, nullable=False, index=True)
    party_1_is_user = Column(Boolean, nullable=False, default=False)

    party_2_id = Column(String, nullable=False, index=True)
    party_2_is_user = Column(Boolean, nullable=False, default=False)

    # Sorted "kind:id|kind:id" of both parties, same for either order
    pair_key = Column(String, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    messages = relationship(
        "ChatMessage",
        back_populates="room",
        order_by="ChatMessage.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("pair_key", name="uq_chat_rooms_pair"),
        CheckConstraint(
            "party_1_id != party_2_id OR party_1_is_user != party_2_is_user",
            name="ck_chat_rooms_not_self",
        ),
    )


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    # Autoincrement id breaks created_at ties
    id = Column(Integer, primary_key=True, autoincrement=True)

    room_id = Column(
        String,
        ForeignKey("chat_rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sender_pet_id = Column(String, ForeignKey("pets.id", ondelete="CASCADE"), nullable=True)
    sender_user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    message = Column(Text, nullable=True)
    media_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    room = relationship("ChatRoom", back_populates="messages")

    __table_args__ = (
        CheckConstraint(
            "(sender_pet_id IS NULL) != (sender_user_id IS NULL)",
            name="ck_chat_messages_one_sender",
        ),
        CheckConstraint(
            "message IS NOT NULL OR media_url IS NOT NULL",
            name="ck_chat_messages_body",
        ),
    )
