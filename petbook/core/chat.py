"""
Direct-message rooms between two parties (pets or professionals).

A room is identified by its unordered pair of parties. ``pair_key``
holds both actor keys in sorted order and carries the unique
constraint, so concurrent first contacts converge on one room.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petbook.core.actor import (
    Actor,
    actor_columns,
    actor_from_ref,
    display_name,
    ensure_exists,
)
from petbook.core.errors import ConflictError, NotFoundError, SelfChatError, ValidationError
from petbook.core.notifications import notify
from petbook.models.chat import ChatRoom, ChatMessage
from petbook.realtime.broker import room_channel
from petbook.realtime.outbox import enqueue
from petbook.utils.time import utcnow

logger = logging.getLogger(__name__)


def pair_key(a: Actor, b: Actor) -> str:
    return "|".join(sorted((a.key, b.key)))


def _find_room(db: Session, a: Actor, b: Actor) -> Optional[ChatRoom]:
    return db.query(ChatRoom).filter(ChatRoom.pair_key == pair_key(a, b)).first()


def parties(room: ChatRoom) -> tuple:
    return (
        actor_from_ref(room.party_1_id, room.party_1_is_user),
        actor_from_ref(room.party_2_id, room.party_2_is_user),
    )


def other_party(room: ChatRoom, actor: Actor) -> Actor:
    first, second = parties(room)
    return second if first == actor else first


def get_or_create_room(db: Session, actor: Actor, other: Actor) -> ChatRoom:
    if actor == other:
        raise SelfChatError("You cannot chat with yourself")

    ensure_exists(db, other)

    room = _find_room(db, actor, other)
    if room:
        return room

    try:
        with db.begin_nested():
            room = ChatRoom(
                party_1_id=actor.id,
                party_1_is_user=actor.is_user,
                party_2_id=other.id,
                party_2_is_user=other.is_user,
                pair_key=pair_key(actor, other),
                created_at=utcnow(),
            )
            db.add(room)
    except IntegrityError:
        # Both sides opened the chat at once; the other insert won
        logger.debug("Room for %s already created concurrently", pair_key(actor, other))
        db.rollback()
        room = _find_room(db, actor, other)
        if room is None:
            raise ConflictError("Chat room could not be created, retry")
        return room

    db.commit()
    db.refresh(room)
    return room


def get_room(db: Session, actor: Actor, room_id: str) -> ChatRoom:
    room = db.get(ChatRoom, room_id)
    if not room or actor not in parties(room):
        raise NotFoundError("Chat room not found")
    return room


def list_rooms(db: Session, actor: Actor) -> List[ChatRoom]:
    return (
        db.query(ChatRoom)
        .filter(
            (
                (ChatRoom.party_1_id == actor.id)
                & (ChatRoom.party_1_is_user == actor.is_user)
            )
            | (
                (ChatRoom.party_2_id == actor.id)
                & (ChatRoom.party_2_is_user == actor.is_user)
            )
        )
        .order_by(ChatRoom.created_at.desc())
        .all()
    )


def list_messages(db: Session, actor: Actor, room_id: str, limit: Optional[int] = None) -> List[ChatMessage]:
    get_room(db, actor, room_id)

    query = (
        db.query(ChatMessage)
        .filter(ChatMessage.room_id == room_id)
        .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
    )
    if limit:
        query = query.limit(limit)
    return query.all()


def message_event(msg: ChatMessage) -> dict:
    return {
        "id": msg.id,
        "room_id": msg.room_id,
        "sender_pet_id": msg.sender_pet_id,
        "sender_user_id": msg.sender_user_id,
        "message": msg.message,
        "media_url": msg.media_url,
        "created_at": msg.created_at.isoformat(),
    }


def send_message(
    db: Session,
    actor: Actor,
    room_id: str,
    text: Optional[str] = None,
    media_url: Optional[str] = None,
) -> ChatMessage:
    text = (text or "").strip() or None
    if not text and not media_url:
        raise ValidationError("Message cannot be empty")

    room = get_room(db, actor, room_id)

    msg = ChatMessage(
        room_id=room.id,
        message=text,
        media_url=media_url,
        created_at=utcnow(),
        **actor_columns(actor, "sender_pet_id", "sender_user_id"),
    )
    db.add(msg)
    db.flush()

    enqueue(db, room_channel(room.id), message_event(msg))

    notify(
        db,
        other_party(room, actor),
        "message",
        f"{display_name(db, actor)} sent you a message",
        actor,
    )

    db.commit()
    db.refresh(msg)
    return msg
