from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from petbook.core import chat
from petbook.core.actor import Actor, PetActor, ProfessionalActor
from petbook.core.actor_access import get_current_actor
from petbook.database import get_db
from petbook.models.chat import ChatRoom
from petbook.routers.serializers import actor_preview
from petbook.schemas.chat_schema import MessageCreate, MessageOut, RoomOpen, RoomOut


router = APIRouter(prefix="/chat", tags=["Chat"])


def serialize_room(db: Session, room: ChatRoom, actor: Actor) -> RoomOut:
    return RoomOut(
        id=room.id,
        other=actor_preview(db, chat.other_party(room, actor)),
        created_at=room.created_at,
    )


# --------------------------------------------------
# OPEN (get or create) A ROOM
# --------------------------------------------------
@router.post("/rooms", response_model=RoomOut)
def open_room(
    payload: RoomOpen,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    other = PetActor(payload.pet_id) if payload.pet_id else ProfessionalActor(payload.user_id)
    room = chat.get_or_create_room(db, actor, other)
    return serialize_room(db, room, actor)


@router.get("/rooms", response_model=list[RoomOut])
def my_rooms(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return [serialize_room(db, r, actor) for r in chat.list_rooms(db, actor)]


# --------------------------------------------------
# MESSAGES
# --------------------------------------------------
@router.get("/rooms/{room_id}/messages", response_model=list[MessageOut])
def room_messages(
    room_id: str,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return chat.list_messages(db, actor, room_id, limit)


@router.post("/rooms/{room_id}/messages", response_model=MessageOut, status_code=201)
def post_message(
    room_id: str,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return chat.send_message(db, actor, room_id, payload.message, payload.media_url)
