from datetime import datetime
from typing import Optional

from pydantic import BaseModel, model_validator

from petbook.schemas.actor_schema import ActorOut


# --------------------------------------------------
# OPEN ROOM (with a pet, or with a professional)
# --------------------------------------------------
class RoomOpen(BaseModel):
    pet_id: Optional[str] = None
    user_id: Optional[str] = None

    @model_validator(mode="after")
    def one_party(self):
        if (self.pet_id is None) == (self.user_id is None):
            raise ValueError("Provide exactly one of pet_id or user_id")
        return self


class RoomOut(BaseModel):
    id: str
    other: ActorOut
    created_at: datetime


class MessageCreate(BaseModel):
    message: Optional[str] = None
    media_url: Optional[str] = None


class MessageOut(BaseModel):
    id: int
    room_id: str
    sender_pet_id: Optional[str] = None
    sender_user_id: Optional[str] = None
    message: Optional[str] = None
    media_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
