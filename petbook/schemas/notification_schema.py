from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from petbook.schemas.actor_schema import ActorOut


class NotificationOut(BaseModel):
    id: int
    type: str
    message: str
    is_read: bool
    created_at: datetime
    related: Optional[ActorOut] = None


class UnreadCountOut(BaseModel):
    unread_count: int
