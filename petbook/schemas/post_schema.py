from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

from petbook.schemas.actor_schema import ActorOut
from petbook.schemas.pet_schema import PetPreview


class PostCreate(BaseModel):
    description: Optional[str] = None
    media_url: Optional[str] = None


class ReactionToggle(BaseModel):
    type: str


class ReactionSummaryOut(BaseModel):
    counts: Dict[str, int]
    total: int
    mine: Optional[str] = None


class PostOut(BaseModel):
    id: str
    pet_id: str
    type: str
    description: Optional[str] = None
    media_url: Optional[str] = None
    created_at: datetime

    pet: PetPreview
    reactions: ReactionSummaryOut
    comment_count: int


class CommentCreate(BaseModel):
    text: str


class CommentOut(BaseModel):
    id: int
    post_id: str
    author: ActorOut
    text: str
    created_at: datetime
