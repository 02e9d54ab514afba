from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from petbook.schemas.actor_schema import ActorOut
from petbook.schemas.pet_schema import PetPreview


class StoryCreate(BaseModel):
    media_url: str
    description: Optional[str] = None


class StoryOut(BaseModel):
    id: str
    pet: PetPreview
    media_url: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    has_viewed: bool = False


class StoriesBarOut(BaseModel):
    # Clients refresh the bar on this interval
    poll_seconds: int
    stories: List[StoryOut]


class StoryViewRecorded(BaseModel):
    story_id: str
    first_view: bool


class StoryViewsOut(BaseModel):
    story_id: str
    total: int
    professional: int
    viewers: List[ActorOut]
