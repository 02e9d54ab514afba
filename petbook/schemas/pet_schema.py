from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PetCreate(BaseModel):
    name: str = Field(min_length=1)
    species: str
    breed: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_instagram_username: Optional[str] = None
    guardian_instagram_url: Optional[str] = None


class PetPreview(BaseModel):
    id: str
    name: str
    avatar_url: Optional[str] = None
    guardian_instagram_username: Optional[str] = None

    class Config:
        from_attributes = True


class PetOut(BaseModel):
    id: str
    user_id: str
    name: str
    species: str
    breed: Optional[str] = None
    age: Optional[int] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_instagram_username: Optional[str] = None
    guardian_instagram_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# --------------------------------------------------
# PROFILE (pet + follow graph for the viewer)
# --------------------------------------------------
class PetProfileOut(PetOut):
    followers_count: int
    following_count: int
    is_following: bool
    is_mine: bool


class InteractionCreate(BaseModel):
    type: str


class FollowStatusOut(BaseModel):
    pet_id: str
    is_following: bool
    followers_count: int
