from typing import Literal, Optional

from pydantic import BaseModel


# --------------------------------------------------
# ACTOR PREVIEW (pet or professional, used everywhere)
# --------------------------------------------------
class ActorOut(BaseModel):
    kind: Literal["pet", "professional"]
    id: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool = False
