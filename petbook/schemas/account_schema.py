from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class AccountUpdate(BaseModel):
    account_type: Literal["user", "professional"] = "user"
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class AccountOut(BaseModel):
    id: str
    email: Optional[str] = None
    account_type: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool
    created_at: datetime

    class Config:
        from_attributes = True
