from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from petbook.auth.supabase_auth import get_current_user
from petbook.core.actor import Actor, PetActor, resolve_actor
from petbook.core.errors import NoActorError
from petbook.database import get_db


def get_current_actor(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    x_pet_id: Optional[str] = Header(None),
) -> Actor:
    """
    Request dependency: the actor for this call.
    The client sends the selected pet in X-Pet-Id; switching pets or
    account mode is just a different header / account_type.
    """
    actor = resolve_actor(db, current_user["sub"], x_pet_id)
    if actor is None:
        raise NoActorError("Register a pet before interacting")
    return actor


def get_current_pet_actor(actor: Actor = Depends(get_current_actor)) -> PetActor:
    if actor.is_user:
        raise NoActorError("Only pets can do this")
    return actor
