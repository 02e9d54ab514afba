from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from petbook.auth.supabase_auth import get_current_user
from petbook.core import follow_graph
from petbook.core.actor import Actor, PetActor, resolve_actor
from petbook.core.actor_access import get_current_actor
from petbook.core.interactions import send_interaction
from petbook.core.pets import create_pet, delete_pet, get_pet, list_user_pets, search_pets
from petbook.database import get_db
from petbook.routers.serializers import actor_preview, pet_preview
from petbook.schemas.actor_schema import ActorOut
from petbook.schemas.pet_schema import (
    FollowStatusOut,
    InteractionCreate,
    PetCreate,
    PetOut,
    PetPreview,
    PetProfileOut,
)


router = APIRouter(tags=["Pets"])


# --------------------------------------------------
# CREATE PET
# --------------------------------------------------
@router.post("/pets", response_model=PetOut, status_code=201)
def register_pet(
    payload: PetCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return create_pet(db, current_user["sub"], payload.model_dump())


# --------------------------------------------------
# MY PETS (creation order; the first one is the default actor)
# --------------------------------------------------
@router.get("/pets/mine", response_model=list[PetOut])
def my_pets(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return list_user_pets(db, current_user["sub"])


# --------------------------------------------------
# SEARCH (pet name or guardian name)
# --------------------------------------------------
@router.get("/pets/search", response_model=list[PetPreview])
def find_pets(
    q: str = "",
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return [pet_preview(p) for p in search_pets(db, q)]


# --------------------------------------------------
# PET PROFILE
# --------------------------------------------------
@router.get("/pets/{pet_id}", response_model=PetProfileOut)
def pet_profile(
    pet_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    x_pet_id: Optional[str] = Header(None),
):
    pet = get_pet(db, pet_id)

    # Profiles are readable without an acting pet
    actor = resolve_actor(db, current_user["sub"], x_pet_id)

    return PetProfileOut(
        **PetOut.model_validate(pet).model_dump(),
        followers_count=follow_graph.follower_count(db, pet.id),
        following_count=follow_graph.following_count(db, PetActor(pet.id)),
        is_following=bool(actor) and follow_graph.is_following(db, actor, pet.id),
        is_mine=pet.user_id == current_user["sub"],
    )


# --------------------------------------------------
# DELETE PET (cascades everything that references it)
# --------------------------------------------------
@router.delete("/pets/{pet_id}", status_code=204)
def remove_pet(
    pet_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    delete_pet(db, current_user["sub"], pet_id)


# --------------------------------------------------
# FOLLOW / UNFOLLOW
# --------------------------------------------------
@router.post("/pets/{pet_id}/follow", response_model=FollowStatusOut)
def follow_pet(
    pet_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    follow_graph.follow(db, actor, pet_id)
    return FollowStatusOut(
        pet_id=pet_id,
        is_following=True,
        followers_count=follow_graph.follower_count(db, pet_id),
    )


@router.delete("/pets/{pet_id}/follow", response_model=FollowStatusOut)
def unfollow_pet(
    pet_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    get_pet(db, pet_id)
    follow_graph.unfollow(db, actor, pet_id)
    return FollowStatusOut(
        pet_id=pet_id,
        is_following=False,
        followers_count=follow_graph.follower_count(db, pet_id),
    )


@router.get("/pets/{pet_id}/followers", response_model=list[ActorOut])
def pet_followers(
    pet_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    get_pet(db, pet_id)
    return [actor_preview(db, a) for a in follow_graph.followers(db, pet_id)]


@router.get("/following", response_model=list[PetPreview])
def my_following(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    pets = [get_pet(db, pid) for pid in follow_graph.following(db, actor)]
    return [pet_preview(p) for p in pets]


# --------------------------------------------------
# PROFILE INTERACTIONS (paw / hug / treat)
# --------------------------------------------------
@router.post("/pets/{pet_id}/interactions")
def interact(
    pet_id: str,
    payload: InteractionCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    delivered = send_interaction(db, actor, pet_id, payload.type)
    return {"status": "sent" if delivered else "suppressed"}
