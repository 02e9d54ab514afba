"""
Acting identity.

Every interaction is performed either by a pet (a guardian account
acting through one of its pets) or by a professional account acting as
itself. Components receive an ``Actor`` and never look at the session
or the account mode themselves.
"""

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import or_, and_
from sqlalchemy.orm import Session

from petbook.core.errors import NoActorError, NotFoundError
from petbook.models.pet import Pet
from petbook.models.user import User


@dataclass(frozen=True)
class PetActor:
    pet_id: str

    kind = "pet"
    is_user = False

    @property
    def id(self) -> str:
        return self.pet_id

    @property
    def key(self) -> str:
        return f"pet:{self.pet_id}"


@dataclass(frozen=True)
class ProfessionalActor:
    user_id: str

    kind = "professional"
    is_user = True

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def key(self) -> str:
        return f"user:{self.user_id}"


Actor = Union[PetActor, ProfessionalActor]


def actor_from_ref(ref_id: str, is_user: bool) -> Actor:
    return ProfessionalActor(ref_id) if is_user else PetActor(ref_id)


def actor_from_columns(pet_id: Optional[str], user_id: Optional[str]) -> Actor:
    """Rebuild an actor from a (pet_id, user_id) column pair where exactly one is set."""
    if pet_id is not None:
        return PetActor(pet_id)
    return ProfessionalActor(user_id)


# --------------------------------------------------
# COLUMN HELPERS (pet_id | user_id pairs)
# --------------------------------------------------

def actor_columns(actor: Actor, pet_column: str = "pet_id", user_column: str = "user_id") -> dict:
    if actor.is_user:
        return {pet_column: None, user_column: actor.id}
    return {pet_column: actor.id, user_column: None}


def actor_filter(pet_attr, user_attr, actor: Actor):
    if actor.is_user:
        return user_attr == actor.id
    return pet_attr == actor.id


def actors_filter(pet_attr, user_attr, actors):
    pet_ids = [a.id for a in actors if not a.is_user]
    user_ids = [a.id for a in actors if a.is_user]
    return or_(
        and_(pet_attr.isnot(None), pet_attr.in_(pet_ids)),
        and_(user_attr.isnot(None), user_attr.in_(user_ids)),
    )


# --------------------------------------------------
# LOOKUPS
# --------------------------------------------------

def account_id(db: Session, actor: Actor) -> Optional[str]:
    """The human account behind an actor (the guardian, for a pet)."""
    if actor.is_user:
        return actor.id

    pet = db.get(Pet, actor.id)
    return pet.user_id if pet else None


def display_name(db: Session, actor: Actor) -> str:
    if actor.is_user:
        user = db.get(User, actor.id)
        return (user.full_name if user and user.full_name else "A professional")

    pet = db.get(Pet, actor.id)
    return pet.name if pet else "A pet"


def ensure_exists(db: Session, actor: Actor) -> None:
    if actor.is_user:
        user = db.get(User, actor.id)
        if not user or user.account_type != "professional":
            raise NotFoundError("Professional not found")
        return

    if not db.get(Pet, actor.id):
        raise NotFoundError("Pet not found")


# --------------------------------------------------
# RESOLVER
# --------------------------------------------------

def resolve_actor(
    db: Session,
    user_id: str,
    selected_pet_id: Optional[str] = None,
) -> Optional[Actor]:
    """
    Resolve the acting principal for a signed-in account.

    Professionals act as themselves. Guardians act through the selected
    pet, or their first pet by creation order when nothing is selected.
    A guardian without pets resolves to ``None``.
    """
    user = db.get(User, user_id)
    if not user:
        raise NoActorError("Account is not set up")

    if user.account_type == "professional":
        return ProfessionalActor(user.id)

    if selected_pet_id:
        pet = (
            db.query(Pet)
            .filter(Pet.id == selected_pet_id, Pet.user_id == user.id)
            .first()
        )
        if not pet:
            raise NoActorError("Selected pet does not belong to this account")
        return PetActor(pet.id)

    pet = (
        db.query(Pet)
        .filter(Pet.user_id == user.id)
        .order_by(Pet.created_at.asc(), Pet.id.asc())
        .first()
    )
    if not pet:
        return None

    return PetActor(pet.id)
