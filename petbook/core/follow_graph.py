import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petbook.core.actor import Actor, PetActor, account_id, actor_from_ref, display_name
from petbook.core.errors import NotFoundError, SelfFollowError
from petbook.core.notifications import notify
from petbook.models.follower import Follower
from petbook.models.pet import Pet

logger = logging.getLogger(__name__)


def _edge_query(db: Session, actor: Actor, target_pet_id: str):
    return db.query(Follower).filter(
        Follower.follower_id == actor.id,
        Follower.is_user_follower == actor.is_user,
        Follower.target_pet_id == target_pet_id,
    )


def follow(db: Session, actor: Actor, target_pet_id: str) -> bool:
    """
    Follow a pet. Returns True when a new edge was created,
    False when it already existed.
    """
    target = db.get(Pet, target_pet_id)
    if not target:
        raise NotFoundError("Pet not found")

    # Neither a pet nor a professional may follow a pet of their own account
    if target.user_id == account_id(db, actor):
        raise SelfFollowError("You cannot follow your own pet")

    try:
        with db.begin_nested():
            db.add(
                Follower(
                    follower_id=actor.id,
                    is_user_follower=actor.is_user,
                    target_pet_id=target_pet_id,
                )
            )
    except IntegrityError:
        logger.debug("Follow %s -> %s already exists", actor.key, target_pet_id)
        db.rollback()
        return False

    notify(
        db,
        PetActor(target_pet_id),
        "follow",
        f"{display_name(db, actor)} started following you!",
        actor,
    )
    db.commit()
    return True


def unfollow(db: Session, actor: Actor, target_pet_id: str) -> bool:
    removed = _edge_query(db, actor, target_pet_id).delete(synchronize_session=False)
    db.commit()
    return bool(removed)


def is_following(db: Session, actor: Actor, target_pet_id: str) -> bool:
    return _edge_query(db, actor, target_pet_id).first() is not None


def followers(db: Session, pet_id: str) -> List[Actor]:
    rows = (
        db.query(Follower)
        .filter(Follower.target_pet_id == pet_id)
        .order_by(Follower.created_at.desc(), Follower.id.desc())
        .all()
    )
    return [actor_from_ref(r.follower_id, r.is_user_follower) for r in rows]


def following(db: Session, actor: Actor) -> List[str]:
    rows = (
        db.query(Follower.target_pet_id)
        .filter(
            Follower.follower_id == actor.id,
            Follower.is_user_follower == actor.is_user,
        )
        .all()
    )
    return [r.target_pet_id for r in rows]


def follower_count(db: Session, pet_id: str) -> int:
    return db.query(Follower).filter(Follower.target_pet_id == pet_id).count()


def following_count(db: Session, actor: Actor) -> int:
    return (
        db.query(Follower)
        .filter(
            Follower.follower_id == actor.id,
            Follower.is_user_follower == actor.is_user,
        )
        .count()
    )
