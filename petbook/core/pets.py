import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from petbook.core.errors import DependencyError, NotFoundError, ValidationError
from petbook.models.chat import ChatRoom, ChatMessage
from petbook.models.comment import Comment
from petbook.models.follower import Follower
from petbook.models.health_record import HealthRecord
from petbook.models.notification import Notification
from petbook.models.pet import Pet
from petbook.models.post import Post
from petbook.models.reaction import Reaction
from petbook.models.story_view import StoryView
from petbook.models.user import User
from petbook.utils.time import utcnow

logger = logging.getLogger(__name__)

PET_FIELDS = (
    "name",
    "species",
    "breed",
    "age",
    "bio",
    "avatar_url",
    "guardian_name",
    "guardian_instagram_username",
    "guardian_instagram_url",
)


def create_pet(db: Session, user_id: str, data: dict) -> Pet:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("Account not found")
    if user.account_type != "user":
        raise ValidationError("Professional accounts cannot register pets")

    if not (data.get("name") or "").strip():
        raise ValidationError("Pet name is required")

    pet = Pet(
        user_id=user_id,
        created_at=utcnow(),
        **{k: data.get(k) for k in PET_FIELDS},
    )
    pet.name = pet.name.strip()
    if not pet.guardian_name:
        pet.guardian_name = user.full_name

    db.add(pet)
    db.commit()
    db.refresh(pet)
    return pet


def get_pet(db: Session, pet_id: str) -> Pet:
    pet = db.get(Pet, pet_id)
    if not pet:
        raise NotFoundError("Pet not found")
    return pet


def list_user_pets(db: Session, user_id: str) -> List[Pet]:
    return (
        db.query(Pet)
        .filter(Pet.user_id == user_id)
        .order_by(Pet.created_at.asc(), Pet.id.asc())
        .all()
    )


def search_pets(db: Session, q: str, limit: int = 20) -> List[Pet]:
    q = (q or "").strip()
    if not q:
        return []

    pattern = f"%{q.lower()}%"
    return (
        db.query(Pet)
        .filter(
            or_(
                Pet.name.ilike(pattern),
                Pet.guardian_name.ilike(pattern),
            )
        )
        .order_by(Pet.name.asc())
        .limit(limit)
        .all()
    )


def delete_pet(db: Session, user_id: str, pet_id: str) -> None:
    """
    Delete a pet and everything that references it, in one transaction.
    Either every row goes or none does.
    """
    pet = db.get(Pet, pet_id)
    if not pet or pet.user_id != user_id:
        raise NotFoundError("Pet not found")

    try:
        post_ids = [r.id for r in db.query(Post.id).filter(Post.pet_id == pet_id)]

        room_ids = [
            r.id
            for r in db.query(ChatRoom.id)
            .filter(
                or_(
                    (ChatRoom.party_1_id == pet_id) & (ChatRoom.party_1_is_user.is_(False)),
                    (ChatRoom.party_2_id == pet_id) & (ChatRoom.party_2_is_user.is_(False)),
                )
            )
        ]

        deletions = [
            # follower_id and chat parties are not foreign keys
            db.query(Follower).filter(
                Follower.follower_id == pet_id,
                Follower.is_user_follower.is_(False),
            ),
            db.query(Follower).filter(Follower.target_pet_id == pet_id),
            db.query(ChatMessage).filter(
                or_(
                    ChatMessage.room_id.in_(room_ids),
                    ChatMessage.sender_pet_id == pet_id,
                )
            ),
            db.query(ChatRoom).filter(ChatRoom.id.in_(room_ids)),
            db.query(Reaction).filter(
                or_(Reaction.pet_id == pet_id, Reaction.post_id.in_(post_ids))
            ),
            db.query(Comment).filter(
                or_(Comment.pet_id == pet_id, Comment.post_id.in_(post_ids))
            ),
            db.query(StoryView).filter(
                or_(
                    StoryView.viewer_pet_id == pet_id,
                    StoryView.story_id.in_(post_ids),
                )
            ),
            db.query(Notification).filter(
                or_(
                    Notification.pet_id == pet_id,
                    Notification.related_pet_id == pet_id,
                )
            ),
            db.query(HealthRecord).filter(HealthRecord.pet_id == pet_id),
            db.query(Post).filter(Post.pet_id == pet_id),
            db.query(Pet).filter(Pet.id == pet_id),
        ]

        for query in deletions:
            query.delete(synchronize_session=False)

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Deleting pet %s failed: %s", pet_id, exc)
        raise DependencyError("Could not delete pet, nothing was removed")

    logger.info("Pet %s deleted by %s", pet_id, user_id)
