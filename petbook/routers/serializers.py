from typing import List, Optional

from sqlalchemy.orm import Session

from petbook.core.actor import Actor
from petbook.core.ledger import comment_counts, reaction_summaries
from petbook.models.pet import Pet
from petbook.models.post import Post
from petbook.models.user import User
from petbook.schemas.actor_schema import ActorOut
from petbook.schemas.pet_schema import PetPreview
from petbook.schemas.post_schema import PostOut, ReactionSummaryOut
from petbook.schemas.story_schema import StoryOut
from petbook.utils.urls import absolute_media_url


def actor_preview(db: Session, actor: Actor) -> ActorOut:
    if actor.is_user:
        user = db.get(User, actor.id)
        return ActorOut(
            kind="professional",
            id=actor.id,
            name=user.full_name if user else None,
            avatar_url=absolute_media_url(user.avatar_url) if user else None,
            is_verified=bool(user and user.is_verified),
        )

    pet = db.get(Pet, actor.id)
    return ActorOut(
        kind="pet",
        id=actor.id,
        name=pet.name if pet else None,
        avatar_url=absolute_media_url(pet.avatar_url) if pet else None,
    )


def pet_preview(pet: Pet) -> PetPreview:
    return PetPreview(
        id=pet.id,
        name=pet.name,
        avatar_url=absolute_media_url(pet.avatar_url),
        guardian_instagram_username=pet.guardian_instagram_username,
    )


# --------------------------------------------------
# POSTS (batch: one query for reactions, one for comments)
# --------------------------------------------------
def posts_out(db: Session, posts: List[Post], actor: Optional[Actor]) -> List[PostOut]:
    ids = [p.id for p in posts]
    reactions = reaction_summaries(db, ids, actor)
    comments = comment_counts(db, ids)

    return [
        PostOut(
            id=p.id,
            pet_id=p.pet_id,
            type=p.type,
            description=p.description,
            media_url=absolute_media_url(p.media_url),
            created_at=p.created_at,
            pet=pet_preview(p.pet),
            reactions=ReactionSummaryOut(**reactions[p.id]),
            comment_count=comments[p.id],
        )
        for p in posts
    ]


def story_out(story: Post, has_viewed: bool = False) -> StoryOut:
    return StoryOut(
        id=story.id,
        pet=pet_preview(story.pet),
        media_url=absolute_media_url(story.media_url),
        description=story.description,
        created_at=story.created_at,
        expires_at=story.expires_at,
        has_viewed=has_viewed,
    )
