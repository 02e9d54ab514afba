from typing import Optional

from sqlalchemy.orm import Session

from petbook.core.actor import PetActor
from petbook.core.errors import NotFoundError, ValidationError
from petbook.models.post import Post
from petbook.utils.time import utcnow


def create_post(
    db: Session,
    actor: PetActor,
    description: Optional[str] = None,
    media_url: Optional[str] = None,
) -> Post:
    if actor.is_user:
        raise ValidationError("Only pets can publish posts")

    description = (description or "").strip() or None
    if not description and not media_url:
        raise ValidationError("A post needs a description or media")

    post = Post(
        pet_id=actor.id,
        type="post",
        description=description,
        media_url=media_url,
        created_at=utcnow(),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def get_post(db: Session, post_id: str) -> Post:
    post = db.get(Post, post_id)
    if not post:
        raise NotFoundError("Post not found")
    return post
