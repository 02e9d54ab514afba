from typing import List, Optional

from sqlalchemy.orm import Session

from petbook.config import settings
from petbook.core.actor import Actor
from petbook.core.follow_graph import following
from petbook.models.post import Post


def visible_pet_ids(db: Session, actor: Actor) -> Optional[List[str]]:
    """
    Authors whose content the actor sees: itself plus followed pets.
    ``None`` means everyone (professionals see the whole community).
    """
    if actor.is_user:
        return None
    return [actor.id] + following(db, actor)


def assemble_feed(
    db: Session,
    actor: Actor,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Post]:
    """Newest first, one page. Stories never appear in the feed."""
    query = db.query(Post).filter(Post.type == "post")

    pet_ids = visible_pet_ids(db, actor)
    if pet_ids is not None:
        query = query.filter(Post.pet_id.in_(pet_ids))

    return (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(limit or settings.FEED_PAGE_SIZE)
        .all()
    )
