"""
24-hour stories.

A story is a ``posts`` row with type "story" and an ``expires_at``.
Views are recorded with INSERT .. ON CONFLICT DO NOTHING (or a savepoint
where the dialect has no such clause) against the
(story, viewer) unique constraints, so repeated or concurrent views of
the same story by the same viewer count once.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petbook.config import settings
from petbook.core.actor import Actor, actor_columns, actor_filter, actor_from_columns
from petbook.core.errors import NotFoundError, ValidationError
from petbook.core.feed import visible_pet_ids
from petbook.models.post import Post
from petbook.models.story_view import StoryView
from petbook.utils.time import utcnow

logger = logging.getLogger(__name__)


def is_visible(story: Post, now: Optional[datetime] = None) -> bool:
    now = now or utcnow()
    return story.expires_at is not None and now < story.expires_at


def create_story(
    db: Session,
    actor: Actor,
    media_url: str,
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Post:
    if actor.is_user:
        raise ValidationError("Only pets can publish stories")
    if not media_url:
        raise ValidationError("A story needs media")

    now = now or utcnow()
    story = Post(
        pet_id=actor.id,
        type="story",
        media_url=media_url,
        description=(description or "").strip() or None,
        created_at=now,
        expires_at=now + timedelta(hours=settings.STORY_TTL_HOURS),
    )
    db.add(story)
    db.commit()
    db.refresh(story)
    return story


def get_story(db: Session, story_id: str, now: Optional[datetime] = None) -> Post:
    """A live story; expired ones are reported as missing."""
    story = db.get(Post, story_id)
    if not story or story.type != "story" or not is_visible(story, now):
        raise NotFoundError("Story not found")
    return story


def visible_stories_for(db: Session, actor: Actor, now: Optional[datetime] = None) -> List[Post]:
    """
    Most recent live story per pet, newest first.
    Pets see themselves and the pets they follow; professionals see the
    latest STORY_PROFESSIONAL_LIMIT pets with a live story.
    """
    now = now or utcnow()

    query = db.query(Post).filter(Post.type == "story", Post.expires_at > now)

    pet_ids = visible_pet_ids(db, actor)
    if pet_ids is not None:
        query = query.filter(Post.pet_id.in_(pet_ids))

    latest: Dict[str, Post] = {}
    for story in query.order_by(Post.created_at.desc(), Post.id.desc()):
        if story.pet_id in latest:
            continue
        latest[story.pet_id] = story
        if pet_ids is None and len(latest) >= settings.STORY_PROFESSIONAL_LIMIT:
            break

    return list(latest.values())


# Dialects with a native INSERT .. ON CONFLICT DO NOTHING
UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_view(db: Session, values: dict) -> bool:
    insert = UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is not None:
        result = db.execute(insert(StoryView).values(**values).on_conflict_do_nothing())
        return result.rowcount == 1

    try:
        with db.begin_nested():
            db.add(StoryView(**values))
    except IntegrityError:
        logger.debug("Story view %s already recorded", values["story_id"])
        return False
    return True


def record_view(db: Session, actor: Actor, story_id: str, now: Optional[datetime] = None) -> bool:
    """
    Record that ``actor`` saw a story. Returns True for a first view.
    Expired stories are rejected with NotFoundError.
    """
    now = now or utcnow()
    get_story(db, story_id, now)

    first = _insert_view(
        db,
        dict(
            story_id=story_id,
            created_at=now,
            **actor_columns(actor, "viewer_pet_id", "viewer_user_id"),
        ),
    )
    db.commit()

    return first


def viewed_story_ids(db: Session, actor: Actor, story_ids: List[str]) -> set:
    if not story_ids:
        return set()

    rows = (
        db.query(StoryView.story_id)
        .filter(
            StoryView.story_id.in_(story_ids),
            actor_filter(StoryView.viewer_pet_id, StoryView.viewer_user_id, actor),
        )
        .all()
    )
    return {r.story_id for r in rows}


def view_count(db: Session, story_id: str, only_professional: bool = False) -> int:
    query = db.query(func.count(StoryView.id)).filter(StoryView.story_id == story_id)
    if only_professional:
        query = query.filter(StoryView.viewer_user_id.isnot(None))
    return query.scalar() or 0


def _require_owner(db: Session, actor: Actor, story_id: str) -> Post:
    story = db.get(Post, story_id)
    if not story or story.type != "story":
        raise NotFoundError("Story not found")
    if actor.is_user or story.pet_id != actor.id:
        raise NotFoundError("Story not found")
    return story


def list_viewers(db: Session, actor: Actor, story_id: str) -> List[Actor]:
    """Who viewed the story, most recent first. Owner only."""
    _require_owner(db, actor, story_id)

    rows = (
        db.query(StoryView)
        .filter(StoryView.story_id == story_id)
        .order_by(StoryView.created_at.desc(), StoryView.id.desc())
        .all()
    )
    return [actor_from_columns(r.viewer_pet_id, r.viewer_user_id) for r in rows]


def delete_story(db: Session, actor: Actor, story_id: str) -> None:
    story = _require_owner(db, actor, story_id)
    db.delete(story)
    db.commit()
    logger.info("Story %s deleted by %s", story_id, actor.key)
