"""
Reactions and comments on posts.

A reaction row is keyed by (post, actor): reacting again with the same
type removes it, with another type replaces it. Comments are append-only.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petbook.config import settings
from petbook.core.actor import Actor, PetActor, actor_columns, actor_filter, display_name
from petbook.core.errors import ValidationError
from petbook.core.notifications import notify
from petbook.core.posts import get_post
from petbook.models.comment import Comment
from petbook.models.post import Post
from petbook.models.reaction import Reaction, REACTION_TYPES
from petbook.utils.time import utcnow

logger = logging.getLogger(__name__)

REACTION_EMOJI = {
    "paw": "🐾",
    "hug": "❤️",
    "treat": "🍖",
}


def _find_reaction(db: Session, post_id: str, actor: Actor) -> Optional[Reaction]:
    return (
        db.query(Reaction)
        .filter(
            Reaction.post_id == post_id,
            actor_filter(Reaction.pet_id, Reaction.user_id, actor),
        )
        .first()
    )


def _notify_reaction(db: Session, actor: Actor, post: Post, reaction_type: str) -> None:
    notify(
        db,
        PetActor(post.pet_id),
        "reaction",
        f"{display_name(db, actor)} reacted {REACTION_EMOJI[reaction_type]} to your post",
        actor,
    )


def toggle_reaction(db: Session, actor: Actor, post_id: str, reaction_type: str) -> Optional[str]:
    """
    Toggle the actor's reaction on a post and return the resulting
    reaction type (``None`` when the actor no longer reacts).
    """
    if reaction_type not in REACTION_TYPES:
        raise ValidationError(f"Unknown reaction type: {reaction_type}")

    post = get_post(db, post_id)
    existing = _find_reaction(db, post_id, actor)

    if existing is None:
        try:
            with db.begin_nested():
                db.add(
                    Reaction(
                        post_id=post_id,
                        type=reaction_type,
                        created_at=utcnow(),
                        **actor_columns(actor),
                    )
                )
        except IntegrityError:
            # A concurrent toggle from the same actor won the insert
            logger.debug("Reaction conflict on %s by %s, re-reading", post_id, actor.key)
            db.rollback()
            current = _find_reaction(db, post_id, actor)
            return current.type if current else None

        _notify_reaction(db, actor, post, reaction_type)
        result = reaction_type

    elif existing.type == reaction_type:
        db.delete(existing)
        result = None

    else:
        existing.type = reaction_type
        existing.created_at = utcnow()
        _notify_reaction(db, actor, post, reaction_type)
        result = reaction_type

    db.commit()
    return result


def reaction_summary(db: Session, post_id: str, actor: Optional[Actor] = None) -> Dict:
    return reaction_summaries(db, [post_id], actor)[post_id]


def reaction_summaries(db: Session, post_ids: List[str], actor: Optional[Actor] = None) -> Dict[str, Dict]:
    """Counts per type for each post, plus the actor's own current type."""
    summaries = {
        pid: {"counts": {t: 0 for t in REACTION_TYPES}, "total": 0, "mine": None}
        for pid in post_ids
    }
    if not post_ids:
        return summaries

    rows = (
        db.query(Reaction.post_id, Reaction.type, func.count(Reaction.id))
        .filter(Reaction.post_id.in_(post_ids))
        .group_by(Reaction.post_id, Reaction.type)
        .all()
    )
    for post_id, r_type, count in rows:
        summaries[post_id]["counts"][r_type] = count
        summaries[post_id]["total"] += count

    if actor is not None:
        mine = (
            db.query(Reaction.post_id, Reaction.type)
            .filter(
                Reaction.post_id.in_(post_ids),
                actor_filter(Reaction.pet_id, Reaction.user_id, actor),
            )
            .all()
        )
        for post_id, r_type in mine:
            summaries[post_id]["mine"] = r_type

    return summaries


# --------------------------------------------------
# COMMENTS
# --------------------------------------------------

def _preview(text: str) -> str:
    limit = settings.COMMENT_PREVIEW_LENGTH
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def add_comment(db: Session, actor: Actor, post_id: str, text: str) -> Comment:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty")

    post = get_post(db, post_id)

    comment = Comment(
        post_id=post_id,
        text=text,
        created_at=utcnow(),
        **actor_columns(actor),
    )
    db.add(comment)
    db.flush()

    notify(
        db,
        PetActor(post.pet_id),
        "comment",
        f'{display_name(db, actor)} commented: "{_preview(text)}"',
        actor,
    )

    db.commit()
    db.refresh(comment)
    return comment


def list_comments(db: Session, post_id: str, limit: Optional[int] = None) -> List[Comment]:
    get_post(db, post_id)

    query = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    if limit:
        query = query.limit(limit)
    return query.all()


def comment_counts(db: Session, post_ids: List[str]) -> Dict[str, int]:
    counts = {pid: 0 for pid in post_ids}
    if not post_ids:
        return counts

    rows = (
        db.query(Comment.post_id, func.count(Comment.id))
        .filter(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
        .all()
    )
    for post_id, count in rows:
        counts[post_id] = count
    return counts
