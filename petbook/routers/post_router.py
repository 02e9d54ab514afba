from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from petbook.core import ledger
from petbook.core.actor import Actor, actor_from_columns
from petbook.core.actor_access import get_current_actor, get_current_pet_actor
from petbook.core.feed import assemble_feed
from petbook.core.posts import create_post, get_post
from petbook.database import get_db
from petbook.models.comment import Comment
from petbook.routers.serializers import actor_preview, posts_out
from petbook.schemas.post_schema import (
    CommentCreate,
    CommentOut,
    PostCreate,
    PostOut,
    ReactionSummaryOut,
    ReactionToggle,
)


router = APIRouter(tags=["Posts"])


def serialize_comment(db: Session, comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        post_id=comment.post_id,
        author=actor_preview(db, actor_from_columns(comment.pet_id, comment.user_id)),
        text=comment.text,
        created_at=comment.created_at,
    )


# --------------------------------------------------
# CREATE POST
# --------------------------------------------------
@router.post("/posts", response_model=PostOut, status_code=201)
def publish_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_pet_actor),
):
    post = create_post(db, actor, payload.description, payload.media_url)
    return posts_out(db, [post], actor)[0]


# --------------------------------------------------
# FEED (own + followed pets; everyone for professionals)
# --------------------------------------------------
@router.get("/feed", response_model=list[PostOut])
def feed(
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    posts = assemble_feed(db, actor, limit=limit, offset=offset)
    return posts_out(db, posts, actor)


@router.get("/posts/{post_id}", response_model=PostOut)
def read_post(
    post_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return posts_out(db, [get_post(db, post_id)], actor)[0]


# --------------------------------------------------
# REACTIONS
# --------------------------------------------------
@router.post("/posts/{post_id}/reactions", response_model=ReactionSummaryOut)
def toggle_reaction(
    post_id: str,
    payload: ReactionToggle,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    ledger.toggle_reaction(db, actor, post_id, payload.type)
    return ledger.reaction_summary(db, post_id, actor)


@router.get("/posts/{post_id}/reactions", response_model=ReactionSummaryOut)
def read_reactions(
    post_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    get_post(db, post_id)
    return ledger.reaction_summary(db, post_id, actor)


# --------------------------------------------------
# COMMENTS (oldest first)
# --------------------------------------------------
@router.get("/posts/{post_id}/comments", response_model=list[CommentOut])
def list_comments(
    post_id: str,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return [serialize_comment(db, c) for c in ledger.list_comments(db, post_id, limit)]


@router.post("/posts/{post_id}/comments", response_model=CommentOut, status_code=201)
def create_comment(
    post_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    comment = ledger.add_comment(db, actor, post_id, payload.text)
    return serialize_comment(db, comment)
