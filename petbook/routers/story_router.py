from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from petbook.config import settings
from petbook.core import stories
from petbook.core.actor import Actor
from petbook.core.actor_access import get_current_actor, get_current_pet_actor
from petbook.database import get_db
from petbook.routers.serializers import actor_preview, story_out
from petbook.schemas.story_schema import (
    StoriesBarOut,
    StoryCreate,
    StoryOut,
    StoryViewRecorded,
    StoryViewsOut,
)


router = APIRouter(prefix="/stories", tags=["Stories"])


@router.post("", response_model=StoryOut, status_code=201)
def create_story(
    payload: StoryCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_pet_actor),
):
    story = stories.create_story(db, actor, payload.media_url, payload.description)
    return story_out(story)


# --------------------------------------------------
# STORIES BAR (clients poll every poll_seconds)
# --------------------------------------------------
@router.get("", response_model=StoriesBarOut)
def stories_bar(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    visible = stories.visible_stories_for(db, actor)
    viewed = stories.viewed_story_ids(db, actor, [s.id for s in visible])

    return StoriesBarOut(
        poll_seconds=settings.STORY_POLL_SECONDS,
        stories=[story_out(s, s.id in viewed) for s in visible],
    )


@router.get("/{story_id}", response_model=StoryOut)
def read_story(
    story_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    story = stories.get_story(db, story_id)
    viewed = stories.viewed_story_ids(db, actor, [story.id])
    return story_out(story, story.id in viewed)


@router.delete("/{story_id}", status_code=204)
def delete_story(
    story_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    stories.delete_story(db, actor, story_id)


# --------------------------------------------------
# VIEWS
# --------------------------------------------------
@router.post("/{story_id}/views", response_model=StoryViewRecorded)
def record_view(
    story_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    first = stories.record_view(db, actor, story_id)
    return StoryViewRecorded(story_id=story_id, first_view=first)


@router.get("/{story_id}/views", response_model=StoryViewsOut)
def story_views(
    story_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    viewers = stories.list_viewers(db, actor, story_id)
    return StoryViewsOut(
        story_id=story_id,
        total=stories.view_count(db, story_id),
        professional=stories.view_count(db, story_id, only_professional=True),
        viewers=[actor_preview(db, v) for v in viewers],
    )
