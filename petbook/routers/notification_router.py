from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from petbook.core import notifications
from petbook.core.actor import Actor, actor_from_columns
from petbook.core.actor_access import get_current_actor
from petbook.database import get_db
from petbook.routers.serializers import actor_preview
from petbook.schemas.notification_schema import NotificationOut, UnreadCountOut


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return [
        NotificationOut(
            id=n.id,
            type=n.type,
            message=n.message,
            is_read=n.is_read,
            created_at=n.created_at,
            related=actor_preview(
                db, actor_from_columns(n.related_pet_id, n.related_user_id)
            ),
        )
        for n in notifications.list_notifications(db, actor, limit)
    ]


@router.get("/unread-count", response_model=UnreadCountOut)
def unread_count(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return UnreadCountOut(unread_count=notifications.unread_count(db, actor))


@router.post("/read", response_model=UnreadCountOut)
def mark_read(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    notifications.mark_all_read(db, actor)
    return UnreadCountOut(unread_count=0)
