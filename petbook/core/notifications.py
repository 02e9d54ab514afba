import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from petbook.config import settings
from petbook.core.actor import Actor, account_id, actor_columns, actor_filter
from petbook.models.notification import Notification
from petbook.realtime.broker import notification_channel
from petbook.realtime.outbox import enqueue

logger = logging.getLogger(__name__)


def _owner_filter(actor: Actor):
    return actor_filter(Notification.pet_id, Notification.user_id, actor)


def unread_count(db: Session, owner: Actor) -> int:
    return (
        db.query(Notification)
        .filter(_owner_filter(owner), Notification.is_read.is_(False))
        .count()
    )


def notify(
    db: Session,
    owner: Actor,
    n_type: str,
    message: str,
    related: Actor,
) -> Optional[Notification]:
    """
    Record a notification for ``owner`` caused by ``related``.

    - dropped when both sides belong to the same account
    - runs in a savepoint: a failure here is logged and never
      rolls back the action that triggered it
    - the caller commits; the push event goes out with that commit
    """
    try:
        owner_account = account_id(db, owner)
        if owner_account is None:
            logger.warning("Notification owner %s no longer exists", owner.key)
            return None

        if owner_account == account_id(db, related):
            return None

        with db.begin_nested():
            notification = Notification(
                type=n_type,
                message=message,
                **actor_columns(owner, "pet_id", "user_id"),
                **actor_columns(related, "related_pet_id", "related_user_id"),
            )
            db.add(notification)

        enqueue(
            db,
            notification_channel(owner.key),
            {
                "id": f"notification:{notification.id}",
                "type": n_type,
                "notification_id": notification.id,
                "message": message,
                "unread_count": unread_count(db, owner),
            },
        )
    except SQLAlchemyError:
        logger.exception("Notification fan-out failed (%s -> %s)", related.key, owner.key)
        return None

    return notification


def list_notifications(db: Session, owner: Actor, limit: Optional[int] = None) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(_owner_filter(owner))
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit or settings.NOTIFICATION_PAGE_SIZE)
        .all()
    )


def mark_all_read(db: Session, owner: Actor) -> int:
    updated = (
        db.query(Notification)
        .filter(_owner_filter(owner), Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )

    if updated:
        enqueue(
            db,
            notification_channel(owner.key),
            # Read-state changes carry no row id: always delivered
            {"type": "read", "unread_count": 0},
        )

    db.commit()
    return updated
