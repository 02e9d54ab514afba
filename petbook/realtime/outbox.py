"""
Realtime events held until the surrounding transaction commits.

Listeners on every Session publish the queue after the outermost
COMMIT and drop it when that transaction ends any other way, so
subscribers only ever see rows that exist in the store.
"""

import logging
from typing import Any, Dict

from sqlalchemy import event
from sqlalchemy.orm import Session

from petbook.realtime.broker import hub

logger = logging.getLogger(__name__)

OUTBOX_KEY = "realtime_outbox"


def enqueue(db: Session, key: str, payload: Dict[str, Any]) -> None:
    db.info.setdefault(OUTBOX_KEY, []).append((key, payload))


def pending(db: Session) -> list:
    return list(db.info.get(OUTBOX_KEY, []))


@event.listens_for(Session, "after_commit")
def _publish_after_commit(session: Session) -> None:
    # Releasing a SAVEPOINT is not a commit of the data
    if session.in_nested_transaction():
        return

    for key, payload in session.info.pop(OUTBOX_KEY, []):
        hub.publish(key, payload)


@event.listens_for(Session, "after_transaction_end")
def _discard_uncommitted(session: Session, transaction) -> None:
    if transaction.parent is not None:
        return

    dropped = session.info.pop(OUTBOX_KEY, None)
    if dropped:
        logger.debug("Dropped %d realtime events from a rolled back transaction", len(dropped))
