"""
WebSocket push channels on top of the in-process hub.

Browsers cannot set headers on a WebSocket handshake, so the access
token and the selected pet may also travel as ``token`` / ``pet_id``
query parameters.
"""

import asyncio
import logging
from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    Header,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    WebSocketException,
    status,
)
from sqlalchemy.orm import Session

from petbook.auth.supabase_auth import decode_access_token
from petbook.core.actor import Actor, resolve_actor
from petbook.core.chat import get_room
from petbook.core.errors import PetbookError
from petbook.core.notifications import unread_count
from petbook.database import get_db
from petbook.realtime.broker import hub, notification_channel, room_channel

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/realtime", tags=["Realtime"])

# Per-socket backlog before events are dropped
QUEUE_SIZE = 1000


def get_socket_actor(
    db: Session = Depends(get_db),
    token: Optional[str] = Query(None),
    pet_id: Optional[str] = Query(None),
    authorization: Optional[str] = Header(None),
    x_pet_id: Optional[str] = Header(None),
) -> Actor:
    if not token and authorization and authorization.startswith("Bearer "):
        token = authorization.replace("Bearer ", "", 1)
    if not token:
        raise WebSocketException(code=status.WS_1008_POLICY_VIOLATION, reason="Missing token")

    try:
        claims = decode_access_token(token)
        actor = resolve_actor(db, claims["sub"], pet_id or x_pet_id)
    except HTTPException as exc:
        raise WebSocketException(code=status.WS_1008_POLICY_VIOLATION, reason=str(exc.detail))
    except PetbookError as exc:
        raise WebSocketException(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)

    if actor is None:
        raise WebSocketException(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Register a pet before interacting",
        )
    return actor


def offer(queue: asyncio.Queue, key: str, payload: dict) -> None:
    """Queue an event for one socket; a client that stopped reading loses events."""
    try:
        queue.put_nowait(payload)
    except asyncio.QueueFull:
        logger.warning("Realtime client on %s is not keeping up, event dropped", key)


async def _stream(websocket: WebSocket, key: str, first: Optional[dict] = None) -> None:
    """
    Forward hub events for ``key`` until the client goes away.
    The subscription exists before the handshake completes, so nothing
    published after connect is missed.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue(maxsize=QUEUE_SIZE)

    # publish() runs on whatever thread committed the write
    unsubscribe = hub.subscribe(
        key, lambda payload: loop.call_soon_threadsafe(offer, queue, key, payload)
    )

    async def pump():
        while True:
            await websocket.send_json(await queue.get())

    sender = None
    try:
        await websocket.accept()
        if first is not None:
            await websocket.send_json(first)

        sender = asyncio.create_task(pump())
        while True:
            # Clients may send keep-alives; the content is ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Realtime client left %s", key)
    finally:
        unsubscribe()
        if sender is not None:
            sender.cancel()
            try:
                await sender
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                logger.debug("Realtime push on %s stopped: %s", key, exc)


def release(db: Session) -> None:
    """
    End the handshake's transaction so its pooled connection goes back
    before the socket starts streaming. The stream never reads the store.
    """
    db.commit()


# --------------------------------------------------
# CHAT ROOM MESSAGES
# --------------------------------------------------
@router.websocket("/rooms/{room_id}")
async def room_messages(
    websocket: WebSocket,
    room_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_socket_actor),
):
    try:
        get_room(db, actor, room_id)
    except PetbookError as exc:
        raise WebSocketException(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)

    release(db)
    await _stream(websocket, room_channel(room_id))


# --------------------------------------------------
# NOTIFICATIONS (starts with the current unread count)
# --------------------------------------------------
@router.websocket("/notifications")
async def notification_stream(
    websocket: WebSocket,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_socket_actor),
):
    snapshot = {"type": "unread", "unread_count": unread_count(db, actor)}
    release(db)
    await _stream(websocket, notification_channel(actor.key), first=snapshot)
