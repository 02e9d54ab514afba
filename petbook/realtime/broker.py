import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

# Per-subscription memory of delivered event ids
SEEN_LIMIT = 1000


def room_channel(room_id: str) -> str:
    return f"chat_messages:room_id={room_id}"


def notification_channel(actor_key: str) -> str:
    return f"notifications:{actor_key}"


class _Subscription:
    def __init__(self, key: str, handler: Handler):
        self.key = key
        self.handler = handler
        self._seen: "OrderedDict[Any, None]" = OrderedDict()
        self._lock = threading.Lock()

    def deliver(self, event: Dict[str, Any]) -> bool:
        event_id = event.get("id")

        with self._lock:
            if event_id is not None:
                if event_id in self._seen:
                    return False
                self._seen[event_id] = None
                if len(self._seen) > SEEN_LIMIT:
                    self._seen.popitem(last=False)

        self.handler(event)
        return True


class _Hub:
    """
    In-process pub/sub keyed by "table:filter" channel names.
    - subscribe() returns the function that cancels the subscription
    - each subscription sees a given event id at most once
    - a failing handler never reaches the publisher
    """
    def __init__(self):
        self._subs: Dict[str, Dict[int, _Subscription]] = {}
        self._lock = threading.Lock()
        self._next_id = 0

    def subscribe(self, key: str, handler: Handler) -> Callable[[], None]:
        sub = _Subscription(key, handler)
        with self._lock:
            self._next_id += 1
            sid = self._next_id
            self._subs.setdefault(key, {})[sid] = sub

        def unsubscribe():
            with self._lock:
                subs = self._subs.get(key)
                if subs is None:
                    return
                subs.pop(sid, None)
                if not subs:
                    del self._subs[key]

        return unsubscribe

    def subscriber_count(self, key: str) -> int:
        with self._lock:
            return len(self._subs.get(key, {}))

    def publish(self, key: str, event: Dict[str, Any]) -> int:
        with self._lock:
            subs = list(self._subs.get(key, {}).values())

        delivered = 0
        for sub in subs:
            try:
                if sub.deliver(event):
                    delivered += 1
            except Exception:
                logger.exception("Realtime handler failed on %s", key)

        return delivered


hub = _Hub()
