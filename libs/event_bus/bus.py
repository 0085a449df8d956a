import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class NotificationBus:
    """Synchronous in-process publish/subscribe.

    Listeners run in registration order on the publisher's call stack. An
    exception raised by a listener propagates to the publisher and the
    listeners after it are not called for that publish.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event_kind: str, listener: Listener) -> None:
        self._listeners.setdefault(event_kind, []).append(listener)

    def unsubscribe(self, event_kind: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_kind)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event_kind]

    def listener_count(self, event_kind: str) -> int:
        return len(self._listeners.get(event_kind, ()))

    def publish(self, event_kind: str, payload: Any) -> None:
        # snapshot so a listener that (un)subscribes doesn't shift iteration
        for listener in list(self._listeners.get(event_kind, ())):
            listener(payload)


class TopicBus:
    def __init__(self) -> None:
        self._topics: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def subscribe(self, topic: str, ws: WebSocket) -> None:
        async with self._lock:
            self._topics.setdefault(topic, set()).add(ws)

    async def unsubscribe(self, topic: str, ws: WebSocket) -> None:
        async with self._lock:
            if topic in self._topics:
                self._topics[topic].discard(ws)
                if not self._topics[topic]:
                    del self._topics[topic]

    async def subscriber_count(self, topic: str) -> int:
        async with self._lock:
            return len(self._topics.get(topic, ()))

    async def publish(self, topic: str, message: dict) -> None:
        # Broadcast best-effort; a closed socket is dropped, not retried
        async with self._lock:
            conns = list(self._topics.get(topic, set()))
        if not conns:
            return
        data = json.dumps(message, ensure_ascii=False)
        dead = []
        for ws in conns:
            try:
                await ws.send_text(data)
            except Exception as e:
                logger.info("dropping websocket on %s: %s: %s", topic, type(e).__name__, e)
                dead.append(ws)
        if dead:
            async with self._lock:
                for ws in dead:
                    self._topics.get(topic, set()).discard(ws)
