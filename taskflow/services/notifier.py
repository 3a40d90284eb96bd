"""Best-effort event fan-out to connected observers.

Services publish from request worker threads; subscribers are WebSocket
handlers running on the event loop. Delivery is at-most-once: an event is
dropped (and logged) when a subscriber's queue is full or its loop is gone,
and publishing never raises back into the caller.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any

logger = logging.getLogger("taskflow")

ADMIN_CHANNEL = "admin"
MAX_PENDING_EVENTS = 100


def task_channel(task_id: str) -> str:
    return f"task:{task_id}"


@dataclass
class Event:
    """Outbound notification."""

    channel: str
    type: str
    data: dict[str, Any]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.data, "createdAt": self.created_at.isoformat()}


@dataclass(eq=False)
class Subscription:
    channel: str
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue

    async def get(self) -> Event:
        return await self.queue.get()


class Notifier:
    """In-process publish/subscribe keyed by channel name."""

    def __init__(self, max_pending: int = MAX_PENDING_EVENTS) -> None:
        self.max_pending = max_pending
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = Lock()

    def subscribe(self, channel: str) -> Subscription:
        """Register an observer. Must be called from the observer's running loop."""
        sub = Subscription(
            channel=channel,
            loop=asyncio.get_running_loop(),
            queue=asyncio.Queue(maxsize=self.max_pending),
        )
        with self._lock:
            self._subscriptions.setdefault(channel, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(sub.channel, [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self._subscriptions.pop(sub.channel, None)

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(channel, []))

    def publish(self, channel: str, event_type: str, data: dict[str, Any]) -> int:
        """Schedule delivery to every subscriber of ``channel``.

        Returns the number of subscribers delivery was scheduled for.
        """
        event = Event(channel=channel, type=event_type, data=data)
        with self._lock:
            subs = list(self._subscriptions.get(channel, []))

        scheduled = 0
        for sub in subs:
            try:
                sub.loop.call_soon_threadsafe(self._deliver, sub, event)
                scheduled += 1
            except RuntimeError:
                logger.warning("Dropping %s event for closed subscriber on %s", event_type, channel)
                self.unsubscribe(sub)
        return scheduled

    def _deliver(self, sub: Subscription, event: Event) -> None:
        try:
            sub.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("Dropping %s event for slow subscriber on %s", event.type, event.channel)


_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    """Get singleton notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = Notifier()
    return _notifier
