# teamcode/core/notifier.py
import asyncio
import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Event = Dict[str, Any]


@dataclass
class _Subscription:
    callback: Callable[[Event], None]
    team_id: Optional[int] = None

    def wants(self, event: Event) -> bool:
        return self.team_id is None or event.get("team_id") == self.team_id


class ChangeNotifier:
    """
    Broadcast channel for commit and revert events.

    Delivery is fire-and-forget: each subscriber connected at the moment of
    `publish` gets the event at most once, and nothing is kept for observers
    that subscribe later. A subscriber that raises is dropped; the publisher
    never sees the failure.
    """

    def __init__(self):
        self._subscriptions: Dict[int, _Subscription] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[Event], None], team_id: Optional[int] = None) -> int:
        """Register `callback`; pass `team_id` to only receive that team's events."""
        with self._lock:
            token = next(self._tokens)
            self._subscriptions[token] = _Subscription(callback=callback, team_id=team_id)
        logger.info("Observer %s subscribed (team=%s). Total observers: %s", token, team_id, len(self._subscriptions))
        return token

    def unsubscribe(self, token: int) -> None:
        with self._lock:
            removed = self._subscriptions.pop(token, None)
        if removed is not None:
            logger.info("Observer %s unsubscribed", token)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, event: Event) -> int:
        """Send `event` to every matching subscriber. Returns how many got it."""
        with self._lock:
            targets = [(token, sub) for token, sub in self._subscriptions.items() if sub.wants(event)]

        delivered = 0
        failed = []
        for token, sub in targets:
            try:
                sub.callback(event)
                delivered += 1
            except Exception as e:
                logger.warning("Failed to deliver %s event to observer %s: %s", event.get("type"), token, e)
                failed.append(token)

        for token in failed:
            self.unsubscribe(token)
        return delivered


class QueueSubscriber:
    """
    Bridges the notifier to an asyncio consumer.

    The engine publishes from FastAPI's threadpool, so events are handed to
    the consumer's loop with call_soon_threadsafe.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()
        self.queue: "asyncio.Queue[Event]" = asyncio.Queue()

    def __call__(self, event: Event) -> None:
        self.loop.call_soon_threadsafe(self.queue.put_nowait, event)

    async def get(self) -> Event:
        return await self.queue.get()
