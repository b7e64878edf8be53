"""In-process hub for full-snapshot subscriptions.

Subscribers receive whole documents (the event, its schema, or its full
donation list), never deltas. A subscriber that falls behind only keeps the
newest pending snapshot; older pending snapshots are dropped.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from donorbase.core.logging import get_logger

logger = get_logger(__name__)

TOPIC_EVENT = "event"
TOPIC_SCHEMA = "schema"
TOPIC_DONATIONS = "donations"
TOPIC_KINDS = (TOPIC_EVENT, TOPIC_SCHEMA, TOPIC_DONATIONS)

_CLOSED = object()


def topic_for(event_id: str, kind: str) -> str:
    """Topic name for one of an event's documents.

    Raises:
        ValueError: If ``kind`` is not one of TOPIC_KINDS.
    """
    if kind not in TOPIC_KINDS:
        raise ValueError(f"Unknown topic kind '{kind}'. Valid kinds: {', '.join(TOPIC_KINDS)}")
    if kind == TOPIC_EVENT:
        return f"events/{event_id}"
    return f"events/{event_id}/{kind}"


@dataclass
class SnapshotSubscription:
    """A cancellable stream of full snapshots for one topic.

    Iterate with ``async for``; iteration ends once the subscription is
    cancelled. Usable as an async context manager that cancels on exit.
    """

    hub: "SnapshotHub"
    topic: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _queue: asyncio.Queue = field(default_factory=lambda: asyncio.Queue(maxsize=1), repr=False)
    _cancelled: bool = False
    _published: int = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _put_latest(self, item: Any) -> None:
        if self._queue.full():
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                pass
        self._queue.put_nowait(item)

    def deliver(self, snapshot: dict[str, Any]) -> None:
        """Queue a snapshot, replacing any undelivered one."""
        if not self._cancelled:
            self._published += 1
            self._put_latest(snapshot)

    def deliver_initial(self, snapshot: dict[str, Any]) -> bool:
        """Queue the snapshot read right after subscribing.

        The read may finish after a write already published a newer snapshot
        to this subscription; in that case the read is older and is dropped.

        Returns:
            True if the snapshot was queued.
        """
        if self._cancelled or self._published:
            return False
        self._put_latest(snapshot)
        return True

    async def next(self, timeout: float | None = None) -> dict[str, Any] | None:
        """Wait for the next snapshot.

        Returns:
            The snapshot, or None when the subscription was cancelled.

        Raises:
            asyncio.TimeoutError: If ``timeout`` elapsed first.
        """
        if self._cancelled and self._queue.empty():
            return None
        if timeout is None:
            item = await self._queue.get()
        else:
            item = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        if item is _CLOSED:
            return None
        return item

    def cancel(self) -> None:
        """Stop the subscription and wake up any waiting consumer."""
        if self._cancelled:
            return
        self._cancelled = True
        self.hub.unsubscribe(self)
        self._put_latest(_CLOSED)

    def __aiter__(self) -> "SnapshotSubscription":
        return self

    async def __anext__(self) -> dict[str, Any]:
        snapshot = await self.next()
        if snapshot is None:
            raise StopAsyncIteration
        return snapshot

    async def __aenter__(self) -> "SnapshotSubscription":
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.cancel()


class SnapshotHub:
    """Registry of snapshot subscriptions keyed by topic."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, dict[str, SnapshotSubscription]] = {}

    def subscribe(self, topic: str) -> SnapshotSubscription:
        subscription = SnapshotSubscription(hub=self, topic=topic)
        self._subscriptions.setdefault(topic, {})[subscription.id] = subscription
        logger.debug("Snapshot subscription added", topic=topic, subscription_id=subscription.id)
        return subscription

    def unsubscribe(self, subscription: SnapshotSubscription) -> None:
        topic_subscriptions = self._subscriptions.get(subscription.topic)
        if topic_subscriptions and subscription.id in topic_subscriptions:
            del topic_subscriptions[subscription.id]
            if not topic_subscriptions:
                del self._subscriptions[subscription.topic]
            logger.debug(
                "Snapshot subscription removed",
                topic=subscription.topic,
                subscription_id=subscription.id,
            )

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, {}))

    def publish(self, topic: str, snapshot: dict[str, Any]) -> int:
        """Deliver a snapshot to every subscriber of a topic.

        Returns:
            Number of subscriptions the snapshot was delivered to.
        """
        subscriptions = list(self._subscriptions.get(topic, {}).values())
        for subscription in subscriptions:
            subscription.deliver(snapshot)
        return len(subscriptions)

    def close(self) -> None:
        """Cancel every subscription."""
        for topic_subscriptions in list(self._subscriptions.values()):
            for subscription in list(topic_subscriptions.values()):
                subscription.cancel()
