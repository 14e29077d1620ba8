"""Publish/subscribe hub for registry snapshots.

Every observer gets the full ordered list of blocked dates, never a diff.
Each subscription keeps only the newest unread snapshot, so a slow observer
skips intermediate states instead of queueing them.
"""
import asyncio
import itertools
from typing import Dict, List, Optional

from calendar_admin.logging_config import get_logger

logger = get_logger(__name__)

_subscription_ids = itertools.count(1)


class Subscription:
    """Handle returned by NotificationChannel.subscribe()."""

    def __init__(self):
        self.id = next(_subscription_ids)
        self._mailbox: asyncio.Queue = asyncio.Queue(maxsize=1)

    def offer(self, snapshot: List[str]):
        """Store snapshot, replacing one the observer has not read yet."""
        if self._mailbox.full():
            try:
                self._mailbox.get_nowait()
            except asyncio.QueueEmpty:
                pass
        self._mailbox.put_nowait(list(snapshot))

    async def next_snapshot(self, timeout: Optional[float] = None) -> Optional[List[str]]:
        """
        Wait for the next snapshot.

        Returns:
            The snapshot, or None if timeout elapsed first
        """
        if timeout is None:
            return await self._mailbox.get()
        try:
            return await asyncio.wait_for(self._mailbox.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def __repr__(self):
        return f"<Subscription(id={self.id})>"


class NotificationChannel:
    """
    Fan-out of registry snapshots to connected observers.

    publish() never awaits: it drops the snapshot into each mailbox and
    returns, so broadcasting never delays the mutation response.
    """

    def __init__(self):
        self._subscriptions: Dict[int, Subscription] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self) -> Subscription:
        subscription = Subscription()
        self._subscriptions[subscription.id] = subscription
        logger.info("observer_subscribed", subscription_id=subscription.id,
                    observers=self.subscriber_count)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        if self._subscriptions.pop(subscription.id, None) is not None:
            logger.info("observer_unsubscribed", subscription_id=subscription.id,
                        observers=self.subscriber_count)

    def publish(self, snapshot: List[str]) -> int:
        """
        Deliver snapshot to every subscriber.

        Returns:
            Number of subscribers the snapshot was handed to
        """
        subscriptions = list(self._subscriptions.values())
        for subscription in subscriptions:
            subscription.offer(snapshot)
        logger.debug("snapshot_published", observers=len(subscriptions), total=len(snapshot))
        return len(subscriptions)
