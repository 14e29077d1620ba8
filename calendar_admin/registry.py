"""In-memory blocked-date registry mirrored to durable storage.

The registry is the single source the API reads from. Every mutation is
written to the store first and applied in memory only after the durable
write succeeds, so a failed write never leaves the two out of sync.

Concurrency:
    Requests share one event loop. The durable write runs in a worker
    thread and is the only suspension point. Two adds of the same date may
    both pass the in-memory check; the store's primary key picks the winner
    and the loser gets AlreadyBlockedError.
"""
from typing import List, Set

from starlette.concurrency import run_in_threadpool

from calendar_admin.date_validator import date_sort_key
from calendar_admin.logging_config import get_logger
from calendar_admin.store import BlockedDateStore, DuplicateDateError

logger = get_logger(__name__)


class AlreadyBlockedError(Exception):
    """Raised when blocking a date that is already blocked."""
    pass


class NotBlockedError(Exception):
    """Raised when unblocking a date that is not blocked."""
    pass


class DateRegistry:
    """
    Deduplicated set of blocked dates, exposed in chronological order.

    One instance per process, built at startup and handed to the API layer.
    Call reload() before serving requests.
    """

    def __init__(self, store: BlockedDateStore):
        self._store = store
        self._dates: Set[str] = set()

    def list(self) -> List[str]:
        """Snapshot of blocked dates, oldest first."""
        return sorted(self._dates, key=date_sort_key)

    def __len__(self) -> int:
        return len(self._dates)

    def __contains__(self, value: str) -> bool:
        return value in self._dates

    async def add(self, value: str):
        """
        Block a date.

        Raises:
            AlreadyBlockedError: If the date is already blocked
            PersistenceError: If the durable write fails
        """
        if value in self._dates:
            raise AlreadyBlockedError(f"Date {value} is already blocked")

        try:
            await run_in_threadpool(self._store.insert, value)
        except DuplicateDateError as e:
            # Memory is left alone: the winning add records the date itself
            logger.info("block_conflict_resolved_by_store", date=value)
            raise AlreadyBlockedError(f"Date {value} is already blocked") from e

        self._dates.add(value)

    async def remove(self, value: str):
        """
        Unblock a date.

        Raises:
            NotBlockedError: If the date is not blocked
            PersistenceError: If the durable delete fails
        """
        if value not in self._dates:
            raise NotBlockedError(f"Date {value} is not blocked")

        deleted = await run_in_threadpool(self._store.delete, value)
        self._dates.discard(value)

        if not deleted:
            logger.info("unblock_conflict_resolved_by_store", date=value)
            raise NotBlockedError(f"Date {value} is not blocked")

    async def reload(self) -> int:
        """
        Replace the in-memory set with a full scan of the store.

        Returns:
            Number of dates loaded
        """
        values = await run_in_threadpool(self._store.list_dates)
        self._dates = set(values)
        return len(self._dates)
