"""Rate limiting for bot actions by user."""
import threading
import time
from typing import Callable, Dict, List


class RateLimitExceeded(Exception):
    """Raised when rate limit is exceeded."""
    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


class RateLimiter:
    """
    In-memory rate limiter using sliding window algorithm.

    Pattern: Sliding window keyed by user identity. Good for a single bot
    process; nothing is shared across processes.
    """

    def __init__(
        self,
        requests: int = 5,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = requests
        self.window_seconds = window_seconds

        # {key: [timestamp1, timestamp2, ...]}, only keys with recent actions
        self.request_log: Dict[str, List[float]] = {}

        self.clock = clock
        self.lock = threading.Lock()

    def _prune(self, key: str, now: float) -> List[float]:
        cutoff = now - self.window_seconds
        return [ts for ts in self.request_log.get(key, []) if ts > cutoff]

    def _forget_idle(self, now: float):
        """Drop keys whose newest action has left the window."""
        cutoff = now - self.window_seconds
        idle = [key for key, log in self.request_log.items() if log[-1] <= cutoff]
        for key in idle:
            del self.request_log[key]

    def check_rate_limit(self, key: str):
        """
        Record one action for key if it is within the limit.

        Args:
            key: User identity

        Raises:
            RateLimitExceeded: If limit exceeded (the action is not recorded)
        """
        with self.lock:
            now = self.clock()
            self._forget_idle(now)
            log = self._prune(key, now)

            if len(log) >= self.max_requests:
                oldest_request = min(log)
                retry_after = int(self.window_seconds - (now - oldest_request)) + 1

                raise RateLimitExceeded(
                    f"Rate limit exceeded for {key}: {self.max_requests} requests per {self.window_seconds}s",
                    retry_after=retry_after
                )

            log.append(now)
            self.request_log[key] = log
