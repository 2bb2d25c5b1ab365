"""Fixed-window admission control keyed by client identity."""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class RateLimitRecord:
    key: str
    count: int
    window_reset_at_ms: int


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after_ms: int = 0


class FixedWindowRateLimiter:
    """
    In-memory fixed-window counter, one record per key.

    Records live in a capacity-bounded LRU map: once ``max_keys`` distinct
    keys are tracked, the least recently used record is dropped. A dropped
    key simply starts a fresh window on its next request.

    State is per process. Several server instances each admit ``limit``
    requests per window; a shared counter store is needed to enforce a
    global limit.
    """

    def __init__(self, max_keys: int = 10_000, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            max_keys: Maximum number of tracked keys before LRU eviction
            clock: Seconds source; injectable for tests
        """
        self._records: OrderedDict[str, RateLimitRecord] = OrderedDict()
        # Lock around access; one limiter is shared by every request handler
        self._lock = threading.Lock()
        self._max_keys = max(1, max_keys)
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def admit(self, key: str, limit: int, window_ms: int) -> RateLimitDecision:
        """
        Count one request for ``key`` and decide whether to admit it.

        Args:
            key: Client identity (IP address or user id), usually scoped
            limit: Maximum admitted requests per window
            window_ms: Window length in milliseconds

        Returns:
            RateLimitDecision with ``retry_after_ms`` set when rejected
        """
        now = self._now_ms()
        with self._lock:
            record = self._records.get(key)

            if record is None or now > record.window_reset_at_ms:
                self._records[key] = RateLimitRecord(key=key, count=1, window_reset_at_ms=now + window_ms)
                self._records.move_to_end(key)
                self._evict()
                return RateLimitDecision(allowed=True, limit=limit, remaining=max(0, limit - 1))

            record.count += 1
            self._records.move_to_end(key)

            if record.count > limit:
                return RateLimitDecision(
                    allowed=False,
                    limit=limit,
                    remaining=0,
                    retry_after_ms=max(0, record.window_reset_at_ms - now),
                )
            return RateLimitDecision(allowed=True, limit=limit, remaining=limit - record.count)

    def _evict(self) -> None:
        while len(self._records) > self._max_keys:
            self._records.popitem(last=False)

    def reset(self, key: str) -> None:
        """Forget the record for one key."""
        with self._lock:
            self._records.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
