"""
In-process rate limiting for OTP requests.

Entries live in memory, split across a fixed number of shards. Each shard
has its own lock, so the read-modify-write for one identifier is atomic
while different identifiers rarely contend.

Usage::

    from apps.core.throttling import RateLimiter

    limiter = RateLimiter(max_attempts=3, window_seconds=60, block_seconds=300)
    decision = limiter.check("919876543210")
    if not decision.allowed:
        raise RateLimitedError(retry_after=decision.retry_after)
"""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from apps.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SHARD_COUNT = 32


@dataclass
class RateLimitEntry:
    """Counter state for one identifier."""

    count: int
    reset_time: float
    blocked: bool = False

    def is_expired(self, now: float) -> bool:
        return now > self.reset_time


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    retry_after: int = 0
    just_blocked: bool = False


class _Shard:
    __slots__ = ("entries", "lock")

    def __init__(self) -> None:
        self.entries: dict[str, RateLimitEntry] = {}
        self.lock = threading.Lock()


class RateLimiter:
    """
    Rolling-window limiter with a block period.

    The window starts at the first attempt. When the attempt count within
    the window exceeds ``max_attempts`` the identifier is blocked for
    ``block_seconds``. Expired entries are treated as absent, so a sweep is
    only needed to bound memory.

    Args:
        max_attempts: Allowed attempts per window.
        window_seconds: Length of the counting window.
        block_seconds: How long an identifier stays blocked.
        clock: Returns the current time in seconds. Injectable for tests.
        shard_count: Number of independently locked shards.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        window_seconds: float = 60,
        block_seconds: float = 300,
        clock: Callable[[], float] = time.time,
        shard_count: int = DEFAULT_SHARD_COUNT,
    ) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.block_seconds = block_seconds
        self.clock = clock
        self._shards = [_Shard() for _ in range(shard_count)]
        self._sweeper: threading.Thread | None = None
        self._stop_sweeper = threading.Event()

    def _shard_for(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def check(self, key: str) -> RateLimitDecision:
        """
        Record an attempt for ``key`` and decide whether it is allowed.

        Returns:
            RateLimitDecision with ``retry_after`` in whole seconds when denied.
        """
        shard = self._shard_for(key)
        with shard.lock:
            now = self.clock()
            entry = shard.entries.get(key)

            if entry is None or entry.is_expired(now):
                shard.entries[key] = RateLimitEntry(
                    count=1,
                    reset_time=now + self.window_seconds,
                )
                return RateLimitDecision(allowed=True)

            if entry.blocked:
                return RateLimitDecision(
                    allowed=False,
                    retry_after=math.ceil(entry.reset_time - now),
                )

            entry.count += 1
            if entry.count > self.max_attempts:
                entry.blocked = True
                entry.reset_time = now + self.block_seconds
                logger.warning(
                    "rate_limit_blocked",
                    limit=self.max_attempts,
                    window=self.window_seconds,
                    block=self.block_seconds,
                )
                return RateLimitDecision(
                    allowed=False,
                    retry_after=math.ceil(self.block_seconds),
                    just_blocked=True,
                )

            return RateLimitDecision(allowed=True)

    def remaining(self, key: str) -> int:
        """Attempts left in the current window for ``key``."""
        shard = self._shard_for(key)
        with shard.lock:
            entry = shard.entries.get(key)
            if entry is None or entry.is_expired(self.clock()):
                return self.max_attempts
            if entry.blocked:
                return 0
            return max(0, self.max_attempts - entry.count)

    def reset(self, key: str | None = None) -> None:
        """Forget one identifier, or everything when ``key`` is None."""
        shards = self._shards if key is None else [self._shard_for(key)]
        for shard in shards:
            with shard.lock:
                if key is None:
                    shard.entries.clear()
                else:
                    shard.entries.pop(key, None)

    def __len__(self) -> int:
        return sum(len(shard.entries) for shard in self._shards)

    def sweep(self) -> int:
        """
        Remove expired entries.

        Expiry is checked under the shard lock at deletion time, so an entry
        refreshed by a concurrent ``check`` is never dropped.

        Returns:
            Number of entries removed.
        """
        removed = 0
        for shard in self._shards:
            with shard.lock:
                now = self.clock()
                expired = [k for k, entry in shard.entries.items() if entry.is_expired(now)]
                for k in expired:
                    del shard.entries[k]
                removed += len(expired)

        if removed:
            logger.info("rate_limit_swept", removed=removed, remaining=len(self))
        return removed

    def start_sweeper(self, interval_seconds: float = 300) -> None:
        """Run ``sweep`` every ``interval_seconds`` on a daemon thread."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return

        self._stop_sweeper.clear()

        def _run() -> None:
            while not self._stop_sweeper.wait(interval_seconds):
                try:
                    self.sweep()
                except Exception:
                    logger.exception("rate_limit_sweep_failed")

        self._sweeper = threading.Thread(target=_run, name="rate-limit-sweeper", daemon=True)
        self._sweeper.start()
        logger.info("rate_limit_sweeper_started", interval=interval_seconds)

    def stop_sweeper(self, timeout: float | None = 5) -> None:
        """Stop the sweeper thread if it is running."""
        if self._sweeper is None:
            return
        self._stop_sweeper.set()
        self._sweeper.join(timeout)
        self._sweeper = None
