"""
Rate limiting module to prevent abuse and brute force attacks.

This module provides an in-memory rate limiter that tracks request
counts per identifier (IP address, user id, ...). State lives on the
limiter instance and is lost on restart; deployments with more than one
process need a shared counter store instead.
"""

import threading
import time
from typing import Callable

from .security_logger import SecurityLogger


class RateLimiter:
    """
    Rate limiter that tracks requests per identifier.

    Keeps the timestamps of accepted requests and counts the ones that fall
    inside a trailing window of ``window_seconds``.
    """

    def __init__(self, max_requests: int, window_seconds: float,
                 clock: Callable[[], float] = time.monotonic,
                 cleanup_interval: float = 3600):
        """
        Initialize the rate limiter with empty storage.

        Args:
            max_requests: Maximum number of requests allowed in the window
            window_seconds: Length of the window in seconds
            clock: Source of the current time in seconds
            cleanup_interval: Seconds between sweeps of idle identifiers
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._storage: dict[str, list[float]] = {}
        self._lock = threading.Lock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = clock()

    def _prune(self, identifier: str, now: float) -> list[float]:
        """Drop timestamps outside the window. Caller holds the lock."""
        cutoff = now - self.window_seconds
        timestamps = [ts for ts in self._storage.get(identifier, ()) if ts > cutoff]
        if timestamps:
            self._storage[identifier] = timestamps
        else:
            self._storage.pop(identifier, None)
        return timestamps

    def _cleanup_old_entries(self, now: float):
        """Remove identifiers with no timestamps left in the window. Caller holds the lock."""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        for key in list(self._storage):
            self._prune(key, now)
        self._last_cleanup = now

    def is_allowed(self, identifier: str) -> bool:
        """
        Check if a request is allowed and record it if so.

        A refused request is not recorded, so it does not push back the
        moment the identifier becomes allowed again.

        Args:
            identifier: Unique identifier (IP address or user ID)

        Returns:
            True if the request fits in the current window
        """
        with self._lock:
            now = self._clock()
            self._cleanup_old_entries(now)
            timestamps = self._prune(identifier, now)

            # Check BEFORE adding current request
            if len(timestamps) >= self.max_requests:
                SecurityLogger.log_rate_limit_exceeded(
                    identifier, len(timestamps), self.max_requests
                )
                return False

            timestamps.append(now)
            self._storage[identifier] = timestamps
            return True

    def remaining(self, identifier: str) -> int:
        """
        Get the number of requests still allowed in the current window.

        Does not record anything.

        Args:
            identifier: Unique identifier (IP address or user ID)

        Returns:
            Remaining requests, never negative
        """
        with self._lock:
            cutoff = self._clock() - self.window_seconds
            count = sum(1 for ts in self._storage.get(identifier, ()) if ts > cutoff)
            return max(0, self.max_requests - count)

    def reset(self, identifier: str):
        """Reset rate limit for a specific identifier."""
        with self._lock:
            self._storage.pop(identifier, None)

    def tracked_identifiers(self) -> int:
        """Number of identifiers currently holding state."""
        with self._lock:
            return len(self._storage)
