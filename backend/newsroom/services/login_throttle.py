"""Per-client login attempt throttling."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Tuple

from newsroom.config import settings
from newsroom.core.exceptions import RateLimitExceededError

MINUTE = 60
HOUR = 3600


class LoginThrottle:
    """Sliding-window attempt counter for single-node deployments.

    Every attempt counts, successful or not. Attempts are keyed by client IP
    and the lowercased identifier, so one address guessing many accounts
    and many addresses guessing one account are both limited per pair.
    """

    def __init__(
        self,
        per_minute: int,
        per_hour: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._windows: Tuple[Tuple[int, int], ...] = ((MINUTE, per_minute), (HOUR, per_hour))
        self._clock = clock
        self._lock = threading.Lock()
        self._attempts: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    @staticmethod
    def _key(identifier: str, client_ip: str) -> str:
        return f"{client_ip}:{identifier.strip().lower()}"

    def check(self, identifier: str, client_ip: str) -> None:
        """
        Record one login attempt, refusing it when a window is full.

        Raises:
            RateLimitExceededError: too many attempts in the last minute or hour
        """
        now = self._clock()
        key = self._key(identifier, client_ip)
        longest = max(window for window, _ in self._windows)

        with self._lock:
            if now - self._last_sweep >= MINUTE:
                self._sweep(now - longest)
                self._last_sweep = now

            attempts = self._attempts.setdefault(key, deque())
            while attempts and attempts[0] <= now - longest:
                attempts.popleft()

            for window, limit in self._windows:
                recent = sum(1 for ts in attempts if ts > now - window)
                if recent >= limit:
                    if window == MINUTE:
                        raise RateLimitExceededError("Too many login attempts. Please wait a minute.")
                    raise RateLimitExceededError("Too many login attempts. Please try again later.")

            attempts.append(now)

    def _sweep(self, horizon: float) -> None:
        # Keys whose newest attempt left every window; caller holds the lock.
        stale = [key for key, attempts in self._attempts.items() if not attempts or attempts[-1] <= horizon]
        for key in stale:
            del self._attempts[key]

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()


login_throttle = LoginThrottle(
    per_minute=settings.LOGIN_RATE_LIMIT_PER_MINUTE,
    per_hour=settings.LOGIN_RATE_LIMIT_PER_HOUR,
)
