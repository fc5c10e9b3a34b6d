"""Per-client sliding-window request limiter."""

import threading
import time
from typing import Callable, Dict, List


class RateLimiter:
    """
    Allow at most ``limit`` hits per client within ``window_seconds``.
    """

    def __init__(self, limit: int = 20, window_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _recent(self, client_id: str, now: float) -> List[float]:
        recent = [t for t in self._hits.get(client_id, []) if now - t < self.window_seconds]
        if recent:
            self._hits[client_id] = recent
        else:
            self._hits.pop(client_id, None)
        return recent

    def _sweep(self, now: float) -> None:
        # drop clients whose hits have all expired, at most once per window
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for client_id in list(self._hits):
            self._recent(client_id, now)

    def allow(self, client_id: str) -> bool:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            recent = self._recent(client_id, now)
            if len(recent) >= self.limit:
                return False
            recent.append(now)
            self._hits[client_id] = recent
            return True

    def remaining(self, client_id: str) -> int:
        with self._lock:
            return max(0, self.limit - len(self._recent(client_id, self._clock())))
