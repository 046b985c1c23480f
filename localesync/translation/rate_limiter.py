"""Process-wide pacing for outbound translation calls.

Responsibilities:
- Enforce a minimum wall-clock interval between consecutive provider call starts.
- Share one gate across every provider and every worker in the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
from time import monotonic, sleep
from typing import Callable


@dataclass(slots=True)
class RateLimiter:
    """Single global minimum-interval limiter used around provider requests.

    Acquisitions are serialized: a caller holds the gate while it sleeps out
    the remaining interval, so no two workers observe the same stale timestamp.
    """

    min_interval_seconds: float = 0.8
    clock: Callable[[], float] = monotonic
    sleeper: Callable[[float], None] = sleep
    _last_call_at: float | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def acquire(self) -> None:
        """Block until the minimum interval since the previous call has elapsed."""

        if self.min_interval_seconds <= 0.0:
            return
        with self._lock:
            now = self.clock()
            if self._last_call_at is not None:
                wait_seconds = self.min_interval_seconds - (now - self._last_call_at)
                if wait_seconds > 0.0:
                    self.sleeper(wait_seconds)
                    now = self.clock()
            self._last_call_at = now
