"""Bounded exponential backoff for recoverable provider failures.

Responsibilities:
- Retry operations that fail with a retryable `ProviderError`.
- Compute waits as `base * 2**attempt + jitter` with 0-300ms of jitter.
- Propagate terminal failures and exhausted retries unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import random
import threading
import time
from typing import TYPE_CHECKING, Callable, TypeVar

from ..errors import ProviderError

if TYPE_CHECKING:
    from ..telemetry.logger import RunLogger

_Result = TypeVar("_Result")


@dataclass(slots=True)
class RetryPolicy:
    """Shared retry/backoff contract applied by every remote provider.

    Attributes:
        max_retries: Retries allowed after the first attempt.
        base_delay_seconds: Backoff base; attempt `n` waits `base * 2**n` plus jitter.
        jitter_max_seconds: Upper bound of uniformly distributed jitter.
        sleeper: Sleep function, injectable for tests.
        jitter: `uniform(low, high)` source, injectable for tests.
        run_logger: Optional structured logger for retry events.
    """

    max_retries: int = 5
    base_delay_seconds: float = 1.0
    jitter_max_seconds: float = 0.3
    sleeper: Callable[[float], None] = time.sleep
    jitter: Callable[[float, float], float] = random.uniform
    run_logger: RunLogger | None = None
    retry_attempt_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def backoff_seconds(self, attempt: int) -> float:
        """Return the wait before retry `attempt` (0-indexed)."""

        return self.base_delay_seconds * (2**attempt) + self.jitter(0.0, self.jitter_max_seconds)

    def run(self, operation: Callable[[], _Result], *, label: str = "provider") -> _Result:
        """Run `operation`, retrying retryable provider failures up to `max_retries` times."""

        attempt = 0
        while True:
            try:
                return operation()
            except ProviderError as exc:
                if not exc.retryable or attempt >= self.max_retries:
                    raise
                wait_seconds = self.backoff_seconds(attempt)
                attempt += 1
                with self._lock:
                    self.retry_attempt_count += 1
                if self.run_logger is not None:
                    self.run_logger.warning(
                        "provider",
                        "retry",
                        provider=label,
                        attempt=f"{attempt}/{self.max_retries}",
                        failure_kind=exc.failure_kind,
                        wait_ms=int(wait_seconds * 1000),
                    )
                self.sleeper(wait_seconds)
