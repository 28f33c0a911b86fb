"""Client-side request pacing.

Notion allows an average of three requests per second per integration.
A clear-and-append run issues one call per deleted block, so without pacing
a page of a few hundred blocks trips ``429`` almost immediately.
:class:`TokenBucket` spreads the calls out before Notion has to.
"""

from __future__ import annotations

import threading
import time


class TokenBucket:
    """Token bucket refilled at *rate_rps* up to *burst* tokens.

    The bucket starts full, so the first *burst* calls go out unpaced.
    """

    __slots__ = ("_available", "_capacity", "_lock", "_rate", "_stamp")

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self._rate = float(rate_rps)
        self._capacity = float(burst)
        self._available = float(burst)
        self._stamp = time.monotonic()
        self._lock = threading.Lock()

    def _refill(self, now: float) -> None:
        gained = (now - self._stamp) * self._rate
        self._available = min(self._capacity, self._available + gained)
        self._stamp = now

    def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, sleeping first if the bucket is short.

        Returns the seconds slept, ``0.0`` when no wait was needed.
        """
        with self._lock:
            self._refill(time.monotonic())
            shortfall = tokens - self._available
            if shortfall <= 0:
                self._available -= tokens
                return 0.0
            # Reserve the tokens now; the sleep pays for them.
            self._available = 0.0
            wait = shortfall / self._rate

        time.sleep(wait)
        return wait
