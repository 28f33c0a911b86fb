"""When to retry a Notion request, and how long to wait first.

Retries happen only in the transport, below the sync engine.  A request
that still fails after its last attempt surfaces as an error and the engine
stops the enclosing operation.
"""

from __future__ import annotations

import random

import httpx

# Rate limiting and transient server failures.
_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Return ``True`` if attempt *attempt* (0-based) deserves another try.

    A send that raised is retried only for timeouts and connection-level
    failures; a response is retried only for the statuses in
    ``_RETRYABLE_STATUSES``.  Nothing is retried once *max_attempts* is
    reached.
    """
    if attempt >= max_attempts - 1:
        return False
    if exception is not None:
        return isinstance(exception, (httpx.TimeoutException, httpx.NetworkError))
    return status_code in _RETRYABLE_STATUSES


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to sleep before the attempt after *attempt*.

    Parameters
    ----------
    attempt:
        The attempt that just failed, 0-based.
    base, maximum:
        Exponential schedule ``base * 2**attempt``, capped at *maximum*.
    jitter:
        Scale the delay to a random 50-100 % so parallel runs spread out.
    retry_after:
        Server-provided ``Retry-After`` seconds; replaces the schedule.
    """
    delay = retry_after if retry_after is not None else min(base * 2 ** attempt, maximum)
    if not jitter:
        return delay
    return delay * (0.5 + 0.5 * random.random())
