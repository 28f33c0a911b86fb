"""HTTP transport for the Notion API.

Every call the sync engine makes goes through :meth:`NotionTransport.request`,
which paces itself with a token bucket, sends the request with the bearer
token and ``Notion-Version`` header, and turns the response into either a
JSON dict or a typed :mod:`notionsync.errors` exception.

``429`` (after ``Retry-After``), ``5xx`` and connection failures are retried
with backoff.  Other ``4xx`` responses fail on the first attempt.  Nothing
above this module retries.

:meth:`NotionTransport.paginate` walks Notion's cursor-paginated list
endpoints lazily, one page per pull.
"""

from __future__ import annotations

import json
import sys
import time
from collections.abc import Iterator
from typing import Any

import httpx

from notionsync.config import MAX_PAGE_SIZE, SyncConfig
from notionsync.errors import (
    NotionSyncAuthError,
    NotionSyncConflictError,
    NotionSyncError,
    NotionSyncNetworkError,
    NotionSyncNotFoundError,
    NotionSyncPermissionError,
    NotionSyncRetryExhaustedError,
    NotionSyncValidationError,
)
from notionsync.observability import NoopMetricsHook, get_logger
from notionsync.utils.redact import redact

from .rate_limit import TokenBucket
from .retries import _RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("notionsync.transport")

# Non-retryable statuses with a dedicated error; other 4xx are validation errors.
_STATUS_ERRORS: dict[int, tuple[type[NotionSyncError], str]] = {
    400: (NotionSyncValidationError, "Validation error"),
    401: (NotionSyncAuthError, "Authentication failed"),
    403: (NotionSyncPermissionError, "Permission denied"),
    404: (NotionSyncNotFoundError, "Resource not found"),
    409: (NotionSyncConflictError, "Conflict"),
}


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _parse_retry_after(response: httpx.Response) -> float | None:
    """Seconds from a numeric ``Retry-After`` header; ``None`` otherwise."""
    value = response.headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the error matching a non-retryable 4xx *response*.

    ``context`` always has ``status_code`` and ``notion_code``.  Validation
    errors add the response ``body``, permission errors the ``operation``
    and not-found errors the ``path``.
    """
    body = _json_body(response)
    if not isinstance(body, dict):
        body = {}
    status = response.status_code
    detail = body.get("message", response.text[:500])
    context: dict[str, Any] = {"status_code": status, "notion_code": body.get("code", "")}

    error_cls, label = _STATUS_ERRORS.get(
        status, (NotionSyncValidationError, f"Client error {status}"),
    )
    if error_cls is NotionSyncValidationError:
        context["body"] = body
    elif error_cls is NotionSyncPermissionError:
        context["operation"] = f"{method} {path}"
    elif error_cls is NotionSyncNotFoundError:
        context["path"] = path

    raise error_cls(f"{label} on {method} {path}: {detail}", context=context)


def _dump_payload(
    method: str,
    url: str,
    payload: dict | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Print one exchange to stderr as indented JSON, credentials masked."""
    fields = {
        "method": method,
        "url": url,
        "request_body": payload,
        "response_status": response_status,
        "response_body": response_body,
    }
    dump = {key: value for key, value in fields.items() if value is not None}
    sys.stderr.write(json.dumps(redact(dump, token), indent=2, default=str) + "\n")


class NotionTransport:
    """Paced, retrying ``httpx`` client bound to one integration token.

    Parameters
    ----------
    config:
        Supplies the token, API version, base URL, retry schedule, request
        rate, timeout, proxy, metrics hook and debug-dump switch.
    http_transport:
        Optional low-level ``httpx`` transport, e.g. ``httpx.MockTransport``
        in tests.
    """

    def __init__(
        self,
        config: SyncConfig,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
            transport=http_transport,
        )

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send one API call and return its JSON body (``{}`` when empty).

        *path* is relative to ``base_url``; *kwargs* go to
        :meth:`httpx.Client.request` (``json=``, ``params=``).

        Raises
        ------
        NotionSyncValidationError, NotionSyncAuthError, NotionSyncPermissionError, NotionSyncNotFoundError, NotionSyncConflictError
            On the first non-retryable 4xx response.
        NotionSyncRetryExhaustedError
            When the last attempt still got ``429`` or ``5xx``.
        NotionSyncNetworkError
            When the last attempt failed to connect or timed out.
        """
        attempts = self._config.retry_max_attempts
        tags = {"method": method, "path": path}
        last_status: int | None = None

        for attempt in range(attempts):
            self._pace(tags)
            started = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                self._network_failure(exc, attempt, tags)
                continue

            last_status = response.status_code
            self._observe(response, (time.monotonic() - started) * 1000, tags, kwargs.get("json"))

            if response.is_success:
                if last_status == 204 or not response.content:
                    return {}
                return response.json()
            if last_status not in _RETRYABLE_STATUSES:
                _raise_for_status(response, method, path)
            if not should_retry(last_status, None, attempt, attempts):
                break
            self._back_off(response, attempt, tags)

        raise NotionSyncRetryExhaustedError(
            f"Gave up on {method} {path} after {attempts} attempts (last status: {last_status})",
            context={"attempts": attempts, "last_status_code": last_status},
        )

    def paginate(
        self,
        path: str,
        *,
        page_size: int = MAX_PAGE_SIZE,
        method: str = "GET",
        **kwargs: Any,
    ) -> Iterator[dict]:
        """Lazily walk a cursor-paginated list endpoint, yielding each item.

        The next page is only requested once the consumer has pulled every
        item of the current one, so breaking out of the loop early skips
        the remaining requests.  Each call starts again from the first page.

        Parameters
        ----------
        path:
            API path to paginate (e.g. ``/blocks/{id}/children``).
        page_size:
            Items requested per page, between 1 and 100.
        method:
            ``GET`` endpoints take the cursor as query parameters; ``POST``
            endpoints (search, database query) take it in the JSON body.
        **kwargs:
            Forwarded to :meth:`request`.
        """
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        location = "json" if method.upper() in ("POST", "PATCH") else "params"
        base: dict = dict(kwargs.pop(location, None) or {})
        cursor: str | None = None

        while True:
            page_args = {**base, "page_size": page_size}
            if cursor is not None:
                page_args["start_cursor"] = cursor

            data = self.request(method, path, **{location: page_args}, **kwargs)
            yield from data.get("results", [])

            if not data.get("has_more", False):
                break
            cursor = data.get("next_cursor")
            if cursor is None:
                break

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- request steps -----------------------------------------------------

    def _pace(self, tags: dict[str, str]) -> None:
        waited = self._bucket.acquire()
        if waited > 0:
            self._metrics.timing("notionsync.rate_limit_wait_ms", waited * 1000, tags=tags)

    def _observe(
        self, response: httpx.Response, elapsed_ms: float, tags: dict[str, str], payload: Any,
    ) -> None:
        status_tags = {**tags, "status": str(response.status_code)}
        self._metrics.increment("notionsync.requests_total", tags=status_tags)
        self._metrics.timing("notionsync.request_duration_ms", elapsed_ms, tags=status_tags)
        if self._config.debug_dump_payload:
            body = _json_body(response)
            _dump_payload(
                tags["method"], str(response.url), payload, response.status_code,
                response.text[:1000] if body is None else body,
                token=self._config.token,
            )

    def _delay(self, attempt: int, retry_after: float | None = None) -> float:
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
            retry_after=retry_after,
        )

    def _back_off(self, response: httpx.Response, attempt: int, tags: dict[str, str]) -> None:
        """Sleep before retrying a ``429`` or ``5xx`` response."""
        retry_after: float | None = None
        reason = "server_error"
        if response.status_code == 429:
            reason = "rate_limited"
            retry_after = _parse_retry_after(response)
            self._metrics.increment("notionsync.rate_limited_total", tags=tags)
            log.warning(
                "Rate limited by Notion API",
                extra={
                    "extra_fields": {
                        "op": "request",
                        **tags,
                        "retry_after": retry_after,
                        "attempt": attempt + 1,
                    }
                },
            )
        self._metrics.increment("notionsync.retries_total", tags={**tags, "reason": reason})
        time.sleep(self._delay(attempt, retry_after))

    def _network_failure(self, exc: Exception, attempt: int, tags: dict[str, str]) -> None:
        """Sleep before the next attempt, or raise if this was the last one."""
        self._metrics.increment("notionsync.requests_total", tags={**tags, "status": "error"})
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    **tags,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not should_retry(None, exc, attempt, self._config.retry_max_attempts):
            raise NotionSyncNetworkError(
                f"Network error on {tags['method']} {tags['path']}: {exc}",
                context={"path": tags["path"], "attempt": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment("notionsync.retries_total", tags={**tags, "reason": "network_error"})
        time.sleep(self._delay(attempt))
