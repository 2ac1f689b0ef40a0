# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Blocking HTTP transport for the Power BI REST layer.

:class:`_HttpClient` wraps ``requests`` with per-method timeouts, exponential
backoff on network errors and, for idempotent reads, on throttling and gateway
statuses. The async client runs it in worker threads and wraps each call in a
:func:`cancellation_scope` so a cancelled task stops the worker between attempts.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

import requests

from ._error_codes import TRANSIENT_STATUS

_logger = logging.getLogger(__name__)

# Reads are safe to replay; the resolver only issues GETs.
_IDEMPOTENT_METHODS = frozenset({"get", "head", "options"})

_CANCEL_EVENT: ContextVar[Optional[threading.Event]] = ContextVar("_CANCEL_EVENT", default=None)


class RequestCancelledError(Exception):
    """The calling task was cancelled; no further attempts are made."""


class TransportClosedError(RuntimeError):
    """A request was issued after the transport was closed."""


@contextmanager
def cancellation_scope() -> Iterator[threading.Event]:
    """
    Bind a fresh cancel event to the current context.

    ``asyncio.to_thread`` copies the context, so a worker started inside the
    scope sees the same event. Setting it stops the worker's retry loop.
    """
    event = threading.Event()
    token = _CANCEL_EVENT.set(event)
    try:
        yield event
    finally:
        _CANCEL_EVENT.reset(token)


class _HttpClient:
    """
    HTTP client with retry, timeout handling and optional session reuse.

    :param retries: Maximum number of attempts per request. Default is 5.
    :type retries: :class:`int` | None
    :param backoff: Base delay in seconds for exponential backoff. Default is 0.5.
    :type backoff: :class:`float` | None
    :param timeout: Default request timeout in seconds. If None, uses per-method defaults.
    :type timeout: :class:`float` | None
    :param session: Optional ``requests.Session`` used for every request.
    :type session: :class:`requests.Session` | None
    :param max_backoff: Upper bound for any single delay, including ``Retry-After``. Default is 60.
    :type max_backoff: :class:`float` | None
    :param jitter: Add up to 25% random variation to computed delays.
    :type jitter: :class:`bool`
    """

    def __init__(
        self,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        *,
        max_backoff: Optional[float] = None,
        jitter: bool = True,
    ) -> None:
        self.max_attempts = max(1, retries) if retries is not None else 5
        self.base_delay = backoff if backoff is not None else 0.5
        self.max_backoff = max_backoff if max_backoff is not None else 60.0
        self.default_timeout: Optional[float] = timeout
        self.jitter = jitter
        self._session = session
        self._closed = False

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self._closed:
            raise TransportClosedError("HTTP client is closed")
        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Send a request, retrying network errors and throttled reads.

        ``RequestException`` is retried for every method. A 429/502/503/504
        response is retried only for idempotent methods; the last response is
        returned as is, so the caller maps the final status to an error.

        Inside a :func:`cancellation_scope`, the scope's event is checked before
        every attempt and interrupts backoff waits.

        :param method: HTTP method.
        :type method: :class:`str`
        :param url: Absolute URL.
        :type url: :class:`str`
        :param kwargs: Passed through to ``requests``.
        :return: The final HTTP response.
        :rtype: :class:`requests.Response`
        :raises requests.exceptions.RequestException: If every attempt fails at the network level.
        :raises RequestCancelledError: If the enclosing scope was cancelled.
        :raises TransportClosedError: If :meth:`close` has been called.
        """
        m = (method or "").lower()
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                kwargs["timeout"] = 120 if m in ("post", "delete") else 10

        cancelled = _CANCEL_EVENT.get()
        last_attempt = self.max_attempts - 1
        for attempt in range(self.max_attempts):
            if cancelled is not None and cancelled.is_set():
                _logger.debug("%s %s cancelled before attempt %d", m.upper(), url, attempt + 1)
                raise RequestCancelledError(f"{m.upper()} {url} cancelled")
            try:
                response = self._send(method, url, **kwargs)
            except requests.exceptions.RequestException as exc:
                if attempt == last_attempt:
                    raise
                delay = self._retry_delay(attempt)
                _logger.debug("%s %s failed (%s); retrying in %.2fs", m.upper(), url, exc, delay)
                self._wait(delay, cancelled)
                continue

            if response.status_code in TRANSIENT_STATUS and m in _IDEMPOTENT_METHODS and attempt < last_attempt:
                delay = self._retry_delay(attempt, response)
                _logger.debug("%s %s returned %s; retrying in %.2fs", m.upper(), url, response.status_code, delay)
                self._wait(delay, cancelled)
                continue
            return response
        raise RuntimeError("Unexpected end of retry loop")

    @staticmethod
    def _wait(delay: float, cancelled: Optional[threading.Event]) -> None:
        if cancelled is None:
            time.sleep(delay)
        else:
            cancelled.wait(delay)

    def _retry_delay(self, attempt: int, response: Optional[requests.Response] = None) -> float:
        """Seconds to wait before the next attempt.

        An integer ``Retry-After`` header wins (capped at ``max_backoff``);
        otherwise ``base_delay * 2**attempt``, capped, with optional jitter.
        """
        if response is not None:
            raw = (getattr(response, "headers", None) or {}).get("Retry-After")
            if raw is not None:
                try:
                    return min(float(int(raw)), self.max_backoff)
                except (TypeError, ValueError):
                    pass
        delay = min(self.base_delay * (2**attempt), self.max_backoff)
        if self.jitter:
            spread = delay * 0.25
            delay = max(0.0, delay + random.uniform(-spread, spread))
        return delay

    def close(self) -> None:
        """Stop sending requests. Safe to call multiple times.

        The session stays open; whoever created it closes it.
        """
        self._closed = True
        self._session = None
