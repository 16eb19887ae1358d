# app/adapters/clients/http_resilience.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from ...config import settings

log = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


@dataclass
class CircuitBreaker:
    """Opens after `threshold` consecutive failures and stays open for `reset_s` seconds."""

    threshold: int
    reset_s: float
    fails: int = 0
    opened_at: float | None = None

    def allows(self, now: float) -> bool:
        if self.opened_at is None:
            return True
        if (now - self.opened_at) >= self.reset_s:
            # half-open: let one call through, the next failure re-opens
            self.opened_at = None
            self.fails = max(0, self.threshold - 1)
            return True
        return False

    def record_success(self) -> None:
        self.fails = 0
        self.opened_at = None

    def record_failure(self, now: float) -> None:
        self.fails += 1
        if self.fails >= self.threshold and self.opened_at is None:
            self.opened_at = now


# one breaker per upstream host, per process
_BREAKERS: dict[str, CircuitBreaker] = {}


def _breaker_for(url: str) -> CircuitBreaker:
    host = httpx.URL(url).host or url
    br = _BREAKERS.get(host)
    if br is None:
        br = CircuitBreaker(
            threshold=max(1, int(settings.HTTP_CIRCUIT_FAIL_THRESHOLD)),
            reset_s=float(settings.HTTP_CIRCUIT_RESET_S),
        )
        _BREAKERS[host] = br
    return br


def reset_circuit() -> None:
    _BREAKERS.clear()


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError))


async def resilient_request(
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """
    GET/POST with bounded retries (exponential backoff, capped at 5s) behind a
    per-host circuit breaker.

    Only the listing data source goes through here. `transport` lets tests
    plug in httpx.MockTransport.
    """
    breaker = _breaker_for(url)
    if not breaker.allows(time.time()):
        raise httpx.HTTPError(f"circuit_open: refusing external call to {url}")

    timeout = httpx.Timeout(float(settings.HTTP_TIMEOUT_S))
    max_retries = max(0, int(settings.HTTP_MAX_RETRIES))
    backoff = float(settings.HTTP_BACKOFF_BASE_S)

    attempt = 0
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        while True:
            try:
                resp = await client.request(method, url, headers=headers, params=params)
                resp.raise_for_status()
            except (httpx.TimeoutException, httpx.NetworkError, httpx.HTTPStatusError) as e:
                breaker.record_failure(time.time())
                if not _is_retryable(e) or attempt >= max_retries:
                    raise
                delay = min(5.0, backoff * (2**attempt))
                log.warning("%s %s failed (%s); retry %d/%d in %.1fs", method, url, e, attempt + 1, max_retries, delay)
                await asyncio.sleep(delay)
                attempt += 1
                continue

            breaker.record_success()
            return resp
