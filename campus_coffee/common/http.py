"""HTTP access to the OpenStreetMap API.

One GET per request, retried on transient failures and spaced out so that
the client stays within the API usage policy.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from campus_coffee.common.constants import USER_AGENT
from campus_coffee.common.errors import CampusCoffeeError

RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 30.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    multiplier: float = 1.0
    max_wait: float = 10.0


class HttpRequestError(CampusCoffeeError):
    error_code = "HTTP_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableHttpError(HttpRequestError):
    pass


def check_status(url: str, status: int) -> None:
    if status in RETRYABLE_STATUS_CODES:
        raise RetryableHttpError(f"GET {url} returned {status}", status_code=status)
    if status >= 400:
        raise HttpRequestError(f"GET {url} returned {status}", status_code=status)


class RequestThrottle:
    """Keeps consecutive requests at least ``1 / rate_per_sec`` seconds apart."""

    def __init__(
        self,
        rate_per_sec: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval = 1.0 / rate_per_sec
        self._clock = clock
        self._sleep = sleep
        self._next_slot = float("-inf")
        self._lock = threading.Lock()

    def wait(self) -> None:
        with self._lock:
            now = self._clock()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self.interval
        if slot > now:
            self._sleep(slot - now)


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
        user_agent: str = USER_AGENT,
        rate_limit_per_sec: float = 1.0,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.throttle = RequestThrottle(rate_limit_per_sec)
        self.session = requests.Session()
        # The OSM API usage policy requires an identifying User-Agent.
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def close(self) -> None:
        self.session.close()

    def get_json(self, url: str) -> Any:
        """GET ``url`` and decode the JSON body.

        Raises ``RetryableHttpError`` once retries are exhausted for transient
        failures, and ``HttpRequestError`` for every other failure.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(initial=self.retry.multiplier, max=self.retry.max_wait, jitter=1.0),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )
        return retrying(self._get_once, url)

    def _get_once(self, url: str) -> Any:
        self.throttle.wait()
        try:
            response = self.session.get(url, timeout=(self.timeout.connect, self.timeout.read))
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise RetryableHttpError(f"GET {url} failed: {exc}") from exc
        except requests.RequestException as exc:
            raise HttpRequestError(f"GET {url} failed: {exc}") from exc

        check_status(url, response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(f"GET {url} returned invalid JSON", status_code=response.status_code) from exc
