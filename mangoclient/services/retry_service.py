"""
Retry Service for MangoPay HTTP calls
Resends a request when the API answers with a transient gateway status
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Iterable, Optional

import requests

from mangoclient.exceptions import RetryExhaustedError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STATUSES = frozenset({504, 524})


@dataclass(frozen=True)
class HTTPRetryConfig:
    """Fixed-pause retry policy keyed on HTTP status"""

    attempts: int = 3
    pause: float = 1.0
    statuses: FrozenSet[int] = DEFAULT_RETRY_STATUSES
    retry_transport_errors: bool = False

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("retry attempts must be at least 1")
        if self.pause < 0:
            raise ValueError("retry pause cannot be negative")
        object.__setattr__(self, "statuses", frozenset(self.statuses))

    @classmethod
    def disabled(cls) -> "HTTPRetryConfig":
        return cls(attempts=1)


class RetryingTransport:
    """
    Wraps a requests.Session and retries on allow-listed statuses

    - A response whose status is in ``statuses`` is retried, up to ``attempts``
      sends in total, sleeping ``pause`` seconds between sends
    - After the final retried status RetryExhaustedError is raised
    - A requests.RequestException becomes TransportError and is raised at once,
      unless ``retry_transport_errors`` is set
    - Any other status is returned to the caller untouched
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        config: Optional[HTTPRetryConfig] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        self.session = session or requests.Session()
        self.config = config or HTTPRetryConfig()
        self._sleep = sleep
        self._stats_lock = threading.Lock()
        self.stats = {"requests": 0, "retries": 0, "exhausted": 0}

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self.stats[key] += 1

    def send(
        self,
        method: str,
        url: str,
        authorize: Optional[Callable[[], str]] = None,
        **kwargs,
    ) -> requests.Response:
        """
        ``authorize`` is called before every attempt, so a retry after a long
        pause carries a fresh Authorization header
        """
        config = self.config
        self._count("requests")

        for attempt in range(1, config.attempts + 1):
            last = attempt == config.attempts
            if authorize is not None:
                kwargs["headers"] = {**(kwargs.get("headers") or {}), "Authorization": authorize()}
            try:
                response = self.session.request(method, url, **kwargs)
            except requests.RequestException as e:
                if config.retry_transport_errors and not last:
                    logger.warning(
                        f"⚠️ Attempt {attempt}/{config.attempts} {method} {url} transport error: {e}. "
                        f"Retrying in {config.pause:.2f}s"
                    )
                    self._pause()
                    continue
                logger.error(f"❌ {method} {url} failed before a response was received: {e}")
                raise TransportError(f"{method} {url}: {e}", original_exception=e, url=url) from e

            if response.status_code not in config.statuses:
                return response

            if last:
                self._count("exhausted")
                logger.error(
                    f"❌ Max retry attempts ({config.attempts}) reached for {method} {url}, "
                    f"last status {response.status_code}"
                )
                raise RetryExhaustedError(url, config.attempts, response.status_code)

            logger.warning(
                f"⚠️ Attempt {attempt}/{config.attempts} {method} {url} returned {response.status_code}. "
                f"Retrying in {config.pause:.2f}s"
            )
            self._pause()

        # attempts >= 1 guarantees the loop returns or raises
        raise AssertionError("unreachable")

    def _pause(self) -> None:
        self._count("retries")
        self._sleep(self.config.pause)


def parse_statuses(value: str, default: Iterable[int] = DEFAULT_RETRY_STATUSES) -> FrozenSet[int]:
    """Parse "504,524" into a set of status codes"""
    if not value or not value.strip():
        return frozenset(default)
    return frozenset(int(part) for part in value.split(",") if part.strip())
