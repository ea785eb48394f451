"""HTTP transport for the drikpanchang.com day page.

Only transport problems are errors here: a non-200 status or a
``requests`` failure counts as a failed attempt. Attempts are retried with
linear backoff and the last failure is reported as :class:`SourceUnavailable`
(or :class:`TransportTimeout` when the last attempt timed out).
"""

from __future__ import annotations

import logging
import os
import time
from datetime import date as date_cls
from typing import Callable, Optional

import requests

from .util.deadline import Deadline


logger = logging.getLogger(__name__)

BASE_URL = "https://www.drikpanchang.com"
DAY_PAGE_PATH = "/panchang/day-panchang.html"

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "no-cache",
}


class SourceUnavailable(RuntimeError):
    """The Panchang site could not be fetched after all retries."""


class TransportTimeout(SourceUnavailable):
    """The last fetch attempt (or the request deadline) timed out."""


def _timeout_seconds() -> float:
    return float(os.getenv("DRIK_TIMEOUT_SECONDS", "30"))


def _max_retries() -> int:
    return max(1, int(os.getenv("DRIK_MAX_RETRIES", "3")))


def _backoff_seconds() -> float:
    return float(os.getenv("DRIK_BACKOFF_SECONDS", "1.0"))


def day_page_params(target: date_cls, city: str) -> dict:
    return {
        "date": target.strftime("%d/%m/%Y"),
        "city": city,
        "lang": "en",
    }


class DrikPanchangClient:
    """Fetch the day page for a ``(date, city)`` pair."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        base_url: str = BASE_URL,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = _timeout_seconds() if timeout is None else timeout
        self.retries = _max_retries() if retries is None else max(1, retries)
        self.backoff = _backoff_seconds() if backoff is None else backoff
        self._sleep = sleep

    def fetch_day(self, target: date_cls, city: str, deadline: Optional[Deadline] = None) -> str:
        url = f"{self.base_url}{DAY_PAGE_PATH}"
        params = day_page_params(target, city)
        last_exc: Optional[Exception] = None
        timed_out = False

        for attempt in range(1, self.retries + 1):
            if deadline is not None and deadline.expired:
                raise TransportTimeout(f"Request deadline expired before attempt {attempt} for {url}") from last_exc
            timeout = deadline.cap(self.timeout) if deadline is not None else self.timeout
            try:
                resp = self.session.get(url, params=params, headers=BROWSER_HEADERS, timeout=timeout)
                if resp.status_code != 200:
                    raise SourceUnavailable(f"HTTP {resp.status_code} from {url}")
                return resp.text
            except requests.Timeout as exc:
                last_exc, timed_out = exc, True
            except (requests.RequestException, SourceUnavailable) as exc:
                last_exc, timed_out = exc, False

            logger.warning(
                "panchang.fetch.retry",
                extra={"attempt": attempt, "city": city, "date": target.isoformat(), "error": str(last_exc)},
            )
            if attempt < self.retries:
                delay = self.backoff * attempt
                if deadline is not None:
                    delay = deadline.cap(delay)
                if delay > 0:
                    self._sleep(delay)

        error_cls = TransportTimeout if timed_out else SourceUnavailable
        raise error_cls(f"Unable to fetch {url} after {self.retries} attempts: {last_exc}") from last_exc
