"""Request-scoped time budget shared by outbound calls."""

from __future__ import annotations

import os
import time
from typing import Optional

MIN_TIMEOUT = 0.001


def default_budget_seconds() -> float:
    return float(os.getenv("PANCHANG_REQUEST_BUDGET_SECONDS", "45"))


class Deadline:
    """Absolute monotonic deadline for one inbound request.

    Outbound clients cap their per-attempt timeout at :meth:`remaining` and
    stop retrying once :attr:`expired` is true.
    """

    def __init__(self, seconds: float, clock=time.monotonic) -> None:
        self._clock = clock
        self.expires_at = clock() + float(seconds)

    @classmethod
    def from_env(cls) -> "Deadline":
        return cls(default_budget_seconds())

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def cap(self, timeout: float) -> float:
        # urllib3 rejects non-positive timeouts
        return max(MIN_TIMEOUT, min(float(timeout), self.remaining()))


def cap_timeout(timeout: float, deadline: Optional[Deadline]) -> float:
    return deadline.cap(timeout) if deadline is not None else float(timeout)
