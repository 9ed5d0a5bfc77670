"""A background job that becomes ready at a fixed interval."""

from __future__ import annotations

import time

from cdpkit.frame import REQUEST_TIMEOUT


class PeriodicJob:
    """Signals readiness once every ``interval`` seconds of monotonic time."""

    def __init__(self, interval: float = REQUEST_TIMEOUT, start: float | None = None) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        begin = time.monotonic() if start is None else start
        self._deadline = begin + interval

    @property
    def deadline(self) -> float:
        """The time at which the job becomes ready next."""
        return self._deadline

    def poll_ready(self, now: float) -> bool:
        """Return True if the job is due at ``now``, and schedule the next run."""
        if now >= self._deadline:
            self._deadline = now + self.interval
            return True
        return False