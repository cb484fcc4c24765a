"""Sliding-window admission control for outgoing requests.

Architecture:
    AdmissionQueue keeps the timestamps of recently admitted requests. A
    background sweep drops timestamps older than the window on a fixed
    period, independent of call volume. admit() polls: while the window is
    full it sleeps for a short fixed interval and re-checks, then records
    the current time and returns.

Design Decisions:
    - Cooperative polling instead of a token bucket: latency granularity is
      bounded by the poll interval, which is fine for a non-latency-critical
      client
    - Explicit object with caller-managed lifetime (construct once, inject
      into the executor, shutdown() on exit) instead of module globals
    - One asyncio.Lock guards append, check and sweep
    - Unbounded waiting by default; max_wait_ms opts into a bounded wait that
      raises AdmissionTimeoutError

Concurrency:
    Admission order among concurrent callers is whoever re-checks first after
    a sweep frees capacity. It is not strictly FIFO.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections import deque
from collections.abc import Callable

from ..core.exceptions import AdmissionTimeoutError

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class AdmissionQueue:
    """Cooperative sliding-window rate limiter."""

    def __init__(
        self,
        window_ms: int = 60_000,
        max_requests: int = 100,
        *,
        sweep_interval_ms: int = 1_000,
        poll_interval_ms: int = 100,
        max_wait_ms: int | None = None,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        """Initialize the queue.

        Args:
            window_ms: Length of the sliding window in milliseconds
            max_requests: Maximum admissions counted inside one window
            sweep_interval_ms: Period of the background sweep
            poll_interval_ms: Sleep between quota re-checks in admit()
            max_wait_ms: Optional bound on time spent waiting in admit()
            clock: Monotonic clock returning milliseconds
        """
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if sweep_interval_ms <= 0 or poll_interval_ms <= 0:
            raise ValueError("sweep and poll intervals must be positive")

        self.window_ms = window_ms
        self.max_requests = max_requests
        self.sweep_interval_ms = sweep_interval_ms
        self.poll_interval_ms = poll_interval_ms
        self.max_wait_ms = max_wait_ms
        self._clock = clock
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()
        self._sweep_task: asyncio.Task[None] | None = None

    @property
    def in_flight(self) -> int:
        """Number of timestamps currently held in the window."""
        return len(self._timestamps)

    @property
    def sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def admit(self) -> None:
        """Suspend until the request can be counted against quota."""
        self._ensure_sweep()
        started = self._clock()
        waited = False
        while True:
            async with self._lock:
                if len(self._timestamps) < self.max_requests:
                    self._timestamps.append(self._clock())
                    break
            if not waited:
                logger.debug(
                    "admission_waiting",
                    extra={"in_window": len(self._timestamps), "max_requests": self.max_requests},
                )
                waited = True
            elapsed = self._clock() - started
            if self.max_wait_ms is not None and elapsed >= self.max_wait_ms:
                raise AdmissionTimeoutError(
                    f"Admission not granted within {self.max_wait_ms}ms",
                    waited_ms=elapsed,
                )
            await asyncio.sleep(self.poll_interval_ms / 1000.0)

        if waited:
            logger.debug("admission_granted", extra={"waited_ms": self._clock() - started})

    async def sweep(self) -> int:
        """Drop timestamps that fell out of the window; return how many."""
        async with self._lock:
            cutoff = self._clock() - self.window_ms
            dropped = 0
            while self._timestamps and self._timestamps[0] <= cutoff:
                self._timestamps.popleft()
                dropped += 1
            return dropped

    async def shutdown(self) -> None:
        """Cancel the background sweep. Safe to call more than once."""
        task = self._sweep_task
        self._sweep_task = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def _ensure_sweep(self) -> None:
        if self.sweeping:
            return
        self._sweep_task = asyncio.get_running_loop().create_task(
            self._sweep_loop(), name="admission-sweep"
        )

    async def _sweep_loop(self) -> None:
        interval = self.sweep_interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval)
            await self.sweep()

    async def __aenter__(self) -> AdmissionQueue:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()
