"""Rate-limiting execution gate with permit debt accounting."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from docgate.exceptions import PreconditionError
from docgate.gate.semaphore import CancelToken, FairSemaphore
from docgate.gate.timer import RefreshTimer
from docgate.logger import get_logger
from docgate.schemas.gate import GateSnapshot

if TYPE_CHECKING:
    from docgate.config.profile import GateConfig

logger = get_logger(__name__)

T = TypeVar("T")


class RateGate:
    """Run at most `limit` tasks at once, refreshing permits every `window`.

    The gate holds a fair pool of `limit` permits. A task takes one permit
    and gives it back when it finishes, so at most `limit` tasks run at
    once. A periodic refresh tick additionally hands out again every permit
    still held by a running task, so waiters of the next window are
    released on schedule even when earlier tasks outlive their window.

    Permits handed out early by a tick are recorded as debt. A task that
    finishes while debt is outstanding repays it instead of returning its
    permit, which keeps the pool from growing beyond `limit`.

    The refresh timer is lazy: the first submit() starts it and a tick that
    finds no permit held and no debt stops it again.

    Args:
        limit: Size of the permit pool (>= 1).
        window: Refresh period, in seconds or as a timedelta.

    Example:
        ```python
        with RateGate(limit=40, window=1.0) as gate:
            response = gate.submit(lambda: session.post(url, data=body))
        ```
    """

    def __init__(self, limit: int, window: float | timedelta = 1.0):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise PreconditionError(f"limit must be a positive integer, got {limit!r}")
        if isinstance(window, timedelta):
            window = window.total_seconds()
        if isinstance(window, bool) or not isinstance(window, (int, float)) or window <= 0:
            raise PreconditionError(f"window must be a positive duration, got {window!r}")

        self._limit = limit
        self._window = float(window)
        self._permits = FairSemaphore(limit)
        self._in_flight = 0
        self._debt = 0
        self._timer: RefreshTimer | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: GateConfig) -> RateGate:
        """Build a gate from a validated GateConfig."""
        return cls(limit=config.limit, window=config.window)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window(self) -> float:
        return self._window

    @property
    def available_permits(self) -> int:
        return self._permits.available_permits

    @property
    def debt(self) -> int:
        with self._lock:
            return self._debt

    @property
    def in_flight(self) -> int:
        """Number of tasks currently running under a permit."""
        with self._lock:
            return self._in_flight

    @property
    def is_hot(self) -> bool:
        """Whether the refresh timer is currently running."""
        with self._lock:
            return self._timer is not None

    def snapshot(self) -> GateSnapshot:
        """Capture permits, debt and timer state atomically."""
        with self._lock:
            return GateSnapshot(
                limit=self._limit,
                window=self._window,
                available_permits=self._permits.available_permits,
                debt=self._debt,
                in_flight=self._in_flight,
                waiting=self._permits.queue_length,
                hot=self._timer is not None,
            )

    def submit(self, task: Callable[[], T], cancel: CancelToken | None = None) -> T:
        """Run `task` once a permit is available and return its result.

        Blocks the calling thread until a permit is granted (in arrival
        order), runs the task on that same thread, and settles the permit
        whatever the outcome.

        Args:
            task: Zero-argument callable producing the result.
            cancel: Optional token to abandon the wait for a permit.

        Returns:
            Whatever `task` returns.

        Raises:
            PreconditionError: If task is not callable.
            GateCancelledError: If the wait was cancelled; no permit is held.
            Exception: Any exception raised by the task, unchanged.
        """
        if not callable(task):
            raise PreconditionError("task must be callable")

        self._ensure_timer()
        self._permits.acquire(cancel)
        counted = False
        try:
            with self._lock:
                self._in_flight += 1
                counted = True
            logger.debug("Permit acquired: available=%d", self._permits.available_permits)
            return task()
        finally:
            self._release(counted)

    def close(self) -> None:
        """Stop the refresh timer.

        Tasks already admitted keep running and still settle their permits.
        A later submit() restarts the timer.
        """
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()
            timer.join()
            logger.info("Refresh timer closed: limit=%d, window=%.3fs", self._limit, self._window)

    def __enter__(self) -> RateGate:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def _ensure_timer(self) -> None:
        with self._lock:
            if self._timer is not None and not self._timer.stopped:
                return
            self._timer = RefreshTimer(self._window, self._on_tick)
            self._timer.start()
            logger.info(
                "Refresh timer started: limit=%d, window=%.3fs", self._limit, self._window
            )

    def _release(self, counted: bool) -> None:
        with self._lock:
            if counted:
                self._in_flight -= 1
            if self._debt > 0:
                # A tick already handed this permit out again
                self._debt -= 1
                logger.debug("Debt repaid: debt=%d", self._debt)
                return
            self._permits.release()
            logger.debug("Permit returned: available=%d", self._permits.available_permits)

    def _on_tick(self) -> None:
        with self._lock:
            # A timer replaced by close() + submit() may still deliver one last tick
            if self._timer is None or not self._timer.owns_current_thread():
                return
            self._refresh_locked()

    def _refresh_locked(self) -> None:
        outstanding = self._limit - self._permits.available_permits
        if outstanding == 0 and self._debt == 0:
            if self._timer is not None:
                self._timer.stop()
                self._timer = None
            logger.info("Refresh timer stopped: gate idle")
            return

        # Permits still held by running tasks are handed out again and owed back
        self._debt += outstanding
        if outstanding > 0:
            self._permits.release(outstanding)

        logger.debug(
            "Refresh tick: released=%d, debt=%d, waiting=%d",
            outstanding,
            self._debt,
            self._permits.queue_length,
        )

    def __repr__(self) -> str:
        return f"RateGate(limit={self._limit}, window={self._window})"
