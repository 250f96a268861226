"""Fixed-rate periodic timer running on a daemon thread."""

import inspect
import itertools
import threading
import time
import weakref
from collections.abc import Callable

from docgate.exceptions import PreconditionError
from docgate.logger import get_logger

logger = get_logger(__name__)

_timer_ids = itertools.count(1)


class RefreshTimer:
    """Invoke a callback every `interval` seconds on a dedicated thread.

    The first call happens one interval after start(). Calls never overlap:
    a callback that overruns its slot delays the next call, and slots missed
    entirely are skipped rather than fired back to back. Exceptions raised
    by the callback are logged and the timer keeps running.

    A bound-method callback is held through a weak reference, so the timer
    never keeps its owner alive; once the owner is collected the thread
    exits at its next tick.

    Args:
        interval: Seconds between calls (must be positive).
        callback: Zero-argument callable run on every tick.
        name: Optional thread name.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        name: str | None = None,
    ):
        if interval <= 0:
            raise PreconditionError("interval must be positive")

        self._interval = interval
        self._callback_ref: Callable[[], Callable[[], None] | None]
        if inspect.ismethod(callback):
            self._callback_ref = weakref.WeakMethod(callback)
        else:
            self._callback_ref = lambda: callback

        self._stopped = threading.Event()
        self._started = False
        self._start_lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._run,
            name=name or f"docgate-refresh-{next(_timer_ids)}",
            daemon=True,
        )

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        """Whether stop() has been requested."""
        return self._stopped.is_set()

    @property
    def name(self) -> str:
        return self._thread.name

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def owns_current_thread(self) -> bool:
        """Whether the caller is running on this timer's thread."""
        return threading.current_thread() is self._thread

    def start(self) -> None:
        """Start ticking. Calling start() on a running timer does nothing."""
        with self._start_lock:
            if self._started or self._stopped.is_set():
                return
            self._started = True
        logger.debug("Refresh timer started: name=%s, interval=%.3fs", self.name, self._interval)
        self._thread.start()

    def stop(self) -> None:
        """Request the timer to stop.

        Safe to call from inside the callback; the thread exits once the
        current tick returns. A stopped timer cannot be restarted.
        """
        self._stopped.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the timer thread to exit.

        Does nothing when called from the timer thread itself or before
        start().
        """
        if not self._started or self.owns_current_thread():
            return
        self._thread.join(timeout)

    def _run(self) -> None:
        next_tick = time.monotonic() + self._interval
        while not self._stopped.wait(max(0.0, next_tick - time.monotonic())):
            callback = self._callback_ref()
            if callback is None:
                logger.debug("Refresh timer owner collected: name=%s", self.name)
                break
            try:
                callback()
            except Exception:
                logger.exception("Refresh tick failed: name=%s", self.name)
            finally:
                del callback

            next_tick += self._interval
            now = time.monotonic()
            if next_tick <= now:
                missed = int((now - next_tick) // self._interval) + 1
                logger.warning(
                    "Refresh timer overran: name=%s, skipped_ticks=%d", self.name, missed
                )
                next_tick += missed * self._interval

        self._stopped.set()
        logger.debug("Refresh timer exited: name=%s", self.name)

    def __repr__(self) -> str:
        return (
            f"RefreshTimer(name={self.name!r}, interval={self._interval}, "
            f"stopped={self.stopped})"
        )
