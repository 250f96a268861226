"""Fair counting semaphore with cancellable acquisition.

threading.Semaphore wakes waiters in no particular order, so a thread that
arrives late can overtake threads that have been queued for a whole window.
FairSemaphore grants permits strictly in arrival order and lets a waiting
caller abandon its place through a CancelToken.
"""

import threading
from collections import deque
from collections.abc import Callable

from docgate.exceptions import GateCancelledError, PreconditionError


class CancelToken:
    """One-shot, thread-safe cancellation flag for a pending permit wait.

    A token may be shared by several waiters; cancelling it wakes all of
    them. Cancelling a token whose waiter already holds its permit has no
    effect on that permit.

    Example:
        ```python
        token = CancelToken()
        threading.Timer(5.0, token.cancel).start()
        try:
            gate.submit(task, cancel=token)
        except GateCancelledError:
            ...
        ```
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        with self._lock:
            return self._cancelled

    def cancel(self) -> None:
        """Cancel the token and wake every waiter registered on it."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback()

    def _register(self, callback: Callable[[], None]) -> bool:
        """Register a wake-up callback.

        Returns:
            False if the token is already cancelled (callback not stored).
        """
        with self._lock:
            if self._cancelled:
                return False
            self._callbacks.append(callback)
            return True

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"


class _Waiter:
    __slots__ = ("event", "granted")

    def __init__(self) -> None:
        self.event = threading.Event()
        self.granted = False


class FairSemaphore:
    """Counting semaphore that grants permits in FIFO order of arrival.

    A permit is handed directly to the oldest waiter on release, so a new
    arrival can never barge ahead of the queue even if it calls acquire()
    between the release and the waiter waking up.

    Args:
        value: Initial number of available permits (must be >= 0).

    Example:
        ```python
        sem = FairSemaphore(3)
        sem.acquire()
        try:
            do_work()
        finally:
            sem.release()
        ```
    """

    def __init__(self, value: int):
        if value < 0:
            raise PreconditionError("FairSemaphore initial value must be >= 0")
        self._value = value
        self._waiters: deque[_Waiter] = deque()
        self._lock = threading.Lock()

    @property
    def available_permits(self) -> int:
        """Number of permits that can be acquired without waiting."""
        with self._lock:
            return self._value

    @property
    def queue_length(self) -> int:
        """Number of threads currently waiting for a permit."""
        with self._lock:
            return len(self._waiters)

    def acquire(self, cancel: CancelToken | None = None) -> None:
        """Take one permit, blocking until one is handed to this caller.

        Args:
            cancel: Optional token that abandons the wait when cancelled.

        Raises:
            GateCancelledError: If the token is cancelled before a permit
                is granted. No permit is held in that case.
        """
        if cancel is not None and cancel.cancelled:
            raise GateCancelledError("Permit wait cancelled before it started")

        with self._lock:
            if self._value > 0 and not self._waiters:
                self._value -= 1
                return
            waiter = _Waiter()
            self._waiters.append(waiter)

        if cancel is not None and not cancel._register(waiter.event.set):
            waiter.event.set()

        try:
            waiter.event.wait()
        except BaseException:
            # Interrupted while parked; a permit granted in the meantime goes back
            if self._abandon(waiter):
                self.release()
            raise
        finally:
            if cancel is not None:
                cancel._unregister(waiter.event.set)

        if waiter.granted:
            return

        if self._abandon(waiter):
            return
        raise GateCancelledError("Permit wait cancelled")

    def _abandon(self, waiter: _Waiter) -> bool:
        """Withdraw a waiter from the queue.

        Returns:
            True if the permit was granted before the withdrawal took effect,
            in which case the caller owns it.
        """
        with self._lock:
            if waiter.granted:
                return True
            try:
                self._waiters.remove(waiter)
            except ValueError:
                pass
            return False

    def release(self, n: int = 1) -> None:
        """Return n permits, handing them to the oldest waiters first.

        Args:
            n: Number of permits to return (must be >= 1).

        Raises:
            PreconditionError: If n is less than 1.
        """
        if n < 1:
            raise PreconditionError(f"release count must be >= 1, got {n}")

        with self._lock:
            self._value += n
            while self._value > 0 and self._waiters:
                waiter = self._waiters.popleft()
                self._value -= 1
                waiter.granted = True
                waiter.event.set()

    def __repr__(self) -> str:
        return (
            f"FairSemaphore(available={self.available_permits}, "
            f"waiting={self.queue_length})"
        )
