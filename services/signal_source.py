from __future__ import annotations

import queue
import signal
import threading
from typing import Any, Callable, Iterable


class QueueSignalSource:
    """
    Delivers exactly one signal number to a blocking receiver.

    `deliver` may be called from any thread or from a signal handler. Only the
    first delivery is kept; the gate is a lock acquired without blocking, so a
    handler interrupting another `deliver` call cannot deadlock.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[int] = queue.SimpleQueue()
        self._gate = threading.Lock()
        self._subscribed: set[int] = set()
        self._lock = threading.Lock()

    def subscribe(self, signals: Iterable[int]) -> None:
        with self._lock:
            self._subscribed.update(int(s) for s in signals)

    @property
    def subscribed(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._subscribed)

    def deliver(self, signum: int) -> bool:
        value = int(signum)
        if not self._gate.acquire(blocking=False):
            return False
        self._queue.put(value)
        return True

    def receive(self) -> int:
        return self._queue.get()


class OsSignalSource(QueueSignalSource):
    """
    Routes operating-system signals into the queue.

    Python only lets the main thread install handlers, so `subscribe` must be
    called from it. Previous handlers are kept for `restore()`.
    """

    def __init__(self) -> None:
        super().__init__()
        self._previous: dict[int, Callable[[int, Any], Any] | int | None] = {}

    def subscribe(self, signals: Iterable[int]) -> None:
        wanted = [signal.Signals(s) for s in signals]
        for sig in wanted:
            if sig in self._previous:
                continue
            self._previous[sig] = signal.signal(sig, self._handle)
        super().subscribe(wanted)

    def restore(self) -> None:
        while self._previous:
            sig, handler = self._previous.popitem()
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)

    def _handle(self, signum: int, _frame: Any) -> None:
        self.deliver(signum)
