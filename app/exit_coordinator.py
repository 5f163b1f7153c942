from __future__ import annotations

import asyncio
from enum import Enum
import inspect
import logging
import threading
from typing import Any, Callable, Iterable, TypeVar

from interfaces.exit_hooks import SignalSource, Terminator
from services.action_registry import Action, ActionRegistry
from services.invoker import Invoker

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class LatchState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


class ExitCoordinator:
    """
    Runs every registered cleanup action exactly once when a qualifying
    signal arrives, then the designated last action, then asks the
    terminator to end the process with the signal's number.

    Register actions during startup, then call `wait()` from as many threads
    as needed; all of them return together once cleanup has finished.
    """

    def __init__(
        self,
        *,
        signal_source: SignalSource,
        terminator: Terminator,
        default_signals: Iterable[int] = (),
        registry: ActionRegistry | None = None,
        invoker: Invoker | None = None,
    ) -> None:
        self._signal_source = signal_source
        self._terminator = terminator
        self._default_signals = tuple(default_signals)
        self._registry = registry or ActionRegistry()
        self._invoker = invoker or Invoker()
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._state = LatchState.IDLE
        self._exit_code: int | None = None
        self._listener: threading.Thread | None = None

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def state(self) -> LatchState:
        with self._lock:
            return self._state

    @property
    def exit_code(self) -> int | None:
        with self._lock:
            return self._exit_code

    @property
    def is_done(self) -> bool:
        return self._done.is_set()

    def register(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Action:
        return self._registry.add(name, fn, *args, **kwargs)

    def designate_last(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Action:
        return self._registry.set_last(fn, *args, **kwargs)

    def action(self, name: str, *args: Any, **kwargs: Any) -> Callable[[F], F]:
        def _decorate(fn: F) -> F:
            self.register(name, fn, *args, **kwargs)
            return fn

        return _decorate

    def wait(self, signals: Iterable[int] | None = None) -> int:
        wanted = tuple(signals) if signals is not None else self._default_signals
        if not wanted:
            raise ValueError("wait() needs at least one signal to listen for.")

        self._signal_source.subscribe(wanted)
        self._start_listener()
        self._done.wait()
        code = self.exit_code
        assert code is not None
        return code

    def trigger(self, signum: int = 0) -> bool:
        """
        Run the cleanup sequence for `signum` unless it already ran.

        Returns True for the one call that executed it. Every other call
        blocks until that execution has finished and returns False.
        """
        code = int(signum)
        with self._lock:
            if self._state is not LatchState.IDLE:
                won = False
            else:
                self._state = LatchState.RUNNING
                won = True

        if not won:
            self._done.wait()
            return False

        try:
            self._run_all()
        finally:
            with self._lock:
                self._state = LatchState.DONE
                self._exit_code = code
            try:
                self._terminator.terminate(code)
            finally:
                self._done.set()
        return True

    def _start_listener(self) -> None:
        with self._lock:
            if self._listener is not None:
                return
            self._listener = threading.Thread(target=self._listen, name="exit-coordinator", daemon=True)
            self._listener.start()

    def _listen(self) -> None:
        signum = self._signal_source.receive()
        self.trigger(signum)

    def _run_all(self) -> None:
        actions, last = self._registry.seal()
        for action in actions:
            self._run_one(action)
        if last is not None:
            self._run_one(last)

    def _run_one(self, action: Action) -> None:
        logger.debug("Running cleanup action %r", action.name)
        try:
            result = self._invoker.invoke(action.fn, action.args, action.kwargs)
            if result.error is not None:
                logger.warning("Skipping cleanup action %r: %s", action.name, result.error)
                return
            if inspect.iscoroutine(result.value):
                _run_coroutine(result.value)
        except BaseException:
            # Cleanup must not crash the exit path, not even on sys.exit().
            logger.exception("Cleanup action %r failed", action.name)


def _run_coroutine(coro: Any) -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(coro)
        return

    # Called from inside an event loop: drive the coroutine on a fresh loop
    # in a helper thread and wait for it.
    errors: list[BaseException] = []

    def _drive() -> None:
        try:
            asyncio.run(coro)
        except BaseException as exc:
            errors.append(exc)

    worker = threading.Thread(target=_drive, name="exit-coordinator-async", daemon=True)
    worker.start()
    worker.join()
    if errors:
        raise errors[0]
