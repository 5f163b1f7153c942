from __future__ import annotations

import logging
import os
import sys
import threading


class DeferredTerminator:
    """Records the requested exit code and leaves exiting to the caller of `wait()`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requested: int | None = None

    def terminate(self, code: int) -> None:
        with self._lock:
            if self._requested is None:
                self._requested = int(code)

    @property
    def requested(self) -> int | None:
        with self._lock:
            return self._requested


class HardExitTerminator:
    """Ends the process immediately with `os._exit`, from whichever thread calls it."""

    def terminate(self, code: int) -> None:
        logging.shutdown()
        for stream in (sys.stdout, sys.stderr):
            if stream is None:
                continue
            try:
                stream.flush()
            except (OSError, ValueError):
                # Closed or broken stream; nothing left to flush.
                continue
        os._exit(int(code))
