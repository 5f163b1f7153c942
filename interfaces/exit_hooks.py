from __future__ import annotations

from typing import Iterable, Protocol


class SignalSource(Protocol):
    def subscribe(self, signals: Iterable[int]) -> None:
        ...

    def receive(self) -> int:
        ...


class Terminator(Protocol):
    def terminate(self, code: int) -> None:
        ...
