from __future__ import annotations

from dataclasses import dataclass, field
import threading
from types import MappingProxyType
from typing import Any, Callable, Mapping


class RegistrationError(RuntimeError):
    """Raised for cleanup registration mistakes; these are programmer errors."""


class DuplicateActionError(RegistrationError):
    def __init__(self, name: str, fn: Any) -> None:
        super().__init__(f"Unable to re-register function {fn!r} under name {name!r}")
        self.name = name


class LastActionAlreadySetError(RegistrationError):
    def __init__(self, fn: Any) -> None:
        super().__init__(f"A last action is already designated; refusing {fn!r}")


class RegistryClosedError(RegistrationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Cleanup has already started; cannot register {name!r}")
        self.name = name


@dataclass(frozen=True, slots=True)
class Action:
    name: str
    fn: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


class ActionRegistry:
    """
    Name-keyed cleanup actions plus one optional last action.

    The registry is sealed when cleanup starts: `seal()` returns a snapshot
    and every later registration raises RegistryClosedError.
    """

    LAST_ACTION_NAME = "<last>"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._actions: dict[str, Action] = {}
        self._last: Action | None = None
        self._sealed = False

    def add(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Action:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Action name must be a non-empty string.")

        action = Action(name=name, fn=fn, args=tuple(args), kwargs=MappingProxyType(dict(kwargs)))
        with self._lock:
            if self._sealed:
                raise RegistryClosedError(name)
            if name in self._actions:
                raise DuplicateActionError(name, fn)
            self._actions[name] = action
        return action

    def set_last(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Action:
        action = Action(
            name=self.LAST_ACTION_NAME,
            fn=fn,
            args=tuple(args),
            kwargs=MappingProxyType(dict(kwargs)),
        )
        with self._lock:
            if self._sealed:
                raise RegistryClosedError(self.LAST_ACTION_NAME)
            if self._last is not None:
                raise LastActionAlreadySetError(fn)
            self._last = action
        return action

    def seal(self) -> tuple[list[Action], Action | None]:
        with self._lock:
            self._sealed = True
            return list(self._actions.values()), self._last

    @property
    def sealed(self) -> bool:
        with self._lock:
            return self._sealed

    @property
    def last(self) -> Action | None:
        with self._lock:
            return self._last

    def names(self) -> list[str]:
        with self._lock:
            return list(self._actions)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._actions

    def __len__(self) -> int:
        with self._lock:
            return len(self._actions)
