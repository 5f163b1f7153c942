from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.exit_coordinator import ExitCoordinator
from services.action_registry import Action


@dataclass
class RuntimeLifecycle:
    """
    Turns long-lived process wrappers into cleanup actions.

    A wrapper is anything with `stop()` and, optionally, `is_running()`. Each
    wrapper object is registered with the coordinator at most once.
    """

    coordinator: ExitCoordinator
    _actions: dict[int, Action] = field(default_factory=dict)

    def register_process(self, proc: Any, name: str | None = None) -> Action | None:
        if proc is None:
            return None

        existing = self._actions.get(id(proc))
        if existing is not None:
            return existing

        action = self.coordinator.register(
            name or f"stop-{type(proc).__name__.lower()}-{id(proc):x}",
            stop_process,
            proc,
        )
        self._actions[id(proc)] = action
        return action


def stop_process(proc: Any) -> bool:
    """Stop `proc` if it is still running. Returns whether `stop()` was called."""
    is_running = getattr(proc, "is_running", None)
    if callable(is_running) and not is_running():
        return False
    proc.stop()
    return True
