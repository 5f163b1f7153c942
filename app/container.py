from __future__ import annotations

from typing import Any

from app.exit_coordinator import ExitCoordinator
from app.runtime_lifecycle import RuntimeLifecycle
from app.settings import AppConfig
from services.action_registry import ActionRegistry
from services.invoker import Invoker
from services.process_terminator import DeferredTerminator, HardExitTerminator
from services.signal_source import OsSignalSource


def _build_terminator(app_cfg: AppConfig) -> DeferredTerminator | HardExitTerminator:
    if app_cfg.exit_config.exit_mode == "hard":
        return HardExitTerminator()
    return DeferredTerminator()


def build_container(app_cfg: AppConfig) -> dict[str, Any]:
    """
    Dependency container builder
    Responsibility
    - Takes a fully loaded config object
    - Constructs the exit collaborators and the coordinator exactly once
    - Returns a dictionary of ready-to-use services
    """
    signal_source = OsSignalSource()
    terminator = _build_terminator(app_cfg)
    registry = ActionRegistry()
    invoker = Invoker()

    coordinator = ExitCoordinator(
        signal_source=signal_source,
        terminator=terminator,
        default_signals=app_cfg.exit_config.signals,
        registry=registry,
        invoker=invoker,
    )
    runtime_lifecycle = RuntimeLifecycle(coordinator=coordinator)

    return {
        "signal_source": signal_source,
        "terminator": terminator,
        "registry": registry,
        "invoker": invoker,
        "coordinator": coordinator,
        "runtime_lifecycle": runtime_lifecycle,
    }
