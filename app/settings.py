from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from config.exit_config import ExitConfig


@dataclass(frozen=True, slots=True)
class AppConfig:
    exit_config: ExitConfig


def build_settings(env: Mapping[str, str] | None = None) -> AppConfig:
    env = os.environ if env is None else env

    exit_config = ExitConfig.from_strings(
        signals=env.get("EXIT_SIGNALS", "SIGINT,SIGTERM"),
        exit_mode=env.get("EXIT_MODE", "return"),
        log_level=env.get("EXIT_LOG_LEVEL", "INFO"),
    )
    exit_config.validate()

    return AppConfig(exit_config=exit_config)
