from __future__ import annotations

from dataclasses import dataclass
import logging
import signal
from typing import Iterable

_EXIT_MODES = {"return", "hard"}
_UNCATCHABLE = {"SIGKILL", "SIGSTOP"}


@dataclass(frozen=True, slots=True)
class ExitConfig:
    signals: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)
    exit_mode: str = "return"
    log_level: str = "INFO"

    def validate(self) -> None:
        if not isinstance(self.signals, tuple) or not self.signals:
            raise ValueError("ExitConfig.signals must be a non-empty tuple.")

        for sig in self.signals:
            if not isinstance(sig, signal.Signals):
                raise ValueError(f"ExitConfig.signals contains a non-signal value: {sig!r}")
            if sig.name in _UNCATCHABLE:
                raise ValueError(f"ExitConfig.signals cannot include {sig.name}; it cannot be caught.")

        if self.exit_mode not in _EXIT_MODES:
            raise ValueError(f"ExitConfig.exit_mode must be one of {sorted(_EXIT_MODES)}, got: {self.exit_mode!r}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"ExitConfig.log_level is not a logging level: {self.log_level!r}")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @staticmethod
    def from_strings(
        signals: str | Iterable[str | int] = "SIGINT,SIGTERM",
        exit_mode: str = "return",
        log_level: str = "INFO",
    ) -> "ExitConfig":
        if isinstance(signals, str):
            tokens: list[str | int] = [tok for tok in signals.split(",") if tok.strip()]
        else:
            tokens = list(signals)

        cfg = ExitConfig(
            signals=tuple(dict.fromkeys(ExitConfig._parse_signal(tok) for tok in tokens)),
            exit_mode=exit_mode.strip().lower(),
            log_level=log_level.strip().upper(),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def _parse_signal(token: str | int) -> signal.Signals:
        if isinstance(token, int):
            try:
                return signal.Signals(token)
            except ValueError:
                raise ValueError(f"Unknown signal number: {token}") from None

        s = token.strip().upper()
        if s.isdigit():
            return ExitConfig._parse_signal(int(s))
        if not s.startswith("SIG"):
            s = "SIG" + s
        try:
            return signal.Signals[s]
        except KeyError:
            raise ValueError(f"Unknown signal name: {token!r}") from None
