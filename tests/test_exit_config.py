from __future__ import annotations

import signal
import unittest

from config.exit_config import ExitConfig


class ExitConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = ExitConfig.from_strings()
        self.assertEqual(cfg.signals, (signal.SIGINT, signal.SIGTERM))
        self.assertEqual(cfg.exit_mode, "return")
        self.assertEqual(cfg.log_level_number, 20)

    def test_from_strings_accepts_names_short_names_and_numbers(self) -> None:
        cfg = ExitConfig.from_strings(signals=" term, SIGINT ,15", exit_mode="HARD", log_level="debug")
        self.assertEqual(cfg.signals, (signal.SIGTERM, signal.SIGINT))
        self.assertEqual(cfg.exit_mode, "hard")
        self.assertEqual(cfg.log_level, "DEBUG")

    def test_from_strings_accepts_iterables(self) -> None:
        cfg = ExitConfig.from_strings(signals=[int(signal.SIGTERM), "SIGINT"])
        self.assertEqual(cfg.signals, (signal.SIGTERM, signal.SIGINT))

    def test_validate_rejects_empty_signals(self) -> None:
        with self.assertRaises(ValueError):
            ExitConfig.from_strings(signals="  ")

    def test_validate_rejects_unknown_signal(self) -> None:
        with self.assertRaises(ValueError):
            ExitConfig.from_strings(signals="SIGNOPE")

    @unittest.skipUnless(hasattr(signal, "SIGKILL"), "requires SIGKILL")
    def test_validate_rejects_uncatchable_signal(self) -> None:
        with self.assertRaises(ValueError):
            ExitConfig.from_strings(signals="SIGKILL")

    def test_validate_rejects_unknown_exit_mode(self) -> None:
        with self.assertRaises(ValueError):
            ExitConfig.from_strings(exit_mode="later")

    def test_validate_rejects_unknown_log_level(self) -> None:
        with self.assertRaises(ValueError):
            ExitConfig.from_strings(log_level="chatty")


if __name__ == "__main__":
    unittest.main()
