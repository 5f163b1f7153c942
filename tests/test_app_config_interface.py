from __future__ import annotations

import signal
import unittest

from app.settings import AppConfig
from app.settings import build_settings
from app.container import build_container


class AppConfigInterfaceTests(unittest.TestCase):
    def test_container_annotation_uses_app_config(self) -> None:
        self.assertEqual(build_container.__annotations__["app_cfg"], "AppConfig")

    def test_build_settings_defaults(self) -> None:
        cfg = build_settings(env={})
        self.assertIsInstance(cfg, AppConfig)
        self.assertEqual(cfg.exit_config.signals, (signal.SIGINT, signal.SIGTERM))
        self.assertEqual(cfg.exit_config.exit_mode, "return")

    def test_build_settings_reads_environment(self) -> None:
        cfg = build_settings(
            env={"EXIT_SIGNALS": "SIGTERM", "EXIT_MODE": "hard", "EXIT_LOG_LEVEL": "warning"}
        )
        self.assertEqual(cfg.exit_config.signals, (signal.SIGTERM,))
        self.assertEqual(cfg.exit_config.exit_mode, "hard")
        self.assertEqual(cfg.exit_config.log_level, "WARNING")

    def test_build_settings_rejects_bad_environment(self) -> None:
        with self.assertRaises(ValueError):
            build_settings(env={"EXIT_MODE": "eventually"})

    def test_container_smoke_call(self) -> None:
        container = build_container(build_settings(env={}))
        self.assertIn("coordinator", container)
        self.assertIn("signal_source", container)
        self.assertIn("terminator", container)
        self.assertNotIn("server_proc", container)


if __name__ == "__main__":
    unittest.main()
