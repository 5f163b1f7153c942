import logging
import sys

from app.settings import build_settings
from app.container import build_container
from utils.logging_config import configure_logging

logger = logging.getLogger("exitcoord")


def _flush_streams() -> None:
    sys.stdout.flush()
    sys.stderr.flush()


def main() -> int:
    app_cfg = build_settings()
    configure_logging(app_cfg.exit_config.log_level_number)

    deps = build_container(app_cfg)
    coordinator = deps["coordinator"]

    # Streams are flushed after every other cleanup action has run
    coordinator.designate_last(_flush_streams)

    names = ", ".join(sig.name for sig in app_cfg.exit_config.signals)
    logger.info("Waiting for %s", names)
    return coordinator.wait()


if __name__ == "__main__":
    raise SystemExit(main())
