"""Daemon entry point: load configuration and consume perception events."""

from __future__ import annotations

import argparse
import logging
import os
import queue
import sys

from ringil.config import AppConfig, ConfigError
from ringil.events import InstinctEvent

log = logging.getLogger(__name__)

EVENT_CAPACITY = 32
LOG_ENV = "RINGIL_LOG"
DEFAULT_LEVEL = "INFO"


def _setup_logging() -> None:
    name = os.environ.get(LOG_ENV, DEFAULT_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        level = logging.getLevelName(DEFAULT_LEVEL)
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("ringil").setLevel(level)


def main(argv: list[str] | None = None) -> int:
    """Run the bridge daemon; returns the process exit status."""
    parser = argparse.ArgumentParser(prog="ringil-bridge", description="Ringil bridge daemon.")
    parser.add_argument("--config", default="config.toml", help="configuration file")
    args = parser.parse_args(argv)

    _setup_logging()

    try:
        AppConfig.load_from_file(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    log.info("configuration loaded")

    events: queue.Queue[InstinctEvent | None] = queue.Queue(maxsize=EVENT_CAPACITY)
    try:
        while (event := events.get()) is not None:
            log.debug("received event: %r", event)
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())