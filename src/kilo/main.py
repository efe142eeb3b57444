# src/kilo/main.py
"""
kilo entry point
================

1) Environment: reads ~/.config/kilo/.env (may enable key tracing).
2) Configuration & logging: loads config.toml over the defaults, then logging.
3) Terminal session: raw mode for the whole run, restored on every exit path.
4) Session loop: renders and dispatches keys until Ctrl-Q.

A fatal terminal error leaves the screen cleared and the terminal cooked,
prints one diagnostic line and exits with status 1.
"""

from __future__ import annotations

import logging
import sys

from kilo.core.Kilo import Kilo
from kilo.core.TerminalErrors import TerminalError
from kilo.core.TerminalSession import TerminalSession
from kilo.utils.logging_config import setup_logging
from kilo.utils.utils import load_config, load_environment

logger = logging.getLogger("kilo")


def start() -> None:
    load_environment()
    config = load_config()
    setup_logging(config)
    logger.info("kilo starting up...")

    try:
        session = TerminalSession(read_timeout_ds=config["terminal"]["read_timeout"])
        with session.activate():
            Kilo(session, config).run()
    except TerminalError as e:
        logger.critical("Fatal terminal error: %s", e, exc_info=True)
        print(f"kilo: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("kilo shut down gracefully.")


if __name__ == "__main__":
    start()
