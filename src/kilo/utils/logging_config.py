# src/kilo/utils/logging_config.py
"""kilo.utils.logging_config
===========================

Logging setup for kilo. Defines the global logger objects and
`setup_logging`, which attaches handlers according to the ``[logging]``
section of the configuration.

Features:
    - Rotating file logging for general events (kilo.log).
    - Optional console logging to stderr. Off by default: while the terminal
      is in raw mode, anything written to stderr lands in the middle of a frame.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the KILO_KEYTRACE
      environment variable.
    - Safe reconfiguration: clears existing handlers so repeated calls do not
      duplicate records.

Globals:
    logger: Main application logger ("kilo").
    KEY_LOGGER: Logger for decoded key events ("kilo.keyevents").
"""

import logging
import logging.handlers
import os
import sys
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("kilo")
KEY_LOGGER = logging.getLogger("kilo.keyevents")

KEYTRACE_ENV = "KILO_KEYTRACE"


def _rotating_handler(
    filename: str, level: int, formatter: logging.Formatter, max_bytes: int, backups: int
) -> Optional[logging.Handler]:
    try:
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up log file '{filename}': {e}.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are set up:

    1. File handler – rotating kilo.log capturing everything from the
       configured `file_level` (default INFO) upward.
    2. Console handler – optional `stderr` output whose threshold is
       `console_level` (default WARNING).
    3. Error-file handler – optional rotating error.log that stores
       only ERROR and CRITICAL events.
    4. Key-event handler – optional rotating keytrace.log enabled when
       ``KILO_KEYTRACE`` is ``1/true/yes``; attached to ``kilo.keyevents``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are
            ``file_level``, ``console_level``, ``log_to_console`` and
            ``separate_error_log``.

    Notes:
        Never raises for I/O problems; a handler that cannot be opened is
        reported on stderr and skipped.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_file_level_str = logging_config.get("file_level", "INFO").upper()
    log_file_level = getattr(logging, log_file_level_str, logging.INFO)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = _rotating_handler(
        "kilo.log", log_file_level, file_formatter, 2 * 1024 * 1024, 5
    )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = logging_config.get("console_level", "WARNING").upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_file_handler = _rotating_handler(
            "error.log", logging.ERROR, file_formatter, 1 * 1024 * 1024, 3
        )

    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates

    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)

    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []

    if os.environ.get(KEYTRACE_ENV, "").lower() in {"1", "true", "yes"}:
        key_trace_handler = _rotating_handler(
            "keytrace.log", logging.DEBUG, logging.Formatter("%(asctime)s - %(message)s"),
            1 * 1024 * 1024, 3,
        )
        if key_trace_handler:
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to 'keytrace.log'.")
        else:
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
