# src/kilo/ui/TerminalAppMode.py
from __future__ import annotations

import atexit
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from kilo.core.RawTerminal import RawTerminal
from kilo.core.TerminalErrors import TerminalConfigError, TerminalQueryError

logger = logging.getLogger("kilo")

MAX_READ_TIMEOUT_DS = 255


class TerminalAppMode:
    """
    Put the controlling terminal into raw mode and take it back out:

    - Snapshot the original attributes once (the only state ever restored).
    - Disable canonical input, echo, signal keys, flow control, CR/NL
      translation and output post-processing; use 8-bit characters.
    - VMIN = 0 / VTIME = ``read_timeout_ds`` so a read returns empty after
      the timeout instead of blocking forever.

    Always pair `enable_raw()` with `disable_raw()` (or use `raw()`).
    An `atexit` hook restores the terminal as a last resort.
    """

    def __init__(self, terminal: RawTerminal, read_timeout_ds: int = 1) -> None:
        # VTIME is one byte; 0 would turn every timed read into a non-blocking poll
        if (
            isinstance(read_timeout_ds, bool)
            or not isinstance(read_timeout_ds, int)
            or not 1 <= read_timeout_ds <= MAX_READ_TIMEOUT_DS
        ):
            raise TerminalConfigError(
                f"read timeout must be an integer from 1 to {MAX_READ_TIMEOUT_DS} "
                f"tenths of a second, got {read_timeout_ds!r}"
            )
        self._terminal = terminal
        self._read_timeout_ds = read_timeout_ds
        self._snapshot: Optional[list[Any]] = None
        self._raw: bool = False
        self._atexit_registered: bool = False

    @property
    def is_raw(self) -> bool:
        return self._raw

    @property
    def snapshot(self) -> Optional[list[Any]]:
        """Copy of the captured original attributes (None before `enable_raw`)."""
        if self._snapshot is None:
            return None
        copied = list(self._snapshot)
        copied[-1] = list(self._snapshot[-1])
        return copied

    def enable_raw(self) -> None:
        if self._raw:
            logger.debug("TerminalAppMode: already in raw mode.")
            return

        try:
            self._snapshot = self._terminal.get_attributes()
        except OSError as e:
            raise TerminalQueryError(f"tcgetattr failed: {e}") from e

        if not self._atexit_registered:
            atexit.register(self._restore_at_exit)
            self._atexit_registered = True

        raw = self._terminal.raw_attributes(self._snapshot, 0, self._read_timeout_ds)
        try:
            self._terminal.set_attributes(raw)
        except OSError as e:
            raise TerminalConfigError(f"tcsetattr failed: {e}") from e

        self._raw = True
        logger.debug("TerminalAppMode: entered raw mode (VTIME=%d).", self._read_timeout_ds)

    def disable_raw(self) -> None:
        if not self._raw or self._snapshot is None:
            return

        try:
            self._terminal.set_attributes(self.snapshot)
        except OSError as e:
            logger.critical("TerminalAppMode: could not restore terminal attributes: %s", e)
            raise TerminalConfigError(f"tcsetattr failed while restoring: {e}") from e

        self._raw = False
        logger.debug("TerminalAppMode: restored original terminal attributes.")

    @contextmanager
    def raw(self) -> Iterator["TerminalAppMode"]:
        self.enable_raw()
        try:
            yield self
        finally:
            self.disable_raw()

    # ── helpers ───────────────────────────────────────────────────────────────

    def _restore_at_exit(self) -> None:
        try:
            self.disable_raw()
        except TerminalConfigError as e:
            # Interpreter is going down; stderr is all that is left.
            print(f"kilo: {e}", file=sys.stderr)
