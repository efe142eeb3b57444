# src/kilo/core/TerminalSession.py
"""TerminalSession.py
=======================
The single owner of the controlling terminal for the life of the process.

A session wires one `RawTerminal` to the mode controller, the geometry
prober, the key decoder and the render buffer, and holds the probed
`ScreenGeometry`. `activate()` is the scoped acquisition around the whole
program: raw mode goes on at entry and is restored on every way out, be it
a normal return, an exception, or SIGTERM/SIGHUP.
"""

from __future__ import annotations

import logging
import signal
from contextlib import contextmanager
from typing import Any, ClassVar, Iterator, Optional

from kilo.core.RawTerminal import PosixTerminal, RawTerminal
from kilo.core.TerminalErrors import TerminalConfigError, TerminalError
from kilo.ui.DrawScreen import ContentProvider, CursorPosition, DrawScreen, ScreenGeometry
from kilo.ui.GeometryProber import GeometryProber
from kilo.ui.KeyDecoder import KeyDecoder, KeyEvent
from kilo.ui.TerminalAppMode import TerminalAppMode

logger = logging.getLogger("kilo")

# Signals that should unwind through activate() instead of killing the process outright
EXIT_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def _raise_exit(signum: int, _frame: Any) -> None:
    raise SystemExit(128 + signum)


class TerminalSession:
    """Owns the controlling terminal and the core components bound to it.

    Attributes:
        terminal (RawTerminal): Capability used by every component.
        mode (TerminalAppMode): Raw/cooked mode controller.
        prober (GeometryProber): Terminal size detection.
        decoder (KeyDecoder): Key input.
        screen (DrawScreen): Frame composition and output.
        geometry (ScreenGeometry | None): Set by `probe_geometry()`.
    """

    _active: ClassVar[Optional["TerminalSession"]] = None

    def __init__(self, terminal: Optional[RawTerminal] = None, read_timeout_ds: int = 1) -> None:
        self.terminal = terminal if terminal is not None else PosixTerminal()
        self.mode = TerminalAppMode(self.terminal, read_timeout_ds)
        self.prober = GeometryProber(self.terminal)
        self.decoder = KeyDecoder(self.terminal)
        self.screen = DrawScreen(self.terminal)
        self.geometry: Optional[ScreenGeometry] = None

    @contextmanager
    def activate(self, handle_signals: bool = True) -> Iterator["TerminalSession"]:
        if TerminalSession._active is not None:
            raise TerminalConfigError("another terminal session is already active")

        self.mode.enable_raw()
        TerminalSession._active = self
        previous_handlers = self._install_signal_handlers() if handle_signals else {}
        logger.info("Terminal session activated.")

        failed = False
        try:
            yield self
        except GeneratorExit:
            # Abandoned without being exited: restore the mode, leave the screen alone
            raise
        except BaseException:
            failed = True
            self._clear_after_failure()
            raise
        finally:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)
            TerminalSession._active = None
            self._restore_mode(failed)
            logger.info("Terminal session released.")

    def probe_geometry(self) -> ScreenGeometry:
        self.geometry = self.prober.probe_geometry()
        return self.geometry

    def read_key(self) -> KeyEvent:
        return self.decoder.read_key()

    def refresh(
        self,
        content_provider: ContentProvider,
        cursor: CursorPosition,
        banner: Optional[str] = None,
    ) -> None:
        if self.geometry is None:
            raise RuntimeError("probe_geometry() must run before the first refresh")
        self.screen.refresh(self.geometry, content_provider, cursor, banner)

    def clear_screen(self) -> None:
        self.screen.clear_screen()

    # ── helpers ───────────────────────────────────────────────────────────────

    def _install_signal_handlers(self) -> dict[int, Any]:
        previous = {}
        for signum in EXIT_SIGNALS:
            try:
                previous[signum] = signal.signal(signum, _raise_exit)
            except ValueError:
                # Not the main thread; the atexit hook still restores the mode.
                logger.debug("Cannot install handler for signal %d outside the main thread.", signum)
        return previous

    def _clear_after_failure(self) -> None:
        try:
            self.screen.clear_screen()
        except TerminalError as e:
            logger.error("Could not clear the screen while unwinding: %s", e)

    def _restore_mode(self, failed: bool) -> None:
        try:
            self.mode.disable_raw()
        except TerminalConfigError:
            if not failed:
                raise
            # Already logged by disable_raw(); the original error wins.
            logger.error("Terminal mode restore failed while handling an earlier error.")
