# src/kilo/ui/GeometryProber.py
"""Terminal size detection.

The driver's window-size ioctl is asked first. Some terminals answer it with
zeros (or not at all), so the fallback pushes the cursor into the bottom-right
corner and asks the terminal where it ended up.
"""

from __future__ import annotations

import logging
import re

from kilo.core.RawTerminal import RawTerminal
from kilo.core.TerminalErrors import GeometryUnavailableError, IoError, MalformedResponseError
from kilo.ui.DrawScreen import CSI, CURSOR_FAR_CORNER, CURSOR_REPORT_REQUEST, ScreenGeometry

logger = logging.getLogger("kilo")

MAX_REPORT_LENGTH = 32
_REPORT_RE = re.compile(rb"(\d+);(\d+)")


def parse_cursor_report(data: bytes) -> ScreenGeometry:
    """Parse ``ESC [ rows ; cols`` (the trailing ``R`` already stripped or not)."""
    if not data.startswith(CSI):
        raise MalformedResponseError(f"cursor report does not start with ESC[: {data!r}")

    body = data[len(CSI):]
    if body.endswith(b"R"):
        body = body[:-1]

    match = _REPORT_RE.fullmatch(body)
    if match is None:
        raise MalformedResponseError(f"cursor report is not 'rows;cols': {data!r}")

    rows, cols = int(match.group(1)), int(match.group(2))
    if rows < 1 or cols < 1:
        raise MalformedResponseError(f"cursor report out of range: {data!r}")
    return ScreenGeometry(rows, cols)


class GeometryProber:
    """Determine the `ScreenGeometry` of a `RawTerminal`."""

    def __init__(self, terminal: RawTerminal) -> None:
        self.terminal = terminal

    def probe_geometry(self) -> ScreenGeometry:
        try:
            rows, cols = self.terminal.native_geometry()
        except OSError as e:
            logger.debug("GeometryProber: window-size query failed (%s), using cursor report.", e)
        else:
            if rows > 0 and cols > 0:
                logger.debug("GeometryProber: native geometry %dx%d.", rows, cols)
                return ScreenGeometry(rows, cols)
            logger.debug("GeometryProber: window-size query gave %dx%d, using cursor report.", rows, cols)

        try:
            self._write_all(CURSOR_FAR_CORNER)
            geometry = self._cursor_position()
        except (IoError, MalformedResponseError) as e:
            raise GeometryUnavailableError(f"cannot determine terminal size: {e}") from e

        logger.debug("GeometryProber: cursor-report geometry %dx%d.", geometry.rows, geometry.cols)
        return geometry

    # ── helpers ───────────────────────────────────────────────────────────────

    def _write_all(self, data: bytes) -> None:
        try:
            written = self.terminal.write(data)
        except OSError as e:
            raise IoError(f"write failed: {e}") from e
        if written != len(data):
            raise IoError(f"short write: {written} of {len(data)} bytes")

    def _cursor_position(self) -> ScreenGeometry:
        self._write_all(CURSOR_REPORT_REQUEST)

        response = bytearray()
        while len(response) < MAX_REPORT_LENGTH - 1:
            try:
                byte = self.terminal.read_byte()
            except BlockingIOError:
                break
            except OSError as e:
                raise IoError(f"read failed: {e}") from e
            if not byte or byte == b"R":
                break
            response += byte

        return parse_cursor_report(bytes(response))
