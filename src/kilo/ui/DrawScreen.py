# src/kilo/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen composes one full screen update at a time into an in-memory
`RenderFrame` and sends it to the terminal with a single write.

It is responsible for:
- cursor visibility and positioning sequences,
- drawing every row of the screen (content, filler or a centred banner),
- clipping each row to the terminal width in cells (wide glyphs included),
- flushing the frame atomically, so the terminal never shows half a redraw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from wcwidth import wcswidth, wcwidth

from kilo.core.RawTerminal import RawTerminal
from kilo.core.TerminalErrors import IoError

logger = logging.getLogger("kilo")

ESC = b"\x1b"
CSI = ESC + b"["

ERASE_DISPLAY = CSI + b"2J"
CURSOR_HOME = CSI + b"H"
CURSOR_HIDE = CSI + b"?25l"
CURSOR_SHOW = CSI + b"?25h"
ERASE_LINE_RIGHT = CSI + b"K"
CURSOR_REPORT_REQUEST = CSI + b"6n"
CURSOR_FAR_CORNER = CSI + b"999C" + CSI + b"999B"
LINE_BREAK = b"\r\n"

FILLER = "~"

ContentProvider = Callable[[int], Optional[str]]


@dataclass(frozen=True)
class ScreenGeometry:
    """Terminal size in character cells."""
    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"invalid screen geometry {self.rows}x{self.cols}")


@dataclass(frozen=True)
class CursorPosition:
    """0-based cursor cell; owned by the editing state."""
    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(f"invalid cursor position ({self.x}, {self.y})")


@dataclass
class RenderFrame:
    """Byte fragments of exactly one screen update. Single-use."""
    fragments: list[bytes] = field(default_factory=list)
    flushed: bool = False

    def __len__(self) -> int:
        return sum(len(f) for f in self.fragments)

    def to_bytes(self) -> bytes:
        return b"".join(self.fragments)


def string_width(text: str) -> int:
    """Return display width of *text* in terminal cells."""
    width = wcswidth(text)
    if width >= 0:
        return width
    # wcswidth gives -1 as soon as one char is non-printable; count those as one cell
    total = 0
    for ch in text:
        w = wcwidth(ch)
        total += 1 if w < 0 else w
    return total


def truncate_string(s: str, max_width: int) -> str:
    """Return `s` clipped to visual width `max_width`.

    Wide-Unicode characters (e.g. CJK) are accounted for with
    :pyfunc:`wcwidth.wcwidth`; a glyph that would straddle the limit is
    dropped entirely.
    """
    result: list[str] = []
    consumed = 0

    for ch in s:
        w = wcwidth(ch)
        if w < 0:  # Non-printable → treat as single-cell
            w = 1
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w

    return "".join(result)


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Builds `RenderFrame` objects and flushes them to a `RawTerminal`.

    Frames are assembled with `begin_frame()` and the append helpers, then
    handed to `flush()`, which issues exactly one write. A frame that has
    been flushed is spent; appending to it again is a programming error.

    Attributes:
        terminal (RawTerminal): Where flushed frames go.
        filler (str): Marker drawn on rows without content.

    Methods:
        begin_frame(): New empty frame.
        append(frame, data): Add bytes (or UTF-8 text) to a frame.
        hide_cursor(frame) / show_cursor(frame): Cursor visibility.
        move_cursor_home(frame): Cursor to row 1, column 1.
        draw_rows(frame, geometry, content_provider, banner): One line per screen row.
        position_cursor(frame, cursor): Absolute 1-based cursor placement.
        flush(frame): Single write of the whole frame.
        refresh(geometry, content_provider, cursor, banner): The standard full redraw.
        clear_screen(): Erase the display and home the cursor.
    """

    def __init__(self, terminal: RawTerminal, filler: str = FILLER) -> None:
        self.terminal = terminal
        self.filler = filler

    def begin_frame(self) -> RenderFrame:
        return RenderFrame()

    def append(self, frame: RenderFrame, data: Union[bytes, str]) -> None:
        if frame.flushed:
            raise RuntimeError("RenderFrame has already been flushed")
        # Convert first: a failure here must not leave a partial fragment behind
        if isinstance(data, str):
            fragment = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray, memoryview)):
            fragment = bytes(data)
        else:
            raise TypeError(f"cannot append {type(data).__name__} to a RenderFrame")
        frame.fragments.append(fragment)

    def hide_cursor(self, frame: RenderFrame) -> None:
        self.append(frame, CURSOR_HIDE)

    def show_cursor(self, frame: RenderFrame) -> None:
        self.append(frame, CURSOR_SHOW)

    def move_cursor_home(self, frame: RenderFrame) -> None:
        self.append(frame, CURSOR_HOME)

    def draw_rows(
        self,
        frame: RenderFrame,
        geometry: ScreenGeometry,
        content_provider: ContentProvider,
        banner: Optional[str] = None,
    ) -> None:
        """Append one line per screen row.

        ``content_provider(row)`` returns the text for that row, or None when
        there is nothing to show, in which case the filler is drawn. When
        ``banner`` is given it is centred on the row a third of the way down,
        provided that row has no content.
        """
        banner_row = geometry.rows // 3

        for row in range(geometry.rows):
            content = content_provider(row)
            if content is None:
                if banner is not None and row == banner_row:
                    line = self._centred_banner(banner, geometry.cols)
                else:
                    line = self.filler
            else:
                line = content

            self.append(frame, truncate_string(line, geometry.cols))
            self.append(frame, ERASE_LINE_RIGHT)
            # No break after the last row, or the terminal scrolls one line
            if row < geometry.rows - 1:
                self.append(frame, LINE_BREAK)

    def position_cursor(self, frame: RenderFrame, cursor: CursorPosition) -> None:
        self.append(frame, CSI + b"%d;%dH" % (cursor.y + 1, cursor.x + 1))

    def flush(self, frame: RenderFrame) -> None:
        if frame.flushed:
            raise RuntimeError("RenderFrame has already been flushed")
        data = frame.to_bytes()
        frame.flushed = True
        frame.fragments = []

        try:
            written = self.terminal.write(data)
        except OSError as e:
            raise IoError(f"write failed: {e}") from e

        # Escape sequences must not be split across writes: a short write is fatal
        if written != len(data):
            raise IoError(f"short write: {written} of {len(data)} bytes")

    def refresh(
        self,
        geometry: ScreenGeometry,
        content_provider: ContentProvider,
        cursor: CursorPosition,
        banner: Optional[str] = None,
    ) -> None:
        frame = self.begin_frame()
        self.hide_cursor(frame)
        self.move_cursor_home(frame)
        self.draw_rows(frame, geometry, content_provider, banner)
        self.position_cursor(frame, cursor)
        self.show_cursor(frame)
        self.flush(frame)

    def clear_screen(self) -> None:
        frame = self.begin_frame()
        self.append(frame, ERASE_DISPLAY)
        self.move_cursor_home(frame)
        self.flush(frame)

    # ── helpers ───────────────────────────────────────────────────────────────

    def _centred_banner(self, banner: str, cols: int) -> str:
        text = truncate_string(banner, cols)
        padding = (cols - string_width(text)) // 2
        if padding:
            return self.filler + " " * (padding - 1) + text
        return text
