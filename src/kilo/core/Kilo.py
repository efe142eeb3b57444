# src/kilo/core/Kilo.py
"""Kilo.py
============
The session loop: render a frame, decode one key, dispatch it, repeat.

`Kilo` keeps only the state the loop needs (the cursor and the rows it was
handed). Loading those rows from a file and editing them belong to the
caller. Cursor movement is clamped to the visible screen, not to the
content: the bounds policy is a property of this editing state, not of the
terminal core.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from kilo import __version__
from kilo.core.TerminalSession import TerminalSession
from kilo.ui.DrawScreen import CursorPosition
from kilo.ui.KeyBinder import KeyBinder

logger = logging.getLogger("kilo")


class Kilo:
    """Cursor state and the render/read/dispatch loop over one `TerminalSession`.

    Attributes:
        session (TerminalSession): The active terminal session.
        config (dict): Application configuration.
        rows (list[str]): Lines to display, top to bottom.
        cx, cy (int): 0-based cursor column and row on screen.
        running (bool): Cleared by the quit action.
    """

    def __init__(self, session: TerminalSession, config: dict[str, Any], rows: Optional[list[str]] = None) -> None:
        self.session = session
        self.config = config
        self.rows: list[str] = list(rows or [])
        self.cx = 0
        self.cy = 0
        self.running = False
        self.keybinder = KeyBinder(config)
        self.action_map: dict[str, Callable[[], None]] = self._setup_action_map()

    def _setup_action_map(self) -> dict[str, Callable[[], None]]:
        return {
            "quit": self.exit_editor,
            "cursor_up": lambda: self.move_cursor(0, -1),
            "cursor_down": lambda: self.move_cursor(0, 1),
            "cursor_left": lambda: self.move_cursor(-1, 0),
            "cursor_right": lambda: self.move_cursor(1, 0),
            "page_up": self.page_up,
            "page_down": self.page_down,
            "line_start": self.line_start,
            "line_end": self.line_end,
        }

    # ── content ───────────────────────────────────────────────────────────────

    def content_for_row(self, row: int) -> Optional[str]:
        if row < len(self.rows):
            return self.rows[row]
        return None

    def welcome_banner(self) -> Optional[str]:
        if self.rows:
            return None
        template = self.config.get("editor", {}).get("welcome_message", "Kilo editor -- version {version}")
        # Only {version} is substituted; any other braces stay literal
        return template.replace("{version}", __version__)

    # ── cursor movement ───────────────────────────────────────────────────────

    def move_cursor(self, dx: int, dy: int) -> None:
        geometry = self.session.geometry
        self.cx = min(max(self.cx + dx, 0), geometry.cols - 1)
        self.cy = min(max(self.cy + dy, 0), geometry.rows - 1)

    def page_up(self) -> None:
        self.move_cursor(0, -self.session.geometry.rows)

    def page_down(self) -> None:
        self.move_cursor(0, self.session.geometry.rows)

    def line_start(self) -> None:
        self.cx = 0

    def line_end(self) -> None:
        self.cx = self.session.geometry.cols - 1

    # ── loop ──────────────────────────────────────────────────────────────────

    def refresh_screen(self) -> None:
        self.session.refresh(self.content_for_row, CursorPosition(self.cx, self.cy), self.welcome_banner())

    def process_keypress(self) -> bool:
        """Read one key and run its action. Returns True if an action ran."""
        event = self.session.read_key()
        action_name = self.keybinder.action_for(event)
        if action_name is None:
            logger.debug("process_keypress: unbound key %s", event)
            return False

        action = self.action_map.get(action_name)
        if action is None:
            logger.warning("process_keypress: action '%s' has no handler", action_name)
            return False

        action()
        return True

    def exit_editor(self) -> None:
        logger.info("--- EXIT SEQUENCE INITIATED ---")
        self.session.clear_screen()
        self.running = False

    def run(self) -> None:
        """Probe the screen, then render and dispatch until quit."""
        self.session.probe_geometry()
        logger.info("Editor main loop started (%dx%d).", self.session.geometry.rows, self.session.geometry.cols)
        self.running = True
        while self.running:
            self.refresh_screen()
            self.process_keypress()
        logger.info("Editor main loop finished.")
