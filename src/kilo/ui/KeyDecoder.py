# src/kilo/ui/KeyDecoder.py
"""KeyDecoder.py
==================
Turns the raw byte stream of a terminal in raw mode into `KeyEvent` values.

Plain bytes come through unchanged. Navigation keys arrive as escape
sequences of varying length (``ESC [ A``, ``ESC [ 5 ~``, ``ESC O H`` ...),
so after an ESC the decoder walks a small state machine:

    START ──ESC──> GOT_ESC ──[──> GOT_BRACKET ──digit──> GOT_DIGIT ──~──> key
                       │                 └──A/B/C/D/H/F──> key
                       └──O──> GOT_O ──H/F──> key

Any unexpected byte resolves to ESCAPE. So does a read timeout in any state:
that is how a lone Escape keypress is told apart from the start of a sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from kilo.core.RawTerminal import RawTerminal
from kilo.core.TerminalErrors import IoError

logger = logging.getLogger("kilo")
KEY_LOGGER = logging.getLogger("kilo.keyevents")

ESC_BYTE = 0x1B
DEL_BYTE = 0x7F


class Key(Enum):
    """Symbolic keys produced from escape sequences."""
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    DEL = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    ESCAPE = auto()


class DecoderState(Enum):
    START = auto()
    GOT_ESC = auto()
    GOT_BRACKET = auto()
    GOT_DIGIT = auto()
    GOT_O = auto()


@dataclass(frozen=True)
class KeyEvent:
    """One decoded keypress: either a raw byte or a symbolic `Key`."""
    key: Optional[Key] = None
    byte: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.key is None) == (self.byte is None):
            raise ValueError("KeyEvent needs exactly one of key or byte")
        if self.byte is not None and not 0 <= self.byte <= 0xFF:
            raise ValueError(f"byte value out of range: {self.byte}")

    @classmethod
    def from_byte(cls, value: int) -> "KeyEvent":
        return cls(byte=value)

    @property
    def is_control(self) -> bool:
        return self.byte is not None and (self.byte < 0x20 or self.byte == DEL_BYTE)

    @property
    def is_printable(self) -> bool:
        return self.byte is not None and not self.is_control

    def __str__(self) -> str:
        if self.key is not None:
            return self.key.name
        if self.is_control:
            return f"{self.byte}"
        return f"{self.byte} ({chr(self.byte)!r})"


ESCAPE_EVENT = KeyEvent(key=Key.ESCAPE)

# ESC [ <final>
CSI_KEYS: dict[int, Key] = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

# ESC [ <digit> ~
TILDE_KEYS: dict[int, Key] = {
    ord("1"): Key.HOME,
    ord("3"): Key.DEL,
    ord("4"): Key.END,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME,
    ord("8"): Key.END,
}

# ESC O <final>
SS3_KEYS: dict[int, Key] = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}


def ctrl_key(ch: str) -> int:
    """Byte sent by Ctrl+<ch>: the low five bits of the letter."""
    return ord(ch) & 0x1F


def transition(
    state: DecoderState, digit: Optional[int], byte: int
) -> tuple[DecoderState, Optional[int], Optional[KeyEvent]]:
    """Advance the escape-sequence machine by one byte.

    Returns ``(next_state, pending_digit, event)``; ``event`` is set once the
    sequence is resolved, after which the machine is back at START.
    """
    if state is DecoderState.GOT_ESC:
        if byte == ord("["):
            return DecoderState.GOT_BRACKET, None, None
        if byte == ord("O"):
            return DecoderState.GOT_O, None, None
        return DecoderState.START, None, ESCAPE_EVENT

    if state is DecoderState.GOT_BRACKET:
        if ord("0") <= byte <= ord("9"):
            return DecoderState.GOT_DIGIT, byte, None
        key = CSI_KEYS.get(byte)
        return DecoderState.START, None, KeyEvent(key=key) if key else ESCAPE_EVENT

    if state is DecoderState.GOT_DIGIT:
        key = TILDE_KEYS.get(digit) if byte == ord("~") else None
        return DecoderState.START, None, KeyEvent(key=key) if key else ESCAPE_EVENT

    if state is DecoderState.GOT_O:
        key = SS3_KEYS.get(byte)
        return DecoderState.START, None, KeyEvent(key=key) if key else ESCAPE_EVENT

    raise ValueError(f"no escape sequence in progress in state {state.name}")


class KeyDecoder:
    """Reads one `KeyEvent` at a time from a `RawTerminal`.

    The terminal must be in raw mode with a short VTIME, so that a read with
    nothing to deliver comes back empty instead of blocking.
    """

    def __init__(self, terminal: RawTerminal) -> None:
        self.terminal = terminal

    def read_key(self) -> KeyEvent:
        first = self._read_blocking()
        if first != ESC_BYTE:
            event = KeyEvent.from_byte(first)
            KEY_LOGGER.debug("byte %s", event)
            return event

        # Both lookahead bytes are consumed before the sequence is judged
        lookahead = []
        for _ in range(2):
            byte = self._read_timed()
            if byte is None:
                KEY_LOGGER.debug("lone ESC")
                return ESCAPE_EVENT
            lookahead.append(byte)

        state, digit = DecoderState.GOT_ESC, None
        while True:
            byte = lookahead.pop(0) if lookahead else self._read_timed()
            if byte is None:
                KEY_LOGGER.debug("ESC sequence timed out in %s", state.name)
                return ESCAPE_EVENT
            state, digit, event = transition(state, digit, byte)
            if event is not None:
                KEY_LOGGER.debug("sequence -> %s", event)
                return event

    # ── helpers ───────────────────────────────────────────────────────────────

    def _read_blocking(self) -> int:
        while True:
            try:
                data = self.terminal.read_byte()
            except BlockingIOError:
                continue
            except OSError as e:
                raise IoError(f"read failed: {e}") from e
            if data:
                return data[0]

    def _read_timed(self) -> Optional[int]:
        try:
            data = self.terminal.read_byte()
        except BlockingIOError:
            return None
        except OSError as e:
            raise IoError(f"read failed: {e}") from e
        return data[0] if data else None
