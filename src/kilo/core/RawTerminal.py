# src/kilo/core/RawTerminal.py
"""Narrow capability interface over the controlling terminal.

Everything platform-specific lives here: reading and writing the line
discipline, single-byte reads bounded by the driver timeout, raw writes and
the window-size ioctl. The rest of the core only talks to `RawTerminal`, so
it can be driven by a scripted terminal in tests.
"""

from __future__ import annotations

import fcntl
import logging
import os
import struct
import sys
import termios
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger("kilo")

# Indices into the list returned by termios.tcgetattr()
IFLAG, OFLAG, CFLAG, LFLAG, ISPEED, OSPEED, CC = range(7)


def make_raw_attributes(attrs: list[Any], min_bytes: int = 0, timeout_ds: int = 1) -> list[Any]:
    """Return a raw-mode copy of a termios attribute list.

    Input: no break signal, no CR->NL translation, no parity check, no
    8th-bit strip, no software flow control. Output: no post-processing.
    Control: 8-bit characters. Local: no echo, no canonical line buffering,
    no extended input processing, no INTR/QUIT/SUSP signals.

    ``attrs`` is left untouched.
    """
    raw = list(attrs)
    raw[CC] = list(attrs[CC])

    raw[IFLAG] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[OFLAG] &= ~termios.OPOST
    raw[CFLAG] |= termios.CS8
    raw[LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)

    # read() returns as soon as any input is there, or after timeout_ds tenths of a second
    raw[CC][termios.VMIN] = min_bytes
    raw[CC][termios.VTIME] = timeout_ds
    return raw


class RawTerminal(ABC):
    """Raw terminal I/O capability used by the core.

    Implementations report every failure as ``OSError``.
    """

    @abstractmethod
    def get_attributes(self) -> list[Any]:
        """Return the current line-discipline attributes."""

    @abstractmethod
    def set_attributes(self, attrs: list[Any]) -> None:
        """Apply attributes after pending output drains, discarding pending input."""

    def raw_attributes(self, attrs: list[Any], min_bytes: int = 0, timeout_ds: int = 1) -> list[Any]:
        return make_raw_attributes(attrs, min_bytes, timeout_ds)

    @abstractmethod
    def read_byte(self) -> bytes:
        """Read one byte; ``b""`` when the driver timeout expires first."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Issue a single write and return how many bytes it took."""

    @abstractmethod
    def native_geometry(self) -> tuple[int, int]:
        """Ask the driver for the window size as ``(rows, cols)``."""


class PosixTerminal(RawTerminal):
    """`RawTerminal` backed by termios, ioctl and unbuffered fd I/O."""

    def __init__(self, in_fd: Optional[int] = None, out_fd: Optional[int] = None) -> None:
        self.in_fd = sys.stdin.fileno() if in_fd is None else in_fd
        self.out_fd = sys.stdout.fileno() if out_fd is None else out_fd
        logger.debug("PosixTerminal bound to fds in=%d out=%d", self.in_fd, self.out_fd)

    def get_attributes(self) -> list[Any]:
        try:
            return termios.tcgetattr(self.in_fd)
        except termios.error as e:
            raise OSError(*e.args) from e

    def set_attributes(self, attrs: list[Any]) -> None:
        try:
            termios.tcsetattr(self.in_fd, termios.TCSAFLUSH, attrs)
        except termios.error as e:
            raise OSError(*e.args) from e

    def read_byte(self) -> bytes:
        # os.read bypasses Python's buffering, so VMIN/VTIME apply directly
        return os.read(self.in_fd, 1)

    def write(self, data: bytes) -> int:
        return os.write(self.out_fd, data)

    def native_geometry(self) -> tuple[int, int]:
        packed = fcntl.ioctl(self.out_fd, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
        rows, cols, _xpixel, _ypixel = struct.unpack("HHHH", packed)
        return rows, cols
