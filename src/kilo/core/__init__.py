# src/kilo/core/__init__.py
"""Public facade for kilo.core: re-export the terminal capability and error kinds.

Keeps the CamelCase file names (RawTerminal.py, TerminalErrors.py, ...),
but provides flat imports for convenience and stability. TerminalSession and
Kilo are imported from their own modules, since they depend on kilo.ui.
"""

# Re-export classes/symbols from CamelCase modules
from .RawTerminal import PosixTerminal, RawTerminal  # noqa: F401
from .TerminalErrors import (  # noqa: F401
    GeometryUnavailableError,
    IoError,
    MalformedResponseError,
    TerminalConfigError,
    TerminalError,
    TerminalQueryError,
)


__all__ = [
    "RawTerminal",
    "PosixTerminal",
    "TerminalError",
    "TerminalQueryError",
    "TerminalConfigError",
    "GeometryUnavailableError",
    "IoError",
    "MalformedResponseError",
]
