# src/kilo/core/TerminalErrors.py
"""Error kinds raised by the terminal core.

None of these are recovered inside the core. They propagate to the caller,
which clears the screen, restores the terminal mode, reports a diagnostic
and exits with a non-zero status.
"""


class TerminalError(Exception):
    """Base class for every failure of the terminal core."""


class TerminalQueryError(TerminalError):
    """Reading the terminal attributes failed."""


class TerminalConfigError(TerminalError):
    """Applying (or restoring) terminal attributes failed."""


class GeometryUnavailableError(TerminalError):
    """Neither the native size query nor the cursor-report fallback worked."""


class IoError(TerminalError):
    """A read or write on the terminal failed (other than would-block)."""


class MalformedResponseError(TerminalError):
    """A cursor-position report could not be parsed."""
