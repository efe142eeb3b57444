# tests/test_core/test_terminal_session.py
"""Unit tests for `TerminalSession`.
====================================

The session is the scoped owner of the terminal: raw mode must be restored
on every way out of `activate()`, the screen cleared when the body fails,
and an error while restoring must not hide the error that caused the exit.
"""

import signal

import pytest

from kilo.core.TerminalErrors import IoError, TerminalConfigError
from kilo.core.TerminalSession import TerminalSession
from kilo.ui.DrawScreen import CursorPosition, ScreenGeometry
from kilo.ui.KeyDecoder import Key, KeyEvent
from tests.stubs import FakeTerminal, cooked_attributes


def test_activate_enables_and_restores_raw_mode(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    with session.activate():
        assert session.mode.is_raw
        assert fake_terminal.attributes != cooked_attributes()

    assert not session.mode.is_raw
    assert fake_terminal.attributes == cooked_attributes()
    assert fake_terminal.writes == []


def test_failure_clears_screen_and_restores(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    with pytest.raises(IoError):
        with session.activate():
            raise IoError("read failed")

    assert fake_terminal.writes == [b"\x1b[2J\x1b[H"]
    assert fake_terminal.attributes == cooked_attributes()


def test_restore_failure_does_not_mask_original_error(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    with pytest.raises(IoError):
        with session.activate():
            fake_terminal.set_error = OSError(5, "Input/output error")
            raise IoError("read failed")


def test_restore_failure_after_clean_exit_is_raised(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    with pytest.raises(TerminalConfigError):
        with session.activate():
            fake_terminal.set_error = OSError(5, "Input/output error")


def test_clear_failure_while_unwinding_keeps_original_error() -> None:
    terminal = FakeTerminal(write_limit=0)
    session = TerminalSession(terminal)

    with pytest.raises(KeyError):
        with session.activate():
            raise KeyError("boom")
    assert not session.mode.is_raw


def test_only_one_session_at_a_time(session: TerminalSession) -> None:
    other = TerminalSession(FakeTerminal())

    with session.activate():
        with pytest.raises(TerminalConfigError):
            with other.activate():
                pass

    # Released: a new session may start now
    with other.activate():
        pass


def test_sigterm_unwinds_through_restore(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    previous = signal.getsignal(signal.SIGTERM)

    with pytest.raises(SystemExit) as info:
        with session.activate():
            signal.raise_signal(signal.SIGTERM)

    assert info.value.code == 128 + signal.SIGTERM
    assert fake_terminal.attributes == cooked_attributes()
    assert signal.getsignal(signal.SIGTERM) == previous


def test_probe_read_and_refresh(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    fake_terminal.geometry = (3, 10)
    fake_terminal.feed(b"\x1b[A")

    with session.activate(handle_signals=False):
        assert session.probe_geometry() == ScreenGeometry(3, 10)
        assert session.read_key() == KeyEvent(key=Key.ARROW_UP)
        session.refresh(lambda row: None, CursorPosition(0, 0))

    assert fake_terminal.writes[0].count(b"\r\n") == 2


def test_refresh_before_probe_is_an_error(session: TerminalSession) -> None:
    with pytest.raises(RuntimeError):
        session.refresh(lambda row: None, CursorPosition(0, 0))


def test_abandoned_activation_restores_without_clearing(session: TerminalSession, fake_terminal: FakeTerminal) -> None:
    activation = session.activate(handle_signals=False)
    activation.__enter__()
    assert session.mode.is_raw

    # Closing the generator raises GeneratorExit at the yield
    activation.gen.close()

    assert fake_terminal.writes == []
    assert fake_terminal.attributes == cooked_attributes()
    assert TerminalSession._active is None
