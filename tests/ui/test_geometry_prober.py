# tests/ui/test_geometry_prober.py
"""Unit tests for `GeometryProber` and cursor-report parsing."""

import pytest

from kilo.core.TerminalErrors import GeometryUnavailableError, MalformedResponseError
from kilo.ui.DrawScreen import ScreenGeometry
from kilo.ui.GeometryProber import GeometryProber, parse_cursor_report
from tests.stubs import TIMEOUT, FakeTerminal


def test_native_geometry_wins() -> None:
    terminal = FakeTerminal(geometry=(40, 120))

    assert GeometryProber(terminal).probe_geometry() == ScreenGeometry(40, 120)
    assert terminal.writes == []


@pytest.mark.parametrize("native", [(24, 0), (0, 80), OSError(25, "Inappropriate ioctl for device")])
def test_fallback_uses_cursor_report(native) -> None:
    terminal = FakeTerminal([b"\x1b[50;132R"], geometry=native)

    assert GeometryProber(terminal).probe_geometry() == ScreenGeometry(50, 132)
    assert terminal.writes == [b"\x1b[999C\x1b[999B", b"\x1b[6n"]


def test_fallback_stops_at_timeout_without_trailing_r() -> None:
    terminal = FakeTerminal([b"\x1b[24;80", TIMEOUT, b"zzz"], geometry=(0, 0))

    assert GeometryProber(terminal).probe_geometry() == ScreenGeometry(24, 80)
    assert list(terminal.reads) == [b"z", b"z", b"z"]


def test_fallback_short_write_fails() -> None:
    terminal = FakeTerminal([b"\x1b[24;80R"], geometry=(0, 0), write_limit=4)

    with pytest.raises(GeometryUnavailableError):
        GeometryProber(terminal).probe_geometry()
    assert len(terminal.writes) == 1


@pytest.mark.parametrize("response", [b"24;80R", b"\x1b[24R", b"\x1b[a;bR", b"\x1b[0;80R", TIMEOUT])
def test_fallback_malformed_report_fails(response) -> None:
    terminal = FakeTerminal([response], geometry=(0, 0))

    with pytest.raises(GeometryUnavailableError) as info:
        GeometryProber(terminal).probe_geometry()
    assert isinstance(info.value.__cause__, MalformedResponseError)


def test_report_reading_is_bounded() -> None:
    terminal = FakeTerminal([b"\x1b[" + b"1" * 64 + b";80R"], geometry=(0, 0))

    with pytest.raises(GeometryUnavailableError):
        GeometryProber(terminal).probe_geometry()
    assert len(terminal.reads) == 70 - 31  # 31 of the 70 queued bytes were read


def test_parse_cursor_report() -> None:
    assert parse_cursor_report(b"\x1b[24;80R") == ScreenGeometry(24, 80)
    assert parse_cursor_report(b"\x1b[7;9") == ScreenGeometry(7, 9)
    with pytest.raises(MalformedResponseError):
        parse_cursor_report(b"\x1b]24;80R")
    with pytest.raises(MalformedResponseError):
        parse_cursor_report(b"\x1b[24;80;1R")
