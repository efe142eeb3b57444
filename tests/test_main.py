# tests/test_main.py
"""Tests for the `kilo.main.start` launcher, with the terminal replaced by a stub."""

from unittest.mock import patch

import pytest

from kilo import main
from kilo.core.TerminalSession import TerminalSession
from kilo.utils.utils import DEFAULT_CONFIG, deep_merge
from tests.stubs import FakeTerminal, cooked_attributes


@pytest.fixture
def launcher_env(tmp_path, monkeypatch):
    """Run `start()` in a temp dir with stubbed config/logging and a fake terminal."""
    monkeypatch.chdir(tmp_path)
    terminal = FakeTerminal()

    def make_session(read_timeout_ds=1):
        return TerminalSession(terminal, read_timeout_ds)

    with (
        patch.object(main, "load_environment"),
        patch.object(main, "load_config", return_value=deep_merge({}, DEFAULT_CONFIG)),
        patch.object(main, "setup_logging"),
        patch.object(main, "TerminalSession", side_effect=make_session),
        patch("kilo.core.TerminalSession.EXIT_SIGNALS", ()),
    ):
        yield terminal


def test_start_runs_until_quit(launcher_env: FakeTerminal) -> None:
    launcher_env.feed(b"\x11")

    main.start()

    assert launcher_env.writes[-1] == b"\x1b[2J\x1b[H"
    assert launcher_env.attributes == cooked_attributes()


def test_fatal_error_exits_with_status_1(launcher_env: FakeTerminal, capsys) -> None:
    launcher_env.feed(OSError(5, "Input/output error"))

    with pytest.raises(SystemExit) as info:
        main.start()

    assert info.value.code == 1
    assert "kilo: read failed" in capsys.readouterr().err
    assert launcher_env.writes[-1] == b"\x1b[2J\x1b[H"
    assert launcher_env.attributes == cooked_attributes()


def test_bad_read_timeout_is_reported_not_raised(launcher_env: FakeTerminal, capsys) -> None:
    config = deep_merge({}, DEFAULT_CONFIG)
    config["terminal"]["read_timeout"] = "1"
    main.load_config.return_value = config

    with pytest.raises(SystemExit) as info:
        main.start()

    assert info.value.code == 1
    assert "kilo: read timeout must be an integer" in capsys.readouterr().err
    assert launcher_env.set_calls == []
