# tests/conftest.py
"""Pytest configuration with shared fixtures for the kilo tests."""

from __future__ import annotations

from typing import Any, Generator
from unittest.mock import patch

import pytest

from kilo.core.TerminalSession import TerminalSession
from kilo.utils.utils import DEFAULT_CONFIG, deep_merge
from tests.stubs import FakeTerminal


@pytest.fixture(autouse=True)
def no_atexit_hooks() -> Generator[None, None, None]:
    """Keep `TerminalAppMode` from registering real interpreter exit hooks."""
    with patch("kilo.ui.TerminalAppMode.atexit") as atexit_mock:
        yield atexit_mock


@pytest.fixture(autouse=True)
def reset_active_session() -> Generator[None, None, None]:
    """A test that fails inside `activate()` must not block the next one."""
    yield
    TerminalSession._active = None


@pytest.fixture
def fake_terminal() -> FakeTerminal:
    """A 24x80 scripted terminal with no pending input."""
    return FakeTerminal()


@pytest.fixture
def session(fake_terminal: FakeTerminal) -> TerminalSession:
    return TerminalSession(fake_terminal)


@pytest.fixture
def config() -> dict[str, Any]:
    """The embedded default configuration (a fresh copy)."""
    return deep_merge({}, DEFAULT_CONFIG)
