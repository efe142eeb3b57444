# tests/test_utils.py
"""Unit tests for configuration helpers in `kilo.utils.utils`."""

import os

from kilo.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    expected = {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert result == expected
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_load_config_defaults_when_file_missing(tmp_path) -> None:
    config = utils.load_config(tmp_path / "config.toml")

    assert config == utils.DEFAULT_CONFIG
    assert config is not utils.DEFAULT_CONFIG


def test_load_config_merges_user_file(tmp_path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[keybindings]\nquit = "ctrl+x"\n\n[terminal]\nread_timeout = 2\n', encoding="utf-8")

    config = utils.load_config(path)

    assert config["keybindings"]["quit"] == "ctrl+x"
    assert config["keybindings"]["cursor_up"] == "up"
    assert config["terminal"]["read_timeout"] == 2
    assert utils.DEFAULT_CONFIG["keybindings"]["quit"] == "ctrl+q"


def test_load_config_broken_file_falls_back(tmp_path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[keybindings\nquit = ", encoding="utf-8")

    assert utils.load_config(path) == utils.DEFAULT_CONFIG


def test_load_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("KILO_KEYTRACE", raising=False)
    assert utils.load_environment(tmp_path) is False

    (tmp_path / ".env").write_text("KILO_KEYTRACE=yes\n", encoding="utf-8")
    assert utils.load_environment(tmp_path) is True
    assert os.environ["KILO_KEYTRACE"] == "yes"
    monkeypatch.delenv("KILO_KEYTRACE")
