# src/kilo/utils/utils.py
"""
kilo.utils.utils
================

Configuration helpers for the kilo launcher.

- Embedded defaults: `DEFAULT_CONFIG` is always loaded first, so the program
  runs even without any user file.
- User overrides: `~/.config/kilo/config.toml`, parsed with `toml` and
  merged recursively over the defaults.
- Environment: `~/.config/kilo/.env` is loaded with python-dotenv before
  logging is configured (it may set ``KILO_KEYTRACE``).

Nothing is ever written back; a missing or broken user file just means the
defaults are used.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from dotenv import load_dotenv

logger = logging.getLogger("kilo")

# Hardcoded fallback; mirrors the layout of a user's config.toml.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "welcome_message": "Kilo editor -- version {version}",
    },
    "terminal": {
        # VTIME, in tenths of a second
        "read_timeout": 1,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "cursor_up": "up", "cursor_down": "down",
        "cursor_left": "left", "cursor_right": "right",
        "page_up": "pageup", "page_down": "pagedown",
        "line_start": "home", "line_end": "end",
    },
    "logging": {
        "file_level": "INFO",
        "console_level": "WARNING",
        # stderr shares the raw terminal; console output would land mid-frame
        "log_to_console": False,
        "separate_error_log": False,
    },
}


def get_config_dir() -> Path:
    return Path.home() / ".config" / "kilo"


def load_environment(config_dir: Optional[Path] = None) -> bool:
    """Load ``.env`` from the config directory; returns True if a file was read."""
    dotenv_path = (config_dir or get_config_dir()) / ".env"
    if not dotenv_path.is_file():
        return False
    return load_dotenv(dotenv_path=dotenv_path)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's config.toml over them.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = config_path or get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
