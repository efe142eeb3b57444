# src/kilo/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates decoded `KeyEvent` values into the names of
editor actions, according to the ``[keybindings]`` section of the
configuration.

Key specifications are short strings:
- ``ctrl+<letter>`` for control bytes (``ctrl+q`` -> 0x11),
- symbolic names for escape-sequence keys (``up``, ``pageup``, ``del``, ``esc`` ...),
- a single character for itself (``q``),
- an integer for a raw byte value.

Each action may be bound to one spec or a list of specs.
"""

import logging
from typing import Any, Optional, Union

from kilo.ui.KeyDecoder import Key, KeyEvent, ctrl_key

logger = logging.getLogger("kilo")

KeySpec = Union[str, int]


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Maps key events to action names.

    Attributes:
        config: Application configuration; only ``["keybindings"]`` is read.
        keybindings (dict): Action name -> list of decoded `KeyEvent` values.
        action_map (dict): `KeyEvent` -> action name, built from ``keybindings``.
    """

    NAMED_KEYS: dict[str, Key] = {
        "up": Key.ARROW_UP, "down": Key.ARROW_DOWN,
        "left": Key.ARROW_LEFT, "right": Key.ARROW_RIGHT,
        "home": Key.HOME, "end": Key.END,
        "pageup": Key.PAGE_UP, "pagedown": Key.PAGE_DOWN,
        "del": Key.DEL, "delete": Key.DEL,
        "esc": Key.ESCAPE, "escape": Key.ESCAPE,
    }

    NAMED_BYTES: dict[str, int] = {
        "enter": 0x0D, "tab": 0x09, "backspace": 0x7F, "space": 0x20,
    }

    def __init__(self, config: dict[str, Any]) -> None:
        self.config = config
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()
        logger.debug("KeyBinder initialized with %d bound keys.", len(self.action_map))

    def action_for(self, event: KeyEvent) -> Optional[str]:
        """Return the action bound to *event*, or None."""
        return self.action_map.get(event)

    def lookup(self, key_spec: KeySpec) -> Optional[str]:
        """Finds the action name associated with a given key specification.

        Args:
            key_spec: The key string (e.g., "ctrl+q") or integer byte value.

        Returns:
            The name of the action (e.g., "quit") or None if not found.
        """
        try:
            event = self._decode_keystring(key_spec)
        except ValueError:
            return None
        return self.action_for(event)

    # ── helpers ───────────────────────────────────────────────────────────────

    def _load_keybindings(self) -> dict[str, list[KeyEvent]]:
        raw_bindings = self.config.get("keybindings", {})
        bindings: dict[str, list[KeyEvent]] = {}

        for action, specs in raw_bindings.items():
            if not isinstance(specs, list):
                specs = [specs]
            events = []
            for spec in specs:
                try:
                    events.append(self._decode_keystring(spec))
                except ValueError as e:
                    logger.warning("Ignoring keybinding %r for '%s': %s", spec, action, e)
            bindings[action] = events

        return bindings

    def _setup_action_map(self) -> dict[KeyEvent, str]:
        action_map: dict[KeyEvent, str] = {}
        for action, events in self.keybindings.items():
            for event in events:
                if event in action_map and action_map[event] != action:
                    logger.warning(
                        "Key %s bound to both '%s' and '%s'; keeping '%s'.",
                        event, action_map[event], action, action,
                    )
                action_map[event] = action
        return action_map

    def _decode_keystring(self, key_spec: KeySpec) -> KeyEvent:
        """Decode a key specification into the `KeyEvent` the decoder would produce."""
        if isinstance(key_spec, int):
            if not 0 <= key_spec <= 0xFF:
                raise ValueError(f"byte value out of range: {key_spec}")
            return KeyEvent.from_byte(key_spec)

        if not isinstance(key_spec, str) or not key_spec:
            raise ValueError(f"invalid key spec: {key_spec!r}")

        if len(key_spec) == 1:
            value = ord(key_spec)
            if value > 0x7F:
                raise ValueError(f"non-ASCII key spec: {key_spec!r}")
            return KeyEvent.from_byte(value)

        spec = key_spec.strip().lower()
        if spec.startswith("ctrl+") or spec.startswith("ctrl-"):
            letter = spec[5:]
            if len(letter) != 1 or not ("a" <= letter <= "z"):
                raise ValueError(f"unsupported ctrl chord: {key_spec!r}")
            return KeyEvent.from_byte(ctrl_key(letter))

        if spec in self.NAMED_KEYS:
            return KeyEvent(key=self.NAMED_KEYS[spec])
        if spec in self.NAMED_BYTES:
            return KeyEvent.from_byte(self.NAMED_BYTES[spec])

        raise ValueError(f"unknown key name: {key_spec!r}")
