"""Keyboard input parsing for the completion menu.

Raw terminal input is split into complete sequences and classified into
:class:`KeyEvent` values carrying a key identifier such as ``"ctrl+g"``,
``"shift+tab"`` or ``"pageDown"`` plus the printable character, if any.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

ESC = "\x1b"

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
}

# xterm modifier parameter (CSI 1;<mod> X) -> key id prefix
_MODIFIER_PREFIXES: dict[str, str] = {
    "2": "shift+",
    "3": "alt+",
    "4": "shift+alt+",
    "5": "ctrl+",
    "6": "ctrl+shift+",
    "7": "ctrl+alt+",
    "8": "ctrl+shift+alt+",
}

_CSI_FINAL_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_CSI_TILDE_KEYS: dict[str, str] = {
    "2": "insert",
    "3": "delete",
    "5": "pageUp",
    "6": "pageDown",
}


# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """One key press read from the console.

    ``key`` is the normalized key identifier, ``char`` the character the key
    produces (empty for keys without one) and ``data`` the raw input.
    """

    key: KeyId
    char: str = ""
    data: str = ""

    @property
    def is_printable(self) -> bool:
        return len(self.char) == 1 and self.char.isprintable()

    @classmethod
    def from_char(cls, char: str) -> KeyEvent:
        """Build the event for typing a single printable character."""
        if char == " ":
            return cls("space", " ", " ")
        return cls(char, char, char)

    @classmethod
    def named(cls, key: KeyId) -> KeyEvent:
        """Build the event for a special key without a character."""
        return cls(key)


# ---------------------------------------------------------------------------
# Sequence splitting
# ---------------------------------------------------------------------------


def _sequence_length(data: str) -> int:
    """Length of the escape sequence at the start of *data* (0 if incomplete)."""
    if len(data) == 1:
        return 1
    if data[1] == "[":
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return 0
    if data[1] == "O":
        return 3 if len(data) >= 3 else 0
    return 2


def split_sequences(data: str) -> tuple[list[str], str]:
    """Split raw input into complete key sequences.

    Returns the sequences and any incomplete trailing remainder.
    """
    sequences: list[str] = []
    pos = 0
    while pos < len(data):
        remaining = data[pos:]
        if remaining.startswith(ESC):
            length = _sequence_length(remaining)
            if length == 0:
                return sequences, remaining
            sequences.append(remaining[:length])
            pos += length
        else:
            sequences.append(remaining[0])
            pos += 1
    return sequences, ""


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Classify one complete input sequence as a key identifier."""
    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    if data == "\x1b[Z":
        return "shift+tab"

    # Modified CSI keys: ESC [ 1 ; <mod> <final>  or  ESC [ <n> ; <mod> ~
    if data.startswith("\x1b[") and ";" in data:
        params, final = data[2:-1], data[-1]
        number, _, modifier = params.partition(";")
        prefix = _MODIFIER_PREFIXES.get(modifier)
        if prefix is not None:
            if final == "~" and number in _CSI_TILDE_KEYS:
                return prefix + _CSI_TILDE_KEYS[number]
            if number == "1" and final in _CSI_FINAL_KEYS:
                return prefix + _CSI_FINAL_KEYS[final]
        return None

    # --- Simple single-byte keys ---
    if data == ESC:
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)
    if data == "\x1d":
        return "ctrl+]"

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == ESC:
        ch = data[1]
        if ch in ("\x7f", "\x08"):
            return "alt+backspace"
        if ch.isprintable():
            return "alt+" + ch.lower()

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def key_event(data: str) -> KeyEvent | None:
    """Turn one complete input sequence into a :class:`KeyEvent`."""
    key = parse_key(data)
    if key is None:
        return None
    if key == "space":
        return KeyEvent(key, " ", data)
    if len(key) == 1:
        return KeyEvent(key, key, data)
    return KeyEvent(key, "", data)


def matches_key(event: KeyEvent, key_id: KeyId) -> bool:
    """Check whether *event* corresponds to *key_id*."""
    if key_id in ("esc", "escape"):
        return event.key == "escape"
    return event.key == key_id
