"""Completion keybindings and the per-type terminator key table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from menucomplete.keys import KeyEvent, KeyId, matches_key

if TYPE_CHECKING:
    from menucomplete.candidates import CandidateType, CompletionCandidate

CompletionAction = Literal[
    # Completion commands
    "complete",
    "menuComplete",
    "tabCompleteNext",
    "tabCompletePrevious",
    "possibleCompletions",
    # Menu navigation
    "menuUp",
    "menuDown",
    "menuLeft",
    "menuRight",
    "menuPageUp",
    "menuPageDown",
    "menuNext",
    "menuPrevious",
    "menuCancel",
    "menuBackspace",
    # Line editing
    "submit",
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "deleteCharBackward",
    # Actions that leave the menu selection highlighted
    "cut",
    "deleteCharForward",
    "paste",
    "copyOrCancel",
]

CompletionKeybindingsConfig = dict[CompletionAction, KeyId | list[KeyId]]

DEFAULT_COMPLETION_KEYBINDINGS: dict[CompletionAction, KeyId | list[KeyId]] = {
    # Completion commands
    "complete": "tab",
    "menuComplete": "ctrl+space",
    "tabCompleteNext": "ctrl+n",
    "tabCompletePrevious": "ctrl+p",
    "possibleCompletions": "alt+=",
    # Menu navigation
    "menuUp": "up",
    "menuDown": "down",
    "menuLeft": "left",
    "menuRight": "right",
    "menuPageUp": "pageUp",
    "menuPageDown": "pageDown",
    "menuNext": "tab",
    "menuPrevious": "shift+tab",
    "menuCancel": ["escape", "ctrl+g"],
    "menuBackspace": "backspace",
    # Line editing
    "submit": "enter",
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "deleteCharBackward": "backspace",
    # Selection-preserving actions
    "cut": "ctrl+x",
    "deleteCharForward": ["delete", "ctrl+d"],
    "paste": ["ctrl+v", "ctrl+y"],
    "copyOrCancel": "ctrl+c",
}

KEEP_SELECTION_ACTIONS: tuple[CompletionAction, ...] = (
    "copyOrCancel",
    "cut",
    "deleteCharForward",
    "paste",
)

# Characters that finish a completion, by candidate type.
DONE_COMPLETION_KEYS: dict[CandidateType, frozenset[str]] = {
    "variable": frozenset({"."}),
    "namespace": frozenset({"."}),
    "property": frozenset({"."}),
    "container": frozenset({"\\", "/"}),
    "method": frozenset({"(", ")"}),
    "type": frozenset({"]"}),
    "parameterName": frozenset({":"}),
    "parameterValue": frozenset({","}),
}


def is_done_with_completion(candidate: CompletionCandidate, event: KeyEvent) -> bool:
    """Return ``True`` if *event* finalizes a completion of *candidate*.

    Space and Enter finish every candidate type.
    """
    if event.key in ("space", "enter"):
        return True
    keys = DONE_COMPLETION_KEYS.get(candidate.type_tag)
    return keys is not None and event.char in keys


class CompletionKeybindingsManager:
    """Maps completion actions to key identifiers."""

    def __init__(self, config: CompletionKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[CompletionAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: CompletionKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_COMPLETION_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, event: KeyEvent, action: CompletionAction) -> bool:
        """Check if *event* is bound to *action*."""
        return any(matches_key(event, key) for key in self._action_to_keys.get(action, []))

    def keeps_selection(self, event: KeyEvent) -> bool:
        return any(self.matches(event, action) for action in KEEP_SELECTION_ACTIONS)

    def get_keys(self, action: CompletionAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: CompletionKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)
