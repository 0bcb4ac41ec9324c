"""menucomplete: interactive tab completion for terminal line editors."""

# Candidates and providers
from menucomplete.candidates import (
    CandidateProvider,
    CandidateSet,
    CandidateType,
    CompletionCandidate,
    ReplacementSpan,
)

# Completion commands
from menucomplete.commands import (
    complete,
    menu_complete,
    possible_completions,
    tab_complete_next,
    tab_complete_previous,
)

# Console interface and implementation
from menucomplete.console import Cell, Console, ProcessConsole

# Editor state
from menucomplete.context import EditorContext

# Keybindings
from menucomplete.keybindings import (
    DEFAULT_COMPLETION_KEYBINDINGS,
    DONE_COMPLETION_KEYS,
    CompletionAction,
    CompletionKeybindingsManager,
    is_done_with_completion,
)

# Keyboard input handling
from menucomplete.keys import Key, KeyEvent, KeyId, matches_key, parse_key

# Line buffer
from menucomplete.line_buffer import LineBuffer

# Interactive menu
from menucomplete.menu import MenuController, MenuState

# Prefix resolution
from menucomplete.prefix import filter_candidates, unambiguous_prefix
from menucomplete.providers import CombinedCandidateProvider, CommandSpec

# Quoting
from menucomplete.quoting import is_consistent_quoting, is_quoted, unquote

# Host input loop
from menucomplete.readline import LineReader
from menucomplete.render import MenuLayout, layout
from menucomplete.replacement import apply, directory_replacement_text
from menucomplete.session import CompletionSession

# Settings
from menucomplete.settings import CompletionSettings, load_settings

# Utilities
from menucomplete.utils import shorten, visible_width

__all__ = [
    # Candidates
    "CandidateProvider",
    "CandidateSet",
    "CandidateType",
    "CompletionCandidate",
    "ReplacementSpan",
    # Commands
    "complete",
    "menu_complete",
    "possible_completions",
    "tab_complete_next",
    "tab_complete_previous",
    # Console
    "Cell",
    "Console",
    "ProcessConsole",
    # Context
    "EditorContext",
    # Keybindings
    "DEFAULT_COMPLETION_KEYBINDINGS",
    "DONE_COMPLETION_KEYS",
    "CompletionAction",
    "CompletionKeybindingsManager",
    "is_done_with_completion",
    # Keys
    "Key",
    "KeyEvent",
    "KeyId",
    "matches_key",
    "parse_key",
    # Line buffer
    "LineBuffer",
    # Menu
    "MenuController",
    "MenuState",
    "MenuLayout",
    "layout",
    # Prefix
    "filter_candidates",
    "unambiguous_prefix",
    # Providers
    "CombinedCandidateProvider",
    "CommandSpec",
    # Quoting
    "is_consistent_quoting",
    "is_quoted",
    "unquote",
    # Reader
    "LineReader",
    # Replacement
    "apply",
    "directory_replacement_text",
    # Session
    "CompletionSession",
    # Settings
    "CompletionSettings",
    "load_settings",
    # Utilities
    "shorten",
    "visible_width",
]
