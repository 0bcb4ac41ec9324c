"""Editor state shared by every completion component."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable

from menucomplete.candidates import CandidateProvider
from menucomplete.console import Console
from menucomplete.keybindings import CompletionKeybindingsManager
from menucomplete.keys import KeyEvent
from menucomplete.line_buffer import LineBuffer
from menucomplete.session import CompletionSession
from menucomplete.settings import CompletionSettings
from menucomplete.utils import visible_width


@dataclass
class EditorContext:
    """Everything the input loop owns, threaded through each component.

    ``initial_y`` is the screen row the prompt starts on; it moves up when
    output below the input scrolls the screen. ``selection_active`` asks the
    host renderer to highlight the region between cursor and mark.
    """

    buffer: LineBuffer
    console: Console
    provider: CandidateProvider
    settings: CompletionSettings = field(default_factory=CompletionSettings)
    prompt: str = ""
    initial_y: int = 0
    selection_active: bool = False
    render: Callable[[EditorContext], None] | None = None
    keybindings: CompletionKeybindingsManager = field(init=False)
    session: CompletionSession = field(init=False)
    queued_keys: deque[KeyEvent] = field(default_factory=deque)

    def __post_init__(self) -> None:
        self.keybindings = CompletionKeybindingsManager(self.settings.keybindings)
        self.session = CompletionSession(self.provider)

    # -- input ----------------------------------------------------------------

    def read_key(self) -> KeyEvent:
        """Next key, taking requeued keys first."""
        if self.queued_keys:
            return self.queued_keys.popleft()
        return self.console.read_key()

    def requeue(self, key: KeyEvent) -> None:
        """Hand *key* back for normal dispatch."""
        self.queued_keys.appendleft(key)

    # -- output ---------------------------------------------------------------

    def ding(self) -> None:
        if self.settings.bell_style != "none":
            self.console.bell()

    def redraw(self) -> None:
        if self.render is not None:
            self.render(self)

    # -- geometry -------------------------------------------------------------

    def offset_to_coordinates(self, offset: int) -> tuple[int, int]:
        """Screen ``(row, col)`` of buffer *offset*."""
        width = max(1, self.console.width)
        cols = visible_width(self.prompt) + visible_width(self.buffer.text[:offset])
        return self.initial_y + cols // width, cols % width

    def input_rows(self) -> int:
        """Rows taken by the prompt and the whole buffer."""
        row, _ = self.offset_to_coordinates(len(self.buffer))
        return row - self.initial_y + 1

    def menu_area_top(self) -> int:
        """First row below the input."""
        return self.initial_y + self.input_rows()
