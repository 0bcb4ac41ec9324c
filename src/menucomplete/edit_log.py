"""Append-only log of invertible buffer edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from menucomplete.line_buffer import LineBuffer


class EditItem(Protocol):
    def undo(self, buffer: LineBuffer) -> None: ...

    def redo(self, buffer: LineBuffer) -> None: ...


@dataclass
class EditDelete:
    """Removal of *text* at *position*; remembers the cursor before the edit."""

    position: int
    text: str
    cursor_before: int

    def undo(self, buffer: LineBuffer) -> None:
        buffer.splice(self.position, 0, self.text)
        buffer.cursor = self.cursor_before

    def redo(self, buffer: LineBuffer) -> None:
        buffer.splice(self.position, len(self.text), "")
        buffer.cursor = self.position


@dataclass
class EditInsert:
    """Insertion of *text* at *position*."""

    position: int
    text: str

    def undo(self, buffer: LineBuffer) -> None:
        buffer.splice(self.position, len(self.text), "")
        buffer.cursor = self.position

    def redo(self, buffer: LineBuffer) -> None:
        buffer.splice(self.position, 0, self.text)
        buffer.cursor = self.position + len(self.text)


@dataclass
class GroupedEdit:
    """Several edits undone and redone as one unit."""

    items: list[EditItem] = field(default_factory=list)

    def undo(self, buffer: LineBuffer) -> None:
        for item in reversed(self.items):
            item.undo(buffer)

    def redo(self, buffer: LineBuffer) -> None:
        for item in self.items:
            item.redo(buffer)


class EditLog:
    """Ordered edits; undo pops from the end."""

    def __init__(self) -> None:
        self._edits: list[EditItem] = []

    def push(self, edit: EditItem) -> None:
        self._edits.append(edit)

    def pop(self) -> EditItem | None:
        """Pop and return the most recent edit, or None if empty."""
        return self._edits.pop() if self._edits else None

    def truncate(self, length: int) -> list[EditItem]:
        """Remove and return every edit recorded after the first *length*."""
        removed = self._edits[length:]
        del self._edits[length:]
        return removed

    def clear(self) -> None:
        self._edits.clear()

    def __getitem__(self, index: int) -> EditItem:
        return self._edits[index]

    @property
    def length(self) -> int:
        return len(self._edits)
