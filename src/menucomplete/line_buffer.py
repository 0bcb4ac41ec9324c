"""Single-line text buffer with cursor, mark, and an invertible edit log."""

from __future__ import annotations

from menucomplete.edit_log import EditDelete, EditInsert, EditLog, GroupedEdit


class LineBuffer:
    """Editable text with a cursor and a selection mark.

    Every :meth:`replace` records a grouped delete+insert pair so it can be
    undone atomically. Menu sessions use :meth:`checkpoint` to mark the log
    and then either :meth:`collapse_since` or :meth:`rollback_since`.
    """

    def __init__(self, text: str = "", cursor: int | None = None) -> None:
        self._text = text
        self._cursor = len(text) if cursor is None else cursor
        self.mark = 0
        self.edits = EditLog()

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, value: int) -> None:
        self._cursor = max(0, min(value, len(self._text)))

    def __len__(self) -> int:
        return len(self._text)

    # -- editing -------------------------------------------------------------

    def replace(self, start: int, length: int, text: str) -> None:
        """Replace *length* characters at *start* with *text* as one undo unit.

        The cursor ends up after the inserted text.
        """
        deleted = self._text[start : start + length]
        edit = GroupedEdit([EditDelete(start, deleted, self._cursor), EditInsert(start, text)])
        self.splice(start, length, text)
        self.cursor = start + len(text)
        self.edits.push(edit)

    def insert(self, text: str) -> None:
        """Insert *text* at the cursor."""
        self.replace(self._cursor, 0, text)

    def delete(self, start: int, length: int) -> str:
        """Delete *length* characters at *start*, returning them."""
        deleted = self._text[start : start + length]
        if deleted:
            self.replace(start, length, "")
        return deleted

    def splice(self, start: int, length: int, text: str) -> None:
        """Raw text change with no edit recorded; used by edit items."""
        self._text = self._text[:start] + text + self._text[start + length :]
        self.cursor = self._cursor

    def exchange_point_and_mark(self) -> None:
        mark = max(0, min(self.mark, len(self._text)))
        self.mark = self._cursor
        self.cursor = mark

    def selection(self) -> tuple[int, int]:
        """The region between cursor and mark, as ``(start, end)``."""
        mark = max(0, min(self.mark, len(self._text)))
        return min(mark, self._cursor), max(mark, self._cursor)

    # -- undo ----------------------------------------------------------------

    def undo(self) -> bool:
        edit = self.edits.pop()
        if edit is None:
            return False
        edit.undo(self)
        return True

    def checkpoint(self) -> int:
        return self.edits.length

    def collapse_since(self, checkpoint: int) -> None:
        """Fold every edit after *checkpoint* into one undo unit.

        All edits in the range must be grouped replace pairs at one start
        offset; the unit keeps the first delete and the last insert.
        """
        edits = self.edits.truncate(checkpoint)
        if not edits:
            return
        first_delete = edits[0].items[0]
        last_insert = edits[-1].items[-1]
        self.edits.push(GroupedEdit([first_delete, last_insert]))

    def rollback_since(self, checkpoint: int) -> None:
        """Undo every edit after *checkpoint* and drop them from the log."""
        edits = self.edits.truncate(checkpoint)
        if not edits:
            return
        last_insert = edits[-1].items[-1]
        first_delete = edits[0].items[0]
        last_insert.undo(self)
        first_delete.undo(self)
