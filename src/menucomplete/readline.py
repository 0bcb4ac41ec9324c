"""A minimal single-line reader that hosts the completion commands.

``LineReader`` owns the input loop: it draws the prompt and buffer, applies
the few editing keys a prompt needs, and hands completion keys to
:mod:`menucomplete.commands`. Any edit it makes itself ends the current
completion episode.
"""

from __future__ import annotations

from typing import Callable

from menucomplete import commands
from menucomplete.console import Cell
from menucomplete.context import EditorContext
from menucomplete.keybindings import CompletionAction
from menucomplete.keys import KeyEvent, matches_key
from menucomplete.line_buffer import LineBuffer
from menucomplete.render import append_text
from menucomplete.utils import graphemes

COMPLETION_COMMANDS: dict[CompletionAction, Callable[[EditorContext], None]] = {
    "complete": commands.complete,
    "menuComplete": commands.menu_complete,
    "tabCompleteNext": commands.tab_complete_next,
    "tabCompletePrevious": commands.tab_complete_previous,
    "possibleCompletions": commands.possible_completions,
}


class LineReader:
    """Reads one line at a time from the context's console.

    Ctrl+C with no selection raises ``KeyboardInterrupt`` and Ctrl+D on an
    empty line raises ``EOFError``, as :func:`input` does. The console raises
    ``EOFError`` itself when its input is closed.
    """

    def __init__(self, ctx: EditorContext) -> None:
        self.ctx = ctx
        self.clipboard = ""
        self._rendered_rows = 0
        ctx.render = self.render

    # -- public API -----------------------------------------------------------

    def read_line(self) -> str:
        ctx = self.ctx
        ctx.buffer = LineBuffer()
        ctx.session.invalidate()
        ctx.selection_active = False
        self._rendered_rows = 0
        self.render(ctx)

        while True:
            event = ctx.read_key()
            line = self._dispatch(event)
            if line is not None:
                return line

    def render(self, ctx: EditorContext) -> None:
        """Draw the prompt and buffer, highlighting an active selection."""
        buffer = ctx.buffer
        width = max(1, ctx.console.width)
        sel_start, sel_end = buffer.selection() if ctx.selection_active else (0, 0)

        cells: list[Cell] = []
        append_text(cells, ctx.prompt)
        offset = 0
        for g in graphemes(buffer.text):
            start = len(cells)
            append_text(cells, g)
            if sel_start <= offset < sel_end:
                for cell in cells[start:]:
                    cell.fg ^= 7
                    cell.bg ^= 7
            offset += len(g)

        row_count = ctx.input_rows()
        cells.extend(Cell() for _ in range(row_count * width - len(cells)))
        rows = [cells[i : i + width] for i in range(0, row_count * width, width)]

        top = ctx.console.write_cells(rows, ctx.initial_y)
        ctx.initial_y = top
        if self._rendered_rows > row_count:
            ctx.console.clear_rows(top + row_count, self._rendered_rows - row_count)
        self._rendered_rows = row_count
        ctx.console.place_cursor(*ctx.offset_to_coordinates(buffer.cursor))

    # -- dispatch -------------------------------------------------------------

    def _dispatch(self, event: KeyEvent) -> str | None:  # noqa: C901
        ctx = self.ctx
        kb = ctx.keybindings
        buffer = ctx.buffer

        for action, command in COMPLETION_COMMANDS.items():
            if kb.matches(event, action):
                command(ctx)
                return None

        # A selection left by the menu survives exactly one more key.
        had_selection = ctx.selection_active
        ctx.selection_active = False

        if kb.matches(event, "submit"):
            return self._accept_line()

        if kb.matches(event, "copyOrCancel"):
            if not had_selection:
                self._accept_line()
                raise KeyboardInterrupt
            start, end = buffer.selection()
            self.clipboard = buffer.text[start:end]
        elif kb.matches(event, "cut"):
            if had_selection:
                start, end = buffer.selection()
                self.clipboard = buffer.delete(start, end - start)
        elif kb.matches(event, "paste"):
            if had_selection:
                start, end = buffer.selection()
                buffer.delete(start, end - start)
            buffer.insert(self.clipboard)
        elif kb.matches(event, "deleteCharForward"):
            if matches_key(event, "ctrl+d") and not buffer.text:
                raise EOFError
            if had_selection:
                start, end = buffer.selection()
                buffer.delete(start, end - start)
            else:
                buffer.delete(buffer.cursor, 1)
        elif kb.matches(event, "deleteCharBackward"):
            if buffer.cursor > 0:
                buffer.delete(buffer.cursor - 1, 1)
        elif kb.matches(event, "cursorLeft"):
            self._move_cursor(buffer.cursor - 1)
            return None
        elif kb.matches(event, "cursorRight"):
            self._move_cursor(buffer.cursor + 1)
            return None
        elif kb.matches(event, "cursorLineStart"):
            self._move_cursor(0)
            return None
        elif kb.matches(event, "cursorLineEnd"):
            self._move_cursor(len(buffer))
            return None
        elif event.is_printable:
            buffer.insert(event.char)
        else:
            self.render(ctx)
            return None

        ctx.session.note_edit()
        self.render(ctx)
        return None

    def _move_cursor(self, offset: int) -> None:
        self.ctx.buffer.cursor = offset
        self.ctx.session.note_cursor_move(self.ctx.buffer.cursor)
        self.render(self.ctx)

    def _accept_line(self) -> str:
        """Finish the line and move the next prompt below it."""
        ctx = self.ctx
        ctx.buffer.cursor = len(ctx.buffer)
        self.render(ctx)
        area_top = ctx.menu_area_top()
        ctx.initial_y = ctx.console.write_lines([""], area_top)
        self._rendered_rows = 0
        return ctx.buffer.text
