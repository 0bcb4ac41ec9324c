"""Interactive completion menu.

:class:`MenuController` takes over the input loop while the user picks a
candidate from a grid drawn below the input. Every selection change writes
the candidate into the buffer; on exit the edits made during the session are
either collapsed into one undo unit or rolled back entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from menucomplete.candidates import CandidateSet, CompletionCandidate
from menucomplete.context import EditorContext
from menucomplete.keybindings import is_done_with_completion
from menucomplete.keys import KeyEvent
from menucomplete.prefix import filter_candidates, initial_menu_filter, unambiguous_prefix
from menucomplete.quoting import is_quote, unquote
from menucomplete.render import MenuLayout, invert_selection, layout, render_lines
from menucomplete.replacement import apply, directory_replacement_text

logger = logging.getLogger(__name__)

MenuOutcome = Literal["commit", "cancel"]


def _index_of(text: str, needle: str) -> int:
    """Case-insensitive position of *needle* in *text*, 0 when absent."""
    return max(0, text.lower().find(needle.lower()))


@dataclass
class MenuState:
    """Bookkeeping for one open menu.

    ``visible`` is the filtered view of the fetched candidates and is always
    replaced, never edited. ``typed_filter`` is the part of the selected
    insertion the user is considered to have typed.
    """

    visible: list[CompletionCandidate]
    menu: MenuLayout
    typed_filter: str
    initial_filter_length: int
    saved_mark: int
    undo_checkpoint: int
    menu_top: int = 0
    selected_index: int = 0
    previous_index: int = -1

    @property
    def row_count(self) -> int:
        return self.menu.row_count

    @property
    def column_width(self) -> int:
        return self.menu.column_width


@dataclass
class _Exit:
    """How the loop is being left."""

    undo: bool = False
    requeue: bool = False
    truncate: bool = False
    keep_selection: bool = False
    cursor_adjustment: int = 0


class MenuController:
    """Runs the selection menu for one candidate set."""

    def __init__(self, ctx: EditorContext, candidate_set: CandidateSet) -> None:
        self.ctx = ctx
        self.candidate_set = candidate_set
        self.state: MenuState | None = None
        self.outcome: MenuOutcome | None = None

    # -- public API -----------------------------------------------------------

    def run(self, interactive: bool = True) -> MenuOutcome | None:
        """Show the candidates, interactively when *interactive* and there is room.

        Returns the outcome of the interactive session, or None when only the
        static listing was written.
        """
        span = self.candidate_set.span
        menu = self._layout(
            self.candidate_set.candidates, self.ctx.buffer.text[span.start : span.end]
        )
        if interactive and not self.fits_on_screen(menu):
            logger.debug("Menu needs %d rows, falling back to a static listing", menu.row_count)
            interactive = False
        if not interactive:
            self._show_listing(menu)
            return None
        return self._run_interactive(menu)

    def fits_on_screen(self, menu: MenuLayout) -> bool:
        """Whether the input and *menu* fit on the console together."""
        return self.ctx.input_rows() + menu.row_count <= self.ctx.console.height

    # -- layout ---------------------------------------------------------------

    def _layout(
        self, candidates: Sequence[CompletionCandidate], current_insertion: str = ""
    ) -> MenuLayout:
        console = self.ctx.console
        return layout(
            candidates,
            console.width,
            console.height,
            self.ctx.settings.show_tooltips,
            current_insertion,
        )

    def _show_listing(self, menu: MenuLayout) -> None:
        ctx = self.ctx
        top = ctx.console.write_lines(render_lines(menu), ctx.menu_area_top())
        ctx.initial_y = top + menu.row_count
        ctx.redraw()

    # -- interactive loop -----------------------------------------------------

    def _run_interactive(self, menu: MenuLayout) -> MenuOutcome:
        ctx = self.ctx
        buffer = ctx.buffer
        span = self.candidate_set.span
        original_length = span.length

        typed = initial_menu_filter(
            self.candidate_set.candidates, self.candidate_set.consistent_quoting
        )
        state = MenuState(
            visible=list(self.candidate_set.candidates),
            menu=menu,
            typed_filter=typed,
            initial_filter_length=len(typed),
            saved_mark=buffer.mark,
            undo_checkpoint=buffer.checkpoint(),
            selected_index=menu.selected_index,
        )
        self.state = state
        ctx.selection_active = True
        logger.debug("Menu opened with %d candidates, filter %r", len(state.visible), typed)

        apply(ctx, state.visible[state.selected_index], span)
        state.menu_top = ctx.menu_area_top()

        # One Backspace at the entry filter length only warns; the warning
        # lapses after any other key, and that key does not refilter.
        backspace_warned = False
        while True:
            warned_now = False
            if state.selected_index != state.previous_index:
                self._show_selection()

            event = ctx.read_key()
            if self._navigate(event):
                exit_ = None
            elif ctx.keybindings.matches(event, "menuCancel"):
                exit_ = _Exit(undo=True)
            else:
                exit_, warned_now = self._edit_or_exit(event, backspace_warned)
            if exit_ is not None:
                self._leave(event, exit_)
                break
            backspace_warned = warned_now

        ctx.console.clear_rows(state.menu_top, state.row_count)
        if exit_.undo:
            buffer.rollback_since(state.undo_checkpoint)
            span.length = original_length
            ctx.redraw()
            self.outcome = "cancel"
        else:
            buffer.collapse_since(state.undo_checkpoint)
            self.outcome = "commit"
        logger.debug("Menu closed: %s", self.outcome)
        return self.outcome

    def _navigate(self, event: KeyEvent) -> bool:
        """Move the selection for navigation keys; False for any other key."""
        state = self.state
        kb = self.ctx.keybindings
        count = len(state.visible)
        rows = state.row_count
        selected = state.selected_index

        if kb.matches(event, "menuRight"):
            state.selected_index = min(selected + rows, count - 1)
        elif kb.matches(event, "menuLeft"):
            state.selected_index = max(selected - rows, 0)
        elif kb.matches(event, "menuDown"):
            state.selected_index = min(selected + 1, count - 1)
        elif kb.matches(event, "menuUp"):
            state.selected_index = max(selected - 1, 0)
        elif kb.matches(event, "menuPageDown"):
            state.selected_index = min(selected + rows - (selected % rows) - 1, count - 1)
        elif kb.matches(event, "menuPageUp"):
            state.selected_index = max(selected - (selected % rows), 0)
        elif kb.matches(event, "menuNext"):
            if not self._extend_filter():
                state.selected_index = (selected + 1) % count
        elif kb.matches(event, "menuPrevious"):
            state.selected_index = (selected - 1) % count
        else:
            return False
        return True

    def _edit_or_exit(self, event: KeyEvent, backspace_warned: bool) -> tuple[_Exit | None, bool]:
        """Handle terminators, filter edits and every other key.

        Returns the exit to take (None to keep going) and whether this key
        raised the Backspace warning.
        """
        ctx = self.ctx
        state = self.state
        candidate = state.visible[state.selected_index]

        if is_done_with_completion(candidate, event):
            ctx.buffer.exchange_point_and_mark()
            exit_ = _Exit()
            if event.key != "enter":
                text = candidate.insertion_text
                if candidate.type_tag == "container":
                    text, exit_.cursor_adjustment = directory_replacement_text(
                        text, ctx.settings.path_separator
                    )
                text = unquote(text, False)
                exit_.requeue = not text or text[-1] != event.char
            return exit_, False

        is_backspace = ctx.keybindings.matches(event, "menuBackspace")
        if not (is_backspace or event.is_printable):
            return _Exit(requeue=True, keep_selection=ctx.keybindings.keeps_selection(event)), False

        truncate_exit = _Exit(
            requeue=True, truncate=True, undo=state.initial_filter_length == 0
        )
        if is_backspace:
            if len(state.typed_filter) > state.initial_filter_length:
                state.typed_filter = state.typed_filter[:-1]
            elif not backspace_warned:
                ctx.ding()
                return None, True
            else:
                return truncate_exit, False
        else:
            state.typed_filter += event.char

        if backspace_warned:
            return None, False
        matches = filter_candidates(
            self.candidate_set.candidates,
            state.typed_filter,
            self.candidate_set.consistent_quoting,
        )
        if not matches:
            return truncate_exit, False
        self._refilter(matches)
        return None, False

    def _extend_filter(self) -> bool:
        """Grow the typed filter to the unambiguous prefix of the visible set."""
        ctx = self.ctx
        state = self.state
        text, _ = unambiguous_prefix(state.visible, True)
        if not text:
            text, _ = unambiguous_prefix(state.visible, False)

        typed = state.typed_filter
        position = text.lower().find(typed.lower())
        if not text or position < 0 or len(text) <= position + len(typed):
            return False

        state.typed_filter = text[position:]
        selected = state.visible[state.selected_index].insertion_text
        ctx.buffer.cursor = (
            self.candidate_set.span.start
            + _index_of(selected, state.typed_filter)
            + len(state.typed_filter)
        )
        ctx.redraw()
        ctx.ding()
        return True

    def _refilter(self, matches: list[CompletionCandidate]) -> None:
        state = self.state
        self.ctx.console.clear_rows(state.menu_top, state.row_count)
        selected_text = state.visible[state.selected_index].insertion_text
        state.visible = matches
        state.menu = self._layout(matches, selected_text)
        state.selected_index = state.menu.selected_index
        state.previous_index = -1

    def _show_selection(self) -> None:
        """Write the selected candidate and redraw the menu around it."""
        ctx = self.ctx
        state = self.state
        buffer = ctx.buffer
        span = self.candidate_set.span
        candidate = state.visible[state.selected_index]

        text = candidate.insertion_text
        position = _index_of(text, state.typed_filter)
        if not state.typed_filter and text and is_quote(text[0]):
            position += 1
        buffer.mark = span.start + position + len(state.typed_filter)
        apply(ctx, candidate, span)

        menu_top = ctx.menu_area_top()
        if state.previous_index != -1:
            invert_selection(state.menu, state.previous_index)
        invert_selection(state.menu, state.selected_index)

        blank_lines = state.menu_top - menu_top
        top = ctx.console.write_cells(state.menu.rows, menu_top)
        ctx.initial_y -= menu_top - top
        buffer.exchange_point_and_mark()
        ctx.redraw()

        if state.previous_index != -1 and blank_lines > 0:
            ctx.console.clear_rows(top + state.row_count, blank_lines)
        state.menu_top = top
        state.previous_index = state.selected_index

    def _leave(self, event: KeyEvent, exit_: _Exit) -> None:
        ctx = self.ctx
        state = self.state
        buffer = ctx.buffer
        span = self.candidate_set.span

        if exit_.truncate and not exit_.undo:
            text = state.visible[state.selected_index].insertion_text
            apply(ctx, CompletionCandidate(text[: buffer.cursor - span.start]), span)

        if exit_.keep_selection:
            ctx.selection_active = True
        else:
            ctx.selection_active = False
            buffer.mark = state.saved_mark

        if not exit_.undo and not exit_.keep_selection:
            ctx.redraw()
        if exit_.requeue:
            buffer.cursor -= exit_.cursor_adjustment
            ctx.requeue(event)

