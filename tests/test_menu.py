"""Tests for menucomplete.menu -- the interactive selection loop."""

from __future__ import annotations

import pytest

from menucomplete.candidates import CandidateSet, CompletionCandidate, ReplacementSpan
from menucomplete.menu import MenuController
from menucomplete.settings import CompletionSettings

from .virtual_console import key

GET_CANDIDATES = ["Get-Alpha", "Get-Beta", "Get-Gamma"]
GRID_CANDIDATES = [f"item-{i:03}" for i in range(10)]


def _run(ctx, keys: list[str], *, interactive: bool = True) -> MenuController:
    ctx.console.feed(*keys)
    candidate_set = ctx.provider.complete(ctx.buffer.text, ctx.buffer.cursor)
    controller = MenuController(ctx, candidate_set)
    controller.run(interactive=interactive)
    return controller


class TestNavigation:
    """Arrow and page keys move the selection with clamping."""

    @pytest.fixture
    def grid_ctx(self, make_ctx):
        # 2 columns x 5 rows at width 20
        return make_ctx("item-", GRID_CANDIDATES, width=20, height=10)

    def test_down_clamps_at_last_index(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["right", "down", "down", "down", "down", "down", "enter"])
        assert controller.state.selected_index == 9
        assert grid_ctx.buffer.text == "item-009"

    def test_up_clamps_at_first_index(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["up", "enter"])
        assert controller.state.selected_index == 0
        assert grid_ctx.buffer.text == "item-000"

    def test_right_moves_by_row_count(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["down", "right", "enter"])
        assert controller.state.selected_index == 6

    def test_right_clamps(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["right", "right", "enter"])
        assert controller.state.selected_index == 9

    def test_left_clamps(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["down", "down", "left", "enter"])
        assert controller.state.selected_index == 0

    def test_page_down_goes_to_last_row_of_column(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["down", "pageDown", "enter"])
        assert controller.state.selected_index == 4

    def test_page_up_goes_to_first_row_of_column(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["right", "down", "down", "pageUp", "enter"])
        assert controller.state.selected_index == 5

    def test_shift_tab_wraps_to_last(self, grid_ctx) -> None:
        controller = _run(grid_ctx, ["shift+tab", "enter"])
        assert controller.state.selected_index == 9

    def test_tab_wraps_to_first(self, make_ctx) -> None:
        ctx = make_ctx("x", ["x1", "x2"])
        controller = _run(ctx, ["tab", "tab", "enter"])
        assert controller.state.selected_index == 0
        assert ctx.buffer.text == "x1"

    def test_selection_is_highlighted_on_screen(self, grid_ctx) -> None:
        _run(grid_ctx, ["down", "escape"])
        top, rows = grid_ctx.console.cell_writes[-1]
        assert top == 1
        # item-001 is row 1, column 0
        assert all((c.fg, c.bg) == (0, 7) for c in rows[1][:10])
        assert all((c.fg, c.bg) == (7, 0) for c in rows[0])


class TestCommitAndCancel:
    """Leaving the menu keeps or undoes its edits as one unit."""

    def test_enter_commits_without_requeue(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["down", "enter"])
        assert controller.outcome == "commit"
        assert ctx.buffer.text == "Get-Beta"
        assert ctx.buffer.cursor == len("Get-Beta")
        assert not ctx.queued_keys

    def test_commit_is_a_single_undo_unit(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        _run(ctx, ["down", "down", "up", "enter"])
        assert ctx.buffer.edits.length == 1
        ctx.buffer.undo()
        assert ctx.buffer.text == "Get-"
        assert ctx.buffer.cursor == 4

    def test_cancel_restores_text_cursor_and_mark(self, make_ctx) -> None:
        ctx = make_ctx("ls Get- -Force", GET_CANDIDATES, cursor=7)
        ctx.buffer.mark = 2
        controller = _run(ctx, ["down", "down", "escape"])
        assert controller.outcome == "cancel"
        assert ctx.buffer.text == "ls Get- -Force"
        assert ctx.buffer.cursor == 7
        assert ctx.buffer.mark == 2
        assert ctx.buffer.edits.length == 0
        assert not ctx.selection_active

    def test_ctrl_g_cancels(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["ctrl+g"])
        assert controller.outcome == "cancel"
        assert ctx.buffer.text == "Get-"

    def test_cancel_restores_span_length(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        ctx.console.feed("escape")
        candidate_set = ctx.provider.complete("Get-", 4)
        MenuController(ctx, candidate_set).run()
        assert candidate_set.span == ReplacementSpan(0, 4)

    def test_menu_area_cleared_on_exit(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        _run(ctx, ["enter"])
        assert ctx.console.cleared[-1] == (1, 1)
        assert ctx.console.row_text(1) == ""

    def test_cursor_sits_after_typed_part_while_open(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        seen = []
        ctx.render = lambda c: seen.append((c.buffer.text, c.buffer.cursor, c.selection_active))
        _run(ctx, ["escape"])
        assert ("Get-Alpha", 4, True) in seen


class TestTerminators:
    """Type-specific keys finish the completion."""

    def test_space_commits_and_is_requeued(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        _run(ctx, ["space"])
        assert ctx.buffer.text == "Get-Alpha"
        assert ctx.buffer.cursor == len("Get-Alpha")
        assert [k.key for k in ctx.queued_keys] == ["space"]

    def test_dot_finishes_a_property(self, make_ctx) -> None:
        ctx = make_ctx("$x.Le", [
            CompletionCandidate("Length", type_tag="property"),
            CompletionCandidate("LastWriteTime", type_tag="property"),
        ], cursor=5)
        ctx.provider.complete = lambda text, cursor: CandidateSet(
            list(ctx.provider.candidates), ReplacementSpan(3, 2)
        )
        _run(ctx, ["."])
        assert ctx.buffer.text == "$x.Length"
        assert [k.char for k in ctx.queued_keys] == ["."]

    def test_dot_filters_other_types(self, make_ctx) -> None:
        ctx = make_ctx("a", ["ab", "a.b", "a.c"])
        controller = _run(ctx, [".", "enter"])
        assert len(controller.state.visible) == 2
        assert ctx.buffer.text == "a.b"
        assert not ctx.queued_keys

    def test_separator_is_not_repeated(self, make_ctx) -> None:
        ctx = make_ctx("s", [
            CompletionCandidate("src", type_tag="container"),
            CompletionCandidate("scripts", type_tag="container"),
        ], settings=CompletionSettings(path_separator="/"))
        _run(ctx, ["/"])
        assert ctx.buffer.text == "src/"
        assert ctx.buffer.cursor == 4
        assert not ctx.queued_keys

    def test_closing_paren_requeued_after_method(self, make_ctx) -> None:
        ctx = make_ctx("To", [
            CompletionCandidate("ToString(", type_tag="method"),
            CompletionCandidate("ToUpper(", type_tag="method"),
        ])
        _run(ctx, [")"])
        assert ctx.buffer.text == "ToString("
        assert [k.char for k in ctx.queued_keys] == [")"]

    def test_open_paren_not_repeated_after_method(self, make_ctx) -> None:
        ctx = make_ctx("To", [
            CompletionCandidate("ToString(", type_tag="method"),
            CompletionCandidate("ToUpper(", type_tag="method"),
        ])
        _run(ctx, ["("])
        assert ctx.buffer.text == "ToString("
        assert not ctx.queued_keys

    def test_space_after_quoted_directory_goes_after_quote(self, make_ctx) -> None:
        ctx = make_ctx("'C:\\P", [
            CompletionCandidate("'C:\\Program Files'", type_tag="container"),
            CompletionCandidate("'C:\\ProgramData'", type_tag="container"),
        ])
        _run(ctx, ["space"])
        assert ctx.buffer.text == "'C:\\Program Files\\'"
        assert ctx.buffer.cursor == len(ctx.buffer.text)
        assert [k.key for k in ctx.queued_keys] == ["space"]


class TestFiltering:
    """Typed characters narrow the visible candidates."""

    def test_typing_narrows_case_insensitively(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["b", "enter"])
        assert [c.insertion_text for c in controller.state.visible] == ["Get-Beta"]
        assert ctx.buffer.text == "Get-Beta"

    def test_filter_redraws_smaller_menu(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES, width=12)
        _run(ctx, ["g", "escape"])
        _, rows = ctx.console.cell_writes[-1]
        assert len(rows) == 1

    def test_filter_refilters_original_set(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["b", "backspace", "enter"])
        assert len(controller.state.visible) == 3

    def test_filter_keeps_selected_candidate(self, make_ctx) -> None:
        ctx = make_ctx("Get-", ["Get-Alpha", "Get-Beta", "Get-Bravo"])
        controller = _run(ctx, ["down", "down", "b", "enter"])
        assert ctx.buffer.text == "Get-Bravo"
        assert controller.state.selected_index == 1

    def test_exhausting_candidates_keeps_insertion_up_to_caret(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["a", "x"])
        assert controller.outcome == "commit"
        assert ctx.buffer.text == "Get-A"
        assert [k.char for k in ctx.queued_keys] == ["x"]
        ctx.buffer.undo()
        assert ctx.buffer.text == "Get-"

    def test_exhausting_with_empty_entry_filter_cancels(self, make_ctx) -> None:
        ctx = make_ctx("", ["alpha", "beta"])
        controller = _run(ctx, ["z"])
        assert controller.outcome == "cancel"
        assert ctx.buffer.text == ""
        assert [k.char for k in ctx.queued_keys] == ["z"]

    def test_tab_extends_filter_to_common_prefix(self, make_ctx) -> None:
        ctx = make_ctx("Get-C", ["Get-ChildItem", "Get-ChildProcess", "Get-Command"])
        controller = _run(ctx, ["h", "tab", "enter"])
        assert controller.state.typed_filter == "Get-Child"
        assert controller.state.selected_index == 0
        assert ctx.console.bells == 1
        assert ctx.buffer.text == "Get-ChildItem"


class TestBackspaceWarning:
    """Backspace at the entry filter length warns once before leaving."""

    def test_first_backspace_only_rings(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["backspace", "escape"])
        assert ctx.console.bells == 1
        assert controller.outcome == "cancel"
        assert not ctx.queued_keys

    def test_second_consecutive_backspace_exits(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["backspace", "backspace"])
        assert ctx.console.bells == 1
        assert controller.outcome == "commit"
        assert ctx.buffer.text == "Get-"
        assert [k.key for k in ctx.queued_keys] == ["backspace"]

    def test_warning_lapses_after_other_key(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["backspace", "down", "backspace", "escape"])
        assert ctx.console.bells == 2
        assert controller.outcome == "cancel"

    def test_second_backspace_with_empty_entry_filter_cancels(self, make_ctx) -> None:
        ctx = make_ctx("", ["alpha", "beta"])
        controller = _run(ctx, ["backspace", "backspace"])
        assert controller.outcome == "cancel"
        assert ctx.buffer.text == ""
        assert [k.key for k in ctx.queued_keys] == ["backspace"]

    def test_backspace_above_entry_length_shrinks_filter(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["a", "backspace", "enter"])
        assert ctx.console.bells == 0
        assert controller.state.typed_filter == "Get-"

    def test_character_after_warning_is_not_filtered_yet(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["backspace", "g", "enter"])
        assert controller.state.typed_filter == "Get-g"
        assert len(controller.state.visible) == 3
        assert ctx.buffer.text == "Get-Alpha"

    def test_next_character_filters_with_both(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        controller = _run(ctx, ["backspace", "g", "a", "enter"])
        assert [c.insertion_text for c in controller.state.visible] == ["Get-Gamma"]
        assert ctx.buffer.text == "Get-Gamma"


class TestOtherKeys:
    """Unhandled keys commit and are handed back."""

    def test_cut_keeps_selection(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        ctx.buffer.mark = 1
        _run(ctx, ["ctrl+x"])
        assert ctx.selection_active
        assert ctx.buffer.selection() == (4, len("Get-Alpha"))
        assert [k.key for k in ctx.queued_keys] == ["ctrl+x"]

    def test_other_key_clears_selection(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        ctx.buffer.mark = 1
        controller = _run(ctx, ["ctrl+a"])
        assert controller.outcome == "commit"
        assert not ctx.selection_active
        assert ctx.buffer.mark == 1
        assert ctx.buffer.text == "Get-Alpha"
        assert [k.key for k in ctx.queued_keys] == ["ctrl+a"]

    def test_requeued_key_is_read_first(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        _run(ctx, ["ctrl+a"])
        ctx.console.feed("b")
        assert ctx.read_key() == key("ctrl+a")
        assert ctx.read_key() == key("b")


class TestScreenHandling:
    """Fit check and scroll tracking."""

    def test_falls_back_to_static_listing(self, make_ctx) -> None:
        ctx = make_ctx("item-", GRID_CANDIDATES, width=20, height=5)
        controller = _run(ctx, [])
        assert controller.outcome is None
        assert ctx.buffer.text == "item-"
        assert ctx.buffer.edits.length == 0
        _, lines = ctx.console.line_writes[-1]
        assert lines[0] == "item-000  item-005"

    def test_static_listing_moves_prompt_below(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES)
        _run(ctx, [], interactive=False)
        assert ctx.console.line_writes == [(1, ["Get-Alpha  Get-Beta   Get-Gamma"])]
        assert ctx.initial_y == 2

    def test_scroll_adjusts_initial_y(self, make_ctx) -> None:
        ctx = make_ctx("Get-", GET_CANDIDATES, height=6, initial_y=5)
        _run(ctx, ["escape"])
        assert ctx.console.scrolled == 1
        assert ctx.initial_y == 4
