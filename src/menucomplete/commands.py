"""Completion commands bound to keys by the host editor.

Each command takes the :class:`~menucomplete.context.EditorContext` and
returns nothing; failures ring the bell instead of raising.
"""

from __future__ import annotations

import logging

from menucomplete.candidates import CandidateSet
from menucomplete.context import EditorContext
from menucomplete.keys import matches_key
from menucomplete.menu import MenuController
from menucomplete.prefix import unambiguous_prefix
from menucomplete.replacement import apply, replace_span

logger = logging.getLogger(__name__)

QUERY_MESSAGE = "Display all {count} possibilities? (y or n)"


# ---------------------------------------------------------------------------
# Public commands
# ---------------------------------------------------------------------------


def complete(ctx: EditorContext) -> None:
    """Insert the longest common prefix; list the candidates on a repeat press."""
    _complete_impl(ctx, menu_select=False)


def menu_complete(ctx: EditorContext) -> None:
    """Like :func:`complete`, but pick from an interactive menu."""
    _complete_impl(ctx, menu_select=True)


def tab_complete_next(ctx: EditorContext) -> None:
    if ctx.session.cycle(ctx, forward=True) is None:
        ctx.ding()


def tab_complete_previous(ctx: EditorContext) -> None:
    if ctx.session.cycle(ctx, forward=False) is None:
        ctx.ding()


def possible_completions(ctx: EditorContext) -> None:
    """List every candidate below the input without changing it."""
    candidates = ctx.session.request_candidates(ctx.buffer.text, ctx.buffer.cursor)
    _possible_completions_impl(ctx, candidates, menu_select=False)


def prompt_yes_or_no(ctx: EditorContext, message: str) -> bool:
    """Show *message* below the input and wait for a yes or no answer.

    ``y`` answers yes; ``n``, Escape and Ctrl+G answer no. Other keys ring
    the bell.
    """
    area_top = ctx.menu_area_top()
    top = ctx.console.write_lines([message], area_top)
    ctx.initial_y -= area_top - top
    try:
        while True:
            event = ctx.read_key()
            if event.char in ("y", "Y"):
                return True
            if event.char in ("n", "N") or any(
                matches_key(event, key) for key in ("escape", "ctrl+g", "ctrl+c")
            ):
                return False
            ctx.ding()
    finally:
        ctx.console.clear_rows(top, 1)
        ctx.redraw()


# ---------------------------------------------------------------------------
# Shared implementation
# ---------------------------------------------------------------------------


def _complete_impl(ctx: EditorContext, menu_select: bool) -> None:
    session = ctx.session
    candidates = session.request_candidates(ctx.buffer.text, ctx.buffer.cursor)
    if candidates is None:
        ctx.ding()
        return

    if session.request_count > 0:
        if len(candidates) == 1:
            ctx.ding()
        else:
            _possible_completions_impl(ctx, candidates, menu_select)
        return

    if len(candidates) == 1:
        apply(ctx, candidates.candidates[0], candidates.span)
        return

    if menu_select:
        _possible_completions_impl(ctx, candidates, menu_select=True)
        return

    prefix, ambiguous = unambiguous_prefix(
        candidates.candidates, True, candidates.consistent_quoting
    )
    if prefix:
        replace_span(ctx, candidates.span, prefix)
        ctx.redraw()
        if ambiguous:
            ctx.ding()
    else:
        # Nothing in common: list right away instead of waiting for a second press.
        _possible_completions_impl(ctx, candidates, menu_select=False)

    session.request_count += 1


def _possible_completions_impl(
    ctx: EditorContext, candidates: CandidateSet | None, menu_select: bool
) -> None:
    if candidates is None or not candidates:
        ctx.ding()
        return

    count = len(candidates)
    if count >= ctx.settings.completion_query_items:
        if not prompt_yes_or_no(ctx, QUERY_MESSAGE.format(count=count)):
            logger.debug("Listing of %d candidates declined", count)
            return

    MenuController(ctx, candidates).run(interactive=menu_select)
