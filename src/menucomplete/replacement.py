"""Writing a chosen candidate into the line buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from menucomplete.candidates import CompletionCandidate, ReplacementSpan

if TYPE_CHECKING:
    from menucomplete.context import EditorContext


def directory_replacement_text(text: str, separator: str = "\\") -> tuple[str, int]:
    """Add a trailing path separator to a container candidate.

    Returns the text to insert and the cursor adjustment to apply afterwards.
    A quoted path gets the separator inside the closing quote and the cursor
    is moved back before that quote.
    """
    if text.endswith(separator):
        return text, 0
    if text.endswith(separator + "'") or text.endswith(separator + '"'):
        return text, -1
    if text.endswith("'") or text.endswith('"'):
        return text[:-1] + separator + text[-1], -1
    return text + separator, 0


def replace_span(ctx: EditorContext, span: ReplacementSpan, text: str) -> ReplacementSpan:
    """Overwrite *span* with *text* and resize the span to match."""
    ctx.buffer.replace(span.start, span.length, text)
    span.length = len(text)
    return span


def apply(
    ctx: EditorContext, candidate: CompletionCandidate, span: ReplacementSpan
) -> ReplacementSpan:
    """Replace *span* with the candidate's insertion text.

    The span is updated in place (and returned) so later replacements in
    the same session keep targeting the inserted text.
    """
    text = candidate.insertion_text
    cursor_adjustment = 0
    if candidate.type_tag == "container":
        text, cursor_adjustment = directory_replacement_text(text, ctx.settings.path_separator)

    replace_span(ctx, span, text)
    if cursor_adjustment:
        ctx.buffer.cursor += cursor_adjustment
    ctx.redraw()
    return span
