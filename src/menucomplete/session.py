"""Candidate caching across repeated completion requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from menucomplete.candidates import CandidateProvider, CandidateSet, CompletionCandidate
from menucomplete.replacement import apply

if TYPE_CHECKING:
    from menucomplete.context import EditorContext

logger = logging.getLogger(__name__)


class CompletionSession:
    """Holds one candidate set from the first completion request until the
    buffer changes under it.

    ``request_count`` counts completion commands issued against the cached
    set; zero means the next request must call the provider.
    """

    def __init__(self, provider: CandidateProvider) -> None:
        self._provider = provider
        self.candidates: CandidateSet | None = None
        self.request_count = 0

    def request_candidates(self, text: str, cursor: int) -> CandidateSet | None:
        """Return the cached set, fetching a fresh one when needed.

        Provider errors and empty results both yield None.
        """
        if self.request_count == 0:
            self.candidates = None
            try:
                result = self._provider.complete(text, cursor)
            except Exception:
                logger.debug("Candidate provider failed at offset %d", cursor, exc_info=True)
                return None
            if not result:
                return None
            self.candidates = result
        return self.candidates

    def cycle(self, ctx: EditorContext, forward: bool = True) -> CompletionCandidate | None:
        """Replace the span with the next (or previous) candidate."""
        candidates = self.request_candidates(ctx.buffer.text, ctx.buffer.cursor)
        if candidates is None:
            return None

        index = candidates.cycle_index + (1 if forward else -1)
        if index < 0:
            index = len(candidates) - 1
        elif index >= len(candidates):
            index = 0
        candidates.cycle_index = index
        candidate = candidates.candidates[candidates.cycle_index]
        apply(ctx, candidate, candidates.span)
        self.request_count += 1
        return candidate

    def invalidate(self) -> None:
        """Forget the cached set; the next request refetches."""
        self.candidates = None
        self.request_count = 0

    def note_edit(self) -> None:
        """Called by the host for every edit it makes itself."""
        self.invalidate()

    def note_cursor_move(self, offset: int) -> None:
        """Invalidate when the caret leaves the replacement span."""
        if self.candidates is None or not self.candidates.span.contains(offset):
            self.invalidate()
