"""Longest-common-prefix resolution and prefix filtering over candidates."""

from __future__ import annotations

from typing import Sequence

from menucomplete.candidates import CompletionCandidate
from menucomplete.quoting import is_consistent_quoting, is_quote, unquote


def _candidate_text(
    candidate: CompletionCandidate, use_insertion_text: bool, consistent: bool
) -> str:
    if use_insertion_text:
        return unquote(candidate.insertion_text, consistent)
    return candidate.display_text


def unambiguous_prefix(
    candidates: Sequence[CompletionCandidate],
    use_insertion_text: bool = True,
    consistent: bool | None = None,
) -> tuple[str, bool]:
    """Find the longest case-insensitive prefix shared by all candidates.

    Quotes are ignored when the set is not consistently quoted. Returns the
    prefix (spelled as in the first candidate) and whether any candidate
    diverged from it. The prefix may be empty.
    """
    if not candidates:
        return "", False
    if consistent is None:
        consistent = is_consistent_quoting(candidates)

    ambiguous = False
    prefix = _candidate_text(candidates[0], use_insertion_text, consistent)

    for candidate in candidates[1:]:
        text = _candidate_text(candidate, use_insertion_text, consistent)
        for i, ch in enumerate(prefix):
            if i == len(text) or ch.lower() != text[i].lower():
                ambiguous = True
                prefix = prefix[:i]
                break
        if not prefix:
            break

    return prefix, ambiguous


def initial_menu_filter(
    candidates: Sequence[CompletionCandidate], consistent: bool | None = None
) -> str:
    """Text the user is considered to have typed when a menu opens."""
    text, _ = unambiguous_prefix(candidates, True, consistent)
    if not text:
        text, _ = unambiguous_prefix(candidates, False, consistent)
    if text and is_quote(text[0]):
        text = text[1:]
    return text


def filter_candidates(
    candidates: Sequence[CompletionCandidate],
    typed_filter: str,
    consistent: bool | None = None,
) -> list[CompletionCandidate]:
    """Return a new list of candidates whose text starts with *typed_filter*.

    Matches display text or unquoted insertion text, case-insensitively.
    Consistently quoted sets have their opening quote prepended to the filter.
    """
    if not candidates:
        return []
    if consistent is None:
        consistent = is_consistent_quoting(candidates)

    first = candidates[0].insertion_text
    if consistent and first and is_quote(first[0]):
        typed_filter = first[0] + typed_filter

    needle = typed_filter.lower()
    return [
        c
        for c in candidates
        if c.display_text.lower().startswith(needle)
        or unquote(c.insertion_text, consistent).lower().startswith(needle)
    ]
