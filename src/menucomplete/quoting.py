"""Quote detection and normalization for candidate insertion text."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from menucomplete.candidates import CompletionCandidate

# Invocation operator that may precede a quoted command path.
INVOCATION_OPERATOR = "& "

_SINGLE_QUOTES = frozenset("'‘’‚")
_DOUBLE_QUOTES = frozenset('"“”„')


def is_single_quote(char: str) -> bool:
    return char in _SINGLE_QUOTES


def is_double_quote(char: str) -> bool:
    return char in _DOUBLE_QUOTES


def is_quote(char: str) -> bool:
    return char in _SINGLE_QUOTES or char in _DOUBLE_QUOTES


def is_quoted(text: str) -> bool:
    """Return ``True`` if *text* is wrapped in a matching quote pair.

    A leading ``"& "`` is skipped when looking for the opening quote.
    """
    if len(text) < 2:
        return False

    first = text[2] if len(text) > 4 and text.startswith(INVOCATION_OPERATOR) else text[0]
    last = text[-1]

    return (is_single_quote(first) and is_single_quote(last)) or (
        is_double_quote(first) and is_double_quote(last)
    )


def is_consistent_quoting(candidates: Sequence[CompletionCandidate]) -> bool:
    """Check whether a candidate set is quoted uniformly.

    True when no candidate is quoted, or when every candidate is quoted and
    starts with the same character as the first one.
    """
    quoted = sum(1 for c in candidates if is_quoted(c.insertion_text))
    if quoted == 0:
        return True
    if quoted != len(candidates):
        return False
    first = candidates[0].insertion_text[0]
    return all(c.insertion_text[0] == first for c in candidates)


def unquote(text: str, consistent: bool) -> str:
    """Strip the quotes (and invocation operator) from inconsistently quoted text."""
    if consistent or not is_quoted(text):
        return text
    start = 3 if text.startswith(INVOCATION_OPERATOR) else 1
    return text[start:-1]
