"""Completion candidates, candidate sets, and the provider protocol.

A candidate provider turns the input text and cursor offset into a
:class:`CandidateSet`: an ordered list of :class:`CompletionCandidate` values
sharing a single replacement span.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

from menucomplete.quoting import is_consistent_quoting

CandidateType = Literal[
    "variable",
    "namespace",
    "property",
    "container",
    "method",
    "type",
    "parameterName",
    "parameterValue",
    "other",
]


@dataclass(frozen=True)
class CompletionCandidate:
    """A single completion value.

    ``display_text`` defaults to the insertion text and ``tooltip`` to the
    display text when they are left empty.
    """

    insertion_text: str
    display_text: str = ""
    tooltip: str = ""
    type_tag: CandidateType = "other"

    def __post_init__(self) -> None:
        if not self.display_text:
            object.__setattr__(self, "display_text", self.insertion_text)
        if not self.tooltip:
            object.__setattr__(self, "tooltip", self.display_text)


@dataclass
class ReplacementSpan:
    """Range of buffer text overwritten by the chosen candidate."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end


@dataclass
class CandidateSet:
    """Ordered candidates for one completion request.

    ``cycle_index`` starts at -1 so the first forward cycle selects the
    first candidate.
    """

    candidates: list[CompletionCandidate]
    span: ReplacementSpan
    cycle_index: int = -1
    _consistent_quoting: bool | None = field(default=None, init=False, repr=False)

    @property
    def consistent_quoting(self) -> bool:
        """Quoting consistency of the whole set, computed once."""
        if self._consistent_quoting is None:
            self._consistent_quoting = is_consistent_quoting(self.candidates)
        return self._consistent_quoting

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)


class CandidateProvider(Protocol):
    """Produces completion candidates for the text around the cursor."""

    def complete(self, text: str, cursor: int) -> CandidateSet | None:
        """Return the candidates for *text* at *cursor*, or None.

        Called synchronously from the input loop, so implementations must
        bound their own latency.
        """
        ...
