"""Shared fixtures: scripted providers and editor contexts."""

from __future__ import annotations

from typing import Callable

import pytest

from menucomplete.candidates import CandidateSet, CompletionCandidate, ReplacementSpan
from menucomplete.context import EditorContext
from menucomplete.line_buffer import LineBuffer
from menucomplete.settings import CompletionSettings

from .virtual_console import VirtualConsole


class StaticProvider:
    """Returns the same candidates for the word before the cursor."""

    def __init__(self, candidates: list[str | CompletionCandidate]) -> None:
        self.candidates = [
            c if isinstance(c, CompletionCandidate) else CompletionCandidate(c) for c in candidates
        ]
        self.calls = 0

    def complete(self, text: str, cursor: int) -> CandidateSet | None:
        self.calls += 1
        if not self.candidates:
            return None
        start = text.rfind(" ", 0, cursor) + 1
        return CandidateSet(list(self.candidates), ReplacementSpan(start, cursor - start))


class FailingProvider:
    """Raises on every request."""

    def __init__(self) -> None:
        self.calls = 0

    def complete(self, text: str, cursor: int) -> CandidateSet | None:
        self.calls += 1
        raise RuntimeError("completion engine crashed")


MakeContext = Callable[..., EditorContext]


@pytest.fixture
def make_ctx() -> MakeContext:
    """Build an ``EditorContext`` over a ``VirtualConsole``.

    ``candidates`` may be a list (wrapped in a ``StaticProvider``) or a
    provider object; ``keys`` scripts the console input.
    """

    def _make(
        text: str = "",
        candidates: list[str | CompletionCandidate] | object = (),
        *,
        cursor: int | None = None,
        keys: list[str] | None = None,
        width: int = 80,
        height: int = 24,
        settings: CompletionSettings | None = None,
        initial_y: int = 0,
    ) -> EditorContext:
        if isinstance(candidates, (list, tuple)):
            provider = StaticProvider(list(candidates))
        else:
            provider = candidates
        ctx = EditorContext(
            buffer=LineBuffer(text, cursor),
            console=VirtualConsole(width=width, height=height, keys=keys),
            provider=provider,
            settings=settings or CompletionSettings(),
        )
        ctx.initial_y = initial_y
        return ctx

    return _make
