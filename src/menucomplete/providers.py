"""Candidate providers for command names, parameters, and file paths.

The first word of the input completes against the registered commands,
words starting with ``-`` complete that command's parameter names, and
anything else completes file system paths relative to a base directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from menucomplete.candidates import CandidateSet, CompletionCandidate, ReplacementSpan

TOKEN_DELIMITERS = frozenset({" ", "\t", "="})
PATH_SEPARATORS = frozenset({"/", "\\"})
QUOTE_CHARS = frozenset({'"', "'"})


def find_unclosed_quote_start(text: str) -> int | None:
    """Find the start position of an unclosed quote, or None."""
    quote: str | None = None
    quote_start = -1

    for i, ch in enumerate(text):
        if quote is None and ch in QUOTE_CHARS:
            quote, quote_start = ch, i
        elif ch == quote:
            quote = None

    return quote_start if quote is not None else None


def find_token_start(text: str) -> int:
    """Index where the word ending at the end of *text* begins."""
    quote_start = find_unclosed_quote_start(text)
    if quote_start is not None:
        return quote_start
    for i in range(len(text) - 1, -1, -1):
        if text[i] in TOKEN_DELIMITERS:
            return i + 1
    return 0


def quote_if_needed(path: str, quote: str | None) -> str:
    """Wrap *path* in *quote*, or in double quotes when it contains a space."""
    if quote is None and " " not in path:
        return path
    quote = quote or '"'
    return f"{quote}{path}{quote}"


@dataclass
class CommandSpec:
    """A command the provider knows by name, with its parameter names."""

    name: str
    description: str | None = None
    parameters: list[str] = field(default_factory=list)


class CombinedCandidateProvider:
    """Completes commands, their parameters, and paths."""

    def __init__(
        self,
        commands: list[CommandSpec] | None = None,
        base_path: str | None = None,
    ) -> None:
        self._commands: list[CommandSpec] = commands if commands is not None else []
        self._base_path: str = base_path if base_path is not None else os.getcwd()

    def complete(self, text: str, cursor: int) -> CandidateSet | None:
        before = text[:cursor]
        start = find_token_start(before)
        token = before[start:]

        if not before[:start].strip():
            candidates = self._command_candidates(token)
        elif token.startswith("-"):
            candidates = self._parameter_candidates(before[:start].split()[0], token)
        else:
            candidates = self._path_candidates(token)

        if not candidates:
            return None
        return CandidateSet(candidates, ReplacementSpan(start, cursor - start))

    # ---- Private helpers ----

    def _command_candidates(self, prefix: str) -> list[CompletionCandidate]:
        lowered = prefix.lower()
        return [
            CompletionCandidate(cmd.name, tooltip=cmd.description or "", type_tag="other")
            for cmd in self._commands
            if cmd.name.lower().startswith(lowered)
        ]

    def _parameter_candidates(self, command_name: str, token: str) -> list[CompletionCandidate]:
        command = next(
            (cmd for cmd in self._commands if cmd.name.lower() == command_name.lower()), None
        )
        if command is None:
            return []
        lowered = token[1:].lower()
        return [
            CompletionCandidate(f"-{name}", display_text=name, type_tag="parameterName")
            for name in command.parameters
            if name.lower().startswith(lowered)
        ]

    def _path_candidates(self, token: str) -> list[CompletionCandidate]:
        """Get file/directory candidates for a path prefix."""
        quote = token[0] if token[:1] in QUOTE_CHARS else None
        raw_prefix = token[1:] if quote else token

        split = max((raw_prefix.rfind(sep) for sep in PATH_SEPARATORS), default=-1)
        dir_prefix = raw_prefix[: split + 1]
        search_prefix = raw_prefix[split + 1 :]

        expanded = os.path.expanduser(dir_prefix) if dir_prefix.startswith("~") else dir_prefix
        search_dir = os.path.join(self._base_path, expanded) if expanded else self._base_path

        try:
            entries = list(os.scandir(search_dir))
        except OSError:
            # Directory doesn't exist or not accessible
            return []

        candidates: list[CompletionCandidate] = []
        for entry in entries:
            if not entry.name.lower().startswith(search_prefix.lower()):
                continue

            try:
                is_directory = entry.is_dir()
            except OSError:
                # Broken symlink or permission error - treat as file
                is_directory = False

            path = dir_prefix + entry.name
            candidates.append(
                CompletionCandidate(
                    quote_if_needed(path, quote),
                    display_text=entry.name,
                    tooltip=path,
                    type_tag="container" if is_directory else "other",
                )
            )

        # Directories first, then alphabetically
        candidates.sort(key=lambda c: (c.type_tag != "container", c.display_text.lower()))
        return candidates
