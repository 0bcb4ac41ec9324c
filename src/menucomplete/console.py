"""Console abstraction for cell-grid output and blocking key input.

Provides a ``Console`` protocol and a concrete ``ProcessConsole`` that drives
a real terminal through raw mode and ANSI escape sequences. Screen rows are
zero-based and absolute; writing past the bottom row scrolls the screen, and
the write methods return the row the block actually starts on afterwards.
"""

from __future__ import annotations

import os
import re
import sys
import termios
import tty
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from menucomplete.keys import KeyEvent, key_event, split_sequences

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_MOVE_TO_FMT = "\x1b[{};{}H"
_CLEAR_LINE = "\x1b[2K"
_SGR_RESET = "\x1b[0m"
_SGR_FMT = "\x1b[{};{}m"
_QUERY_CURSOR = "\x1b[6n"
_BELL = "\x07"

_CURSOR_REPORT_RE = re.compile(r"\x1b\[(\d+);(\d+)R")

DEFAULT_FG = 7
DEFAULT_BG = 0


@dataclass
class Cell:
    """One screen cell: a grapheme with ANSI colour numbers (0-7).

    Wide graphemes are followed by a continuation cell with an empty char.
    """

    char: str = " "
    fg: int = DEFAULT_FG
    bg: int = DEFAULT_BG


# ---------------------------------------------------------------------------
# Console protocol
# ---------------------------------------------------------------------------


class Console(Protocol):
    """Interface for the terminal the completion menu draws on."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def write_cells(self, rows: list[list[Cell]], top: int) -> int: ...

    def write_lines(self, lines: list[str], top: int) -> int: ...

    def clear_rows(self, top: int, count: int) -> None: ...

    def place_cursor(self, row: int, col: int) -> None: ...

    def read_key(self) -> KeyEvent: ...

    def bell(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessConsole implementation
# ---------------------------------------------------------------------------


class ProcessConsole:
    """Console backed by ``sys.stdin``/``sys.stdout``.

    Use as a context manager to hold the terminal in raw mode.
    """

    def __init__(self) -> None:
        self._original_termios: list | None = None
        self._pending: deque[str] = deque()
        self._remainder = ""

    # -- properties ---------------------------------------------------------

    @property
    def width(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def height(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- raw mode -----------------------------------------------------------

    def __enter__(self) -> ProcessConsole:
        fd = sys.stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        return self

    def __exit__(self, *exc: object) -> None:
        if self._original_termios is not None:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._original_termios)
            self._original_termios = None
        self._raw_write(_SGR_RESET + "\r\n")

    def cursor_row(self) -> int:
        """Ask the terminal for the current cursor row (zero-based)."""
        self._raw_write(_QUERY_CURSOR)
        response = ""
        while True:
            response += os.read(sys.stdin.fileno(), 32).decode("utf-8", errors="replace")
            m = _CURSOR_REPORT_RE.search(response)
            if m:
                leftover = response[: m.start()] + response[m.end() :]
                if leftover:
                    self._queue_input(leftover)
                return int(m.group(1)) - 1

    # -- output -------------------------------------------------------------

    def write_cells(self, rows: list[list[Cell]], top: int) -> int:
        """Write a block of cell rows starting at screen row *top*."""
        top = self._scroll_for(top, len(rows))
        out: list[str] = []
        for i, row in enumerate(rows):
            out.append(_MOVE_TO_FMT.format(top + i + 1, 1))
            attrs: tuple[int, int] | None = None
            for cell in row:
                if (cell.fg, cell.bg) != attrs:
                    attrs = (cell.fg, cell.bg)
                    out.append(_SGR_FMT.format(30 + cell.fg, 40 + cell.bg))
                out.append(cell.char)
            out.append(_SGR_RESET)
        self._raw_write("".join(out))
        return top

    def write_lines(self, lines: list[str], top: int) -> int:
        top = self._scroll_for(top, len(lines))
        out: list[str] = []
        for i, line in enumerate(lines):
            out.append(_MOVE_TO_FMT.format(top + i + 1, 1) + _CLEAR_LINE + line)
        self._raw_write("".join(out))
        return top

    def clear_rows(self, top: int, count: int) -> None:
        out: list[str] = []
        for row in range(max(0, top), min(top + count, self.height)):
            out.append(_MOVE_TO_FMT.format(row + 1, 1) + _CLEAR_LINE)
        self._raw_write("".join(out))

    def place_cursor(self, row: int, col: int) -> None:
        self._raw_write(_MOVE_TO_FMT.format(row + 1, col + 1))

    def bell(self) -> None:
        self._raw_write(_BELL)

    # -- input --------------------------------------------------------------

    def read_key(self) -> KeyEvent:
        """Block until a recognized key arrives.

        Raises ``EOFError`` once stdin is closed.
        """
        while True:
            while not self._pending:
                raw = os.read(sys.stdin.fileno(), 64)
                if not raw:
                    raise EOFError("end of input")
                self._queue_input(raw.decode("utf-8", errors="replace"))
            event = key_event(self._pending.popleft())
            if event is not None:
                return event

    def _queue_input(self, data: str) -> None:
        # An incomplete escape sequence waits for the next read.
        sequences, self._remainder = split_sequences(self._remainder + data)
        self._pending.extend(sequences)

    # -- private ------------------------------------------------------------

    def _scroll_for(self, top: int, count: int) -> int:
        """Scroll so *count* rows fit below *top*; return the adjusted top."""
        overflow = top + count - self.height
        if overflow > 0:
            self._raw_write(_MOVE_TO_FMT.format(self.height, 1) + "\n" * overflow)
            top -= overflow
        return max(0, top)

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass
