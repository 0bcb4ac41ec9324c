"""Completion menu layout: a tooltip column or a column-major grid of cells."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from menucomplete.candidates import CompletionCandidate
from menucomplete.console import Cell
from menucomplete.utils import (
    grapheme_width,
    graphemes,
    shorten,
    single_line,
    take_columns,
    visible_width,
)

COLUMN_PADDING = 2
TOOLTIP_SEPARATOR = "- "
MIN_TOOLTIP_WIDTH = 5


@dataclass
class MenuLayout:
    """A rendered menu.

    ``rows`` holds exactly ``row_count`` rows of ``width`` cells. Candidate
    ``i`` sits at row ``i % row_count``, column ``i // row_count``.
    """

    column_width: int
    row_count: int
    width: int
    rows: list[list[Cell]] = field(default_factory=list)
    selected_index: int = 0
    show_tooltips: bool = False
    overflows: bool = False


def append_text(row: list[Cell], text: str) -> None:
    """Append cells for *text* to *row*; wide graphemes take a continuation cell."""
    for g in graphemes(text):
        w = grapheme_width(g)
        if w == 0:
            if row:
                row[-1].char += g
            continue
        row.append(Cell(g))
        row.extend(Cell("") for _ in range(w - 1))


def _pad_to(row: list[Cell], width: int) -> None:
    row.extend(Cell() for _ in range(width - len(row)))


def _fit_row(row: list[Cell], width: int) -> list[Cell]:
    """Cut or pad *row* to exactly *width* cells."""
    row = row[:width]
    # A wide grapheme cut off from its continuation cell becomes a blank.
    if row and len(row) == width and grapheme_width(row[-1].char) > 1:
        row[-1] = Cell()
    _pad_to(row, width)
    return row


def layout(
    candidates: Sequence[CompletionCandidate],
    width: int,
    height: int,
    show_tooltips: bool,
    current_insertion: str = "",
) -> MenuLayout:
    """Lay out *candidates* for a console *width* columns wide.

    One row per candidate (with tooltips) is used when tooltips are requested
    or only one column fits; otherwise candidates fill a column-major grid.
    The candidate whose insertion text equals *current_insertion* is reported
    as ``selected_index``.
    """
    items = [single_line(c.display_text) for c in candidates]
    column_width = max((visible_width(item) for item in items), default=0) + COLUMN_PADDING
    display_columns = max(1, width // column_width)

    selected_index = 0
    for index, candidate in enumerate(candidates):
        if candidate.insertion_text == current_insertion:
            selected_index = index

    rows: list[list[Cell]] = []

    if display_columns == 1 or show_tooltips:
        max_tooltip_width = width - column_width - len(TOOLTIP_SEPARATOR)
        if max_tooltip_width < MIN_TOOLTIP_WIDTH:
            column_width = width
            show_tooltips = False

        for candidate, item in zip(candidates, items):
            row: list[Cell] = []
            append_text(row, shorten(item, column_width))
            _pad_to(row, column_width)
            if show_tooltips:
                append_text(row, TOOLTIP_SEPARATOR)
                append_text(row, shorten(single_line(candidate.tooltip), max_tooltip_width))
            rows.append(_fit_row(row, width))

        row_count = len(candidates)
        column_width = width
    else:
        row_count = math.ceil(len(candidates) / display_columns)
        for r in range(row_count):
            row = []
            for col in range(display_columns):
                index = r + row_count * col
                if index >= len(candidates):
                    break
                append_text(row, take_columns(items[index], column_width))
                _pad_to(row, column_width * (col + 1))
            rows.append(_fit_row(row, width))

    return MenuLayout(
        column_width=column_width,
        row_count=row_count,
        width=width,
        rows=rows,
        selected_index=selected_index,
        show_tooltips=show_tooltips,
        overflows=row_count > height,
    )


def invert_selection(menu: MenuLayout, index: int) -> None:
    """Swap foreground and background colours of the cells of item *index*."""
    if menu.row_count == 0:
        return
    column = index // menu.row_count
    row = menu.rows[index - column * menu.row_count]
    start = column * menu.column_width
    for cell in row[start : start + menu.column_width]:
        cell.fg ^= 7
        cell.bg ^= 7


def render_lines(menu: MenuLayout) -> list[str]:
    """Plain-text rows of *menu*, trailing blanks removed."""
    return ["".join(cell.char for cell in row).rstrip() for row in menu.rows]
