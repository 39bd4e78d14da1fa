"""Excerpt assembly and fit-to-budget trimming.

Pipeline: normalize_window() → is_comment_open_before() → annotate_lines()
→ format_header() → _fit_to_budget().

Trimming is a fixed-point iteration over immutable _TrimState values: each
step drops exactly one body line, re-derives the header and adds the
trimmed note, until the serialized excerpt fits the budget.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from code_excerpt.core.exceptions import SelectionTooLargeError
from code_excerpt.excerpt.annotator import annotate_lines
from code_excerpt.excerpt.boundary import normalize_window
from code_excerpt.excerpt.comments import is_comment_open_before
from code_excerpt.excerpt.formatter import detect_language, serialized_length
from code_excerpt.excerpt.header import format_header
from code_excerpt.excerpt.types import (
    NOTE_TRIMMED,
    FormattingOptions,
    NormalizedWindow,
    NoteSet,
    RenderedExcerpt,
    Selection,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _TrimState:
    """One point of the trimming iteration.

    Attributes:
        window: Current requested/actual bounds.
        notes: Notes collected so far.
        header: Header rendered for window.
        body_chars: Total length of the body lines inside window.
        trim_top: Whether the next step trims the top (anchor mode only).

    """

    window: NormalizedWindow
    notes: NoteSet
    header: str
    body_chars: int
    trim_top: bool = False


@dataclass(frozen=True, slots=True)
class _Body:
    """Annotated lines of the normalized window, never mutated."""

    lines: tuple[str, ...]
    first_line: int

    def line(self, number: int) -> str:
        return self.lines[number - self.first_line]

    def slice(self, window: NormalizedWindow) -> tuple[str, ...]:
        return self.lines[
            window.actual_start - self.first_line : window.actual_end - self.first_line + 1
        ]


def _length(state: _TrimState, language: str) -> int:
    return serialized_length(
        state.header, state.notes, state.body_chars, state.window.size, language
    )


def _trim_step(
    state: _TrimState,
    body: _Body,
    file: str,
    trims_top: bool,
) -> _TrimState:
    """Drop one line from the window and re-derive header and notes."""
    if trims_top and state.trim_top:
        removed = body.line(state.window.actual_start)
        window = state.window.drop_first()
    else:
        removed = body.line(state.window.actual_end)
        window = state.window.drop_last()

    return _TrimState(
        window=window,
        notes=state.notes.add(NOTE_TRIMMED),
        header=format_header(file, window),
        body_chars=state.body_chars - len(removed),
        trim_top=not state.trim_top,
    )


def _fit_to_budget(
    state: _TrimState,
    body: _Body,
    file: str,
    language: str,
    budget: int,
    trims_top: bool,
) -> _TrimState:
    """Shrink the window until the serialized excerpt fits budget.

    Args:
        state: Initial state built from the normalized window.
        body: Annotated window lines.
        file: File path shown in the header.
        language: Fence language tag.
        budget: Maximum serialized length.
        trims_top: Alternate top and bottom trims (anchor selections);
            otherwise only the bottom is trimmed.

    Returns:
        First state whose serialized length is within budget.

    Raises:
        SelectionTooLargeError: If a single line still does not fit.

    """
    iterations = 0
    while _length(state, language) > budget:
        if state.window.size <= 1:
            raise SelectionTooLargeError(
                state.window.actual_start, state.window.actual_end, budget
            )
        state = _trim_step(state, body, file, trims_top)
        iterations += 1

    if iterations:
        logger.debug(
            "Trimmed %s by %d lines to %d-%d to fit %d characters",
            file,
            iterations,
            state.window.actual_start,
            state.window.actual_end,
            budget,
        )
    return state


def render_excerpt(
    lines: Sequence[str],
    file: str,
    selection: Selection,
    options: FormattingOptions | None = None,
) -> RenderedExcerpt:
    """Render a budget-constrained excerpt of a document.

    Args:
        lines: Document lines (see split_lines()).
        file: File path shown in the header.
        selection: Anchor or range selection.
        options: Formatting options; defaults to FormattingOptions().

    Returns:
        RenderedExcerpt whose serialized form fits options.budget.

    Raises:
        OutOfBoundsError: If the selection starts beyond the document.
        SelectionTooLargeError: If not even one line fits the budget.

    """
    if options is None:
        options = FormattingOptions()

    start, end = selection.bounds()
    window = normalize_window(lines, start, end)
    comment_open = is_comment_open_before(lines, window.actual_start)

    annotated, notes = annotate_lines(
        lines[window.actual_start - 1 : window.actual_end],
        window.actual_start,
        comment_open,
        options.include_line_numbers,
        NoteSet(),
    )
    body = _Body(lines=tuple(annotated), first_line=window.actual_start)
    language = options.language if options.language is not None else detect_language(file)

    state = _TrimState(
        window=window,
        notes=notes,
        header=format_header(file, window),
        body_chars=sum(len(line) for line in annotated),
    )
    state = _fit_to_budget(
        state, body, file, language, options.budget, selection.trims_top
    )

    return RenderedExcerpt(
        file=file,
        header=state.header,
        notes=state.notes,
        body_lines=body.slice(state.window),
        window=state.window,
        language=language,
    )
