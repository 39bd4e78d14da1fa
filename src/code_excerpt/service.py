"""Excerpt message assembly for the presentation layer.

Wraps render_excerpt() with the failure handling a chat front end needs:
- OutOfBoundsError becomes a plain-text failover message
- SelectionTooLargeError degrades to a single truncated line, or to a
  plain-text failover when not even part of that line fits

The deep link is built from the actual (post-trim) range so readers can
recover whatever trimming removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from code_excerpt.core.exceptions import OutOfBoundsError, SelectionTooLargeError
from code_excerpt.excerpt.annotator import annotate_lines
from code_excerpt.excerpt.boundary import split_lines
from code_excerpt.excerpt.comments import is_comment_open_before
from code_excerpt.excerpt.formatter import (
    detect_language,
    format_failover,
    format_too_large,
    serialize_excerpt,
    serialized_length,
)
from code_excerpt.excerpt.header import format_header
from code_excerpt.excerpt.trimmer import render_excerpt
from code_excerpt.excerpt.types import (
    NOTE_TRIMMED,
    FormattingOptions,
    NormalizedWindow,
    NoteSet,
    RenderedExcerpt,
    Selection,
)

logger = logging.getLogger(__name__)

ELLIPSIS = "…"


@dataclass(frozen=True)
class ExcerptMessage:
    """Message ready to send.

    Attributes:
        content: Message text, never longer than the budget.
        link_url: Deep link to the actual range, if a link target was given.
        excerpt: Rendered excerpt, None for failover messages.

    """

    content: str
    link_url: str | None = None
    excerpt: RenderedExcerpt | None = None

    @property
    def is_failover(self) -> bool:
        return self.excerpt is None


def _minimal_excerpt(
    lines: list[str],
    file: str,
    selection: Selection,
    options: FormattingOptions,
    error: SelectionTooLargeError,
) -> RenderedExcerpt | None:
    """Build a one-line excerpt whose line is cut to fit the budget.

    The line is annotated like any rendered line, so a window starting
    inside a block comment still gets its opener back.

    Returns:
        The excerpt, or None if no character of the line fits.

    """
    requested_start, requested_end = selection.bounds()
    window = NormalizedWindow(
        requested_start=requested_start,
        requested_end=requested_end,
        actual_start=error.start,
        actual_end=error.start,
    )
    language = options.language if options.language is not None else detect_language(file)
    header = format_header(file, window)

    annotated, notes = annotate_lines(
        lines[error.start - 1 : error.start],
        error.start,
        is_comment_open_before(lines, error.start),
        options.include_line_numbers,
        NoteSet(),
    )
    notes = notes.add(NOTE_TRIMMED)
    line = annotated[0]

    room = options.budget - serialized_length(header, notes, 0, 1, language)
    if len(line) > room:
        # At least one character plus the ellipsis
        if room < 1 + len(ELLIPSIS):
            return None
        line = line[: room - len(ELLIPSIS)] + ELLIPSIS

    return RenderedExcerpt(
        file=file,
        header=header,
        notes=notes,
        body_lines=(line,),
        window=window,
        language=language,
    )


def build_excerpt_message(
    text: str,
    file: str,
    selection: Selection,
    options: FormattingOptions | None = None,
) -> ExcerptMessage:
    """Render document text into a message.

    Args:
        text: Full document text, already fetched.
        file: File path shown in the header and passed to the link target.
        selection: Anchor or range selection.
        options: Formatting options; defaults to FormattingOptions().

    Returns:
        ExcerptMessage with content within options.budget.

    """
    if options is None:
        options = FormattingOptions()

    lines = split_lines(text)
    try:
        excerpt = render_excerpt(lines, file, selection, options)
    except OutOfBoundsError as e:
        logger.info(
            "Selection of %s out of bounds: start=%d, total=%d",
            file,
            e.start,
            e.total_lines,
        )
        return ExcerptMessage(content=format_failover(e.start, e.total_lines))
    except SelectionTooLargeError as e:
        minimal = _minimal_excerpt(lines, file, selection, options, e)
        if minimal is None:
            logger.warning(
                "Selection of %s does not fit %d characters, sending failover",
                file,
                options.budget,
            )
            return ExcerptMessage(content=format_too_large(e.start, options.budget))
        logger.warning("Degrading %s to a single line: %s", file, e)
        excerpt = minimal

    link_url = None
    if options.link_target is not None:
        link_url = options.link_target(file, (excerpt.actual_start, excerpt.actual_end))

    return ExcerptMessage(
        content=serialize_excerpt(excerpt), link_url=link_url, excerpt=excerpt
    )
