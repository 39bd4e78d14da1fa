"""Per-line annotation of the excerpt body.

Applies the block comment correction and optional line-number tags.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from code_excerpt.excerpt.comments import COMMENT_OPEN
from code_excerpt.excerpt.types import NOTE_COMMENT_ALTERED, NoteSet

# Continuation line of a doc comment ("   * text"), keeps all but one space
_CONTINUATION_PATTERN = re.compile(r"^( {2,}) \*", re.MULTILINE)


def format_line_number(number: int, last_line: int) -> str:
    """Render the line-number tag for one line.

    The number is right-aligned to the width of last_line and wrapped in a
    block comment so it cannot be mistaken for code.

    Example:
        >>> format_line_number(7, 120)
        '/*   7 */ '

    """
    return f"/* {number:>{len(str(last_line))}} */ "


def annotate_lines(
    lines: Sequence[str],
    first_line: int,
    comment_open: bool,
    include_line_numbers: bool,
    notes: NoteSet,
) -> tuple[list[str], NoteSet]:
    """Annotate the lines of a window.

    The comment flag starts from comment_open and is raised by any line
    containing an opener. A raised flag (or line numbering) makes the
    current line eligible for the continuation rewrite and is consumed by
    that line. With numbering off, only lines carrying an opener and the
    first line of a window that starts inside a comment are eligible.

    Args:
        lines: Raw lines of the window, in order.
        first_line: Line number of lines[0].
        comment_open: Whether the window starts inside a block comment.
        include_line_numbers: Prefix each line with a line-number tag.
        notes: Notes collected so far.

    Returns:
        Tuple of (annotated lines, notes including any added by rewriting).

    """
    last_line = first_line + len(lines) - 1
    annotated: list[str] = []

    for number, line in enumerate(lines, start=first_line):
        if COMMENT_OPEN in line:
            comment_open = True

        if comment_open or include_line_numbers:
            comment_open = False
            rewritten = _CONTINUATION_PATTERN.sub(r"\1/*", line)
            if rewritten != line:
                line = rewritten
                notes = notes.add(NOTE_COMMENT_ALTERED)

        if include_line_numbers:
            line = format_line_number(number, last_line) + line
        annotated.append(line)

    return annotated, notes
