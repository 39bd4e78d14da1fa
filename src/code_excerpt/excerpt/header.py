"""Excerpt header rendering."""

from __future__ import annotations

from code_excerpt.excerpt.types import NormalizedWindow


def format_adjustment(requested: int, actual: int) -> str:
    """Render one line bound, striking the requested value if it moved.

    Example:
        >>> format_adjustment(60, 50)
        '~~`60`~~ `50`'

    """
    if requested == actual:
        return f"`{requested}`"
    return f"~~`{requested}`~~ `{actual}`"


def format_header(file: str, window: NormalizedWindow) -> str:
    """Render the header line for a window of file.

    Args:
        file: File path shown to the reader.
        window: Requested and actual bounds.

    Returns:
        Header line, e.g. "`src/a.ts` - Lines `3` to `9`".

    """
    start = format_adjustment(window.requested_start, window.actual_start)
    end = format_adjustment(window.requested_end, window.actual_end)
    return f"`{file}` - Lines {start} to {end}"
