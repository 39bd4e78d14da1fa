"""Block comment continuity detection.

An excerpt that starts in the middle of a ``/* ... */`` block would render
its first lines as bare ``*`` continuations. The detector looks at the lines
above the window to find out whether a block comment is still open there.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

logger = logging.getLogger(__name__)

COMMENT_OPEN = "/*"
COMMENT_CLOSE = "*/"


def _last_marker_state(line: str) -> bool | None:
    """Return the comment state a line leaves behind.

    Returns:
        True if the line ends inside an opened block comment, False if its
        last marker closes one, None if it carries no marker at all.

    """
    open_at = line.rfind(COMMENT_OPEN)
    close_at = line.rfind(COMMENT_CLOSE)
    if open_at < 0 and close_at < 0:
        return None
    # "/*/" shares its star, so it only opens
    if close_at > open_at + 1:
        return False
    return open_at >= 0


def is_comment_open_before(lines: Sequence[str], actual_start: int) -> bool:
    """Check whether a block comment is open just above the window.

    Scans backwards from the line preceding actual_start. The nearest line
    carrying a comment marker decides: an unmatched opener means the window
    starts inside a comment, a trailing closer means it does not. The scan
    stops at line 1.

    Args:
        lines: Document lines.
        actual_start: First line of the window (1-indexed).

    Returns:
        True if the window starts inside a block comment.

    """
    for index in range(actual_start - 2, -1, -1):
        state = _last_marker_state(lines[index])
        if state is not None:
            logger.debug(
                "Line %d leaves block comment %s",
                index + 1,
                "open" if state else "closed",
            )
            return state
    return False
