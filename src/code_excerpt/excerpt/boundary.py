"""Line window normalization against document bounds."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from code_excerpt.core.exceptions import OutOfBoundsError
from code_excerpt.excerpt.types import NormalizedWindow

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """Split document text into lines.

    Splits on ``\\n`` only, so a trailing newline yields a trailing empty
    line. A ``\\r`` left over from CRLF endings is stripped.

    Args:
        text: Full document text.

    Returns:
        Document lines, at least one (possibly empty) line.

    """
    return [line.removesuffix("\r") for line in text.split("\n")]


def _is_blank(line: str) -> bool:
    return not line.strip()


def normalize_window(lines: Sequence[str], start: int, end: int) -> NormalizedWindow:
    """Fit a requested line range into the document.

    Steps, in order:
    1. Reject a start beyond the last line.
    2. Shift a window overflowing the end upwards, keeping its length.
    3. Clamp the start to line 1.
    4. Trim blank lines off both edges, never below a single line.

    Args:
        lines: Document lines.
        start: Requested first line (1-indexed, start <= end).
        end: Requested last line (inclusive).

    Returns:
        Window with 1 <= actual_start <= actual_end <= len(lines).

    Raises:
        OutOfBoundsError: If start is greater than the number of lines.

    """
    total = len(lines)
    if start > total:
        raise OutOfBoundsError(start, total)

    actual_start, actual_end = start, end

    if actual_end > total:
        actual_start -= actual_end - total
        actual_end = total

    actual_start = max(actual_start, 1)
    # Whole request before line 1
    actual_end = max(actual_end, actual_start)

    while actual_start < actual_end and _is_blank(lines[actual_start - 1]):
        actual_start += 1
    while actual_end > actual_start and _is_blank(lines[actual_end - 1]):
        actual_end -= 1

    if (actual_start, actual_end) != (start, end):
        logger.debug(
            "Normalized lines %d-%d to %d-%d (%d total)",
            start,
            end,
            actual_start,
            actual_end,
            total,
        )

    return NormalizedWindow(
        requested_start=start,
        requested_end=end,
        actual_start=actual_start,
        actual_end=actual_end,
    )
