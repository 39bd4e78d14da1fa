"""Budget-constrained source excerpt rendering.

Renders a window of a document as a chat-sized code block: the window is
normalized to the document bounds, block comments opened above the window
are repaired, lines are optionally numbered, and the result is trimmed
line by line until it fits the character budget.

Pipeline: normalize_window() → is_comment_open_before() → annotate_lines()
→ format_header() → budget trimming
"""

from code_excerpt.excerpt.boundary import normalize_window, split_lines
from code_excerpt.excerpt.formatter import (
    detect_language,
    format_failover,
    format_too_large,
    serialize_excerpt,
)
from code_excerpt.excerpt.trimmer import render_excerpt
from code_excerpt.excerpt.types import (
    DEFAULT_BUDGET,
    MIN_BUDGET,
    NOTE_COMMENT_ALTERED,
    NOTE_TRIMMED,
    AnchorSelection,
    FormattingOptions,
    NormalizedWindow,
    NoteSet,
    RangeSelection,
    RenderedExcerpt,
    Selection,
)

__all__ = [
    "render_excerpt",
    "normalize_window",
    "split_lines",
    "detect_language",
    "format_failover",
    "format_too_large",
    "serialize_excerpt",
    "DEFAULT_BUDGET",
    "MIN_BUDGET",
    "NOTE_COMMENT_ALTERED",
    "NOTE_TRIMMED",
    "AnchorSelection",
    "FormattingOptions",
    "NormalizedWindow",
    "NoteSet",
    "RangeSelection",
    "RenderedExcerpt",
    "Selection",
]
