"""Core data types for the excerpt rendering pipeline.

Defines the selection variants, the normalized window, the ordered note set
and the rendered excerpt passed between normalizer, annotator, header
formatter and budget trimmer.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from typing import ClassVar

# Default serialized character budget (chat message limit)
DEFAULT_BUDGET = 2000

# Smallest budget that still holds a header, notes and a one-line fence
MIN_BUDGET = 100

# Default number of lines shown on each side of an anchor
DEFAULT_RADIUS = 3

NOTE_COMMENT_ALTERED = "A comment block was altered for formatting purposes."
NOTE_TRIMMED = "Requested content was trimmed."

LinkTarget = Callable[[str, tuple[int, int]], str]


@dataclass(frozen=True, slots=True)
class AnchorSelection:
    """Window centred on a reference line, typically an entity definition.

    The requested window is ``[anchor_line - radius + offset,
    anchor_line + radius + offset]``.

    Attributes:
        anchor_line: 1-indexed reference line.
        radius: Lines shown on each side of the anchor (>= 1).
        offset: Shift applied to the whole window, may be negative.

    """

    trims_top: ClassVar[bool] = True

    anchor_line: int
    radius: int = DEFAULT_RADIUS
    offset: int = 0

    def __post_init__(self) -> None:
        if self.anchor_line < 1:
            raise ValueError(f"anchor_line must be >= 1, got {self.anchor_line}")
        if self.radius < 1:
            raise ValueError(f"radius must be >= 1, got {self.radius}")

    def bounds(self) -> tuple[int, int]:
        """Return the requested (start, end) line pair."""
        return (
            self.anchor_line - self.radius + self.offset,
            self.anchor_line + self.radius + self.offset,
        )


@dataclass(frozen=True, slots=True)
class RangeSelection:
    """Window given by explicit start and end lines.

    Inverted ranges are accepted and swapped by bounds().

    Attributes:
        start: 1-indexed first line.
        end: 1-indexed last line (inclusive).

    """

    trims_top: ClassVar[bool] = False

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < 1:
            raise ValueError(
                f"start and end must be >= 1, got start={self.start}, end={self.end}"
            )

    def bounds(self) -> tuple[int, int]:
        """Return the requested (start, end) line pair, swapped if inverted."""
        if self.end < self.start:
            return self.end, self.start
        return self.start, self.end


Selection = AnchorSelection | RangeSelection


@dataclass(frozen=True, slots=True)
class NormalizedWindow:
    """Requested line range next to the range actually rendered.

    Requested values never change after construction; they are kept so the
    header can show what was adjusted.

    Attributes:
        requested_start: Start line as requested.
        requested_end: End line as requested.
        actual_start: First rendered line.
        actual_end: Last rendered line (inclusive).

    """

    requested_start: int
    requested_end: int
    actual_start: int
    actual_end: int

    @property
    def size(self) -> int:
        """Number of lines in the actual window."""
        return self.actual_end - self.actual_start + 1

    @property
    def actual_range(self) -> tuple[int, int]:
        return self.actual_start, self.actual_end

    def drop_first(self) -> NormalizedWindow:
        """Return a window one line shorter at the top."""
        return replace(self, actual_start=self.actual_start + 1)

    def drop_last(self) -> NormalizedWindow:
        """Return a window one line shorter at the bottom."""
        return replace(self, actual_end=self.actual_end - 1)


@dataclass(frozen=True, slots=True)
class NoteSet:
    """Insertion-ordered set of distinct notes.

    Immutable: add() returns a new NoteSet, or the same instance when the
    note is already present.

    Example:
        >>> notes = NoteSet().add("a").add("b").add("a")
        >>> list(notes)
        ['a', 'b']

    """

    notes: tuple[str, ...] = ()

    def add(self, note: str) -> NoteSet:
        if note in self.notes:
            return self
        return NoteSet((*self.notes, note))

    def __iter__(self) -> Iterator[str]:
        return iter(self.notes)

    def __len__(self) -> int:
        return len(self.notes)

    def __contains__(self, note: object) -> bool:
        return note in self.notes


@dataclass(frozen=True, slots=True)
class FormattingOptions:
    """Rendering options supplied by the caller.

    Attributes:
        include_line_numbers: Prefix every body line with its line number.
        budget: Maximum serialized length of the excerpt in characters.
        language: Fence language tag. None derives it from the file extension.
        link_target: Builds a deep link for (file, (actual_start, actual_end)).

    """

    include_line_numbers: bool = False
    budget: int = DEFAULT_BUDGET
    language: str | None = None
    link_target: LinkTarget | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.budget < MIN_BUDGET:
            raise ValueError(f"budget must be >= {MIN_BUDGET}, got {self.budget}")


@dataclass(frozen=True, slots=True)
class RenderedExcerpt:
    """Result of rendering: header, notes and fenced body lines.

    Attributes:
        file: File path shown in the header.
        header: Rendered header line.
        notes: Notes displayed between the header and the body.
        body_lines: Annotated lines of the actual window.
        window: Requested and actual line range.
        language: Fence language tag (may be empty).

    """

    file: str
    header: str
    notes: NoteSet
    body_lines: tuple[str, ...]
    window: NormalizedWindow
    language: str = ""

    @property
    def actual_start(self) -> int:
        return self.window.actual_start

    @property
    def actual_end(self) -> int:
        return self.window.actual_end
