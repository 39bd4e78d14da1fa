"""Custom exception hierarchy for code-excerpt.

All custom exceptions inherit from CodeExcerptError to enable:
- Unified exception handling
- Clear distinction from built-in exceptions
- Consistent error messaging patterns
"""

__all__ = [
    "CodeExcerptError",
    "ExcerptError",
    "OutOfBoundsError",
    "SelectionTooLargeError",
    "ConfigError",
    "SourceError",
    "DocumentNotFoundError",
]


class CodeExcerptError(Exception):
    """Base exception for all code-excerpt errors.

    All custom exceptions in code-excerpt should inherit from this class
    to enable unified exception handling and clear error boundaries.
    """

    pass


class ExcerptError(CodeExcerptError):
    """Excerpt rendering error.

    Raised by the rendering engine when a selection cannot be turned into
    an excerpt. Rendering errors are terminal for a single render call and
    are never retried.
    """

    pass


class OutOfBoundsError(ExcerptError):
    """Requested start line lies beyond the end of the document.

    Attributes:
        start: Requested start line (1-indexed).
        total_lines: Number of lines in the document.

    Example:
        >>> try:
        ...     render_excerpt(lines, "src/index.ts", RangeSelection(20, 25))
        ... except OutOfBoundsError as e:
        ...     print(e.start, e.total_lines)
        20 10

    """

    def __init__(self, start: int, total_lines: int) -> None:
        """Initialize OutOfBoundsError with the offending start and line count.

        Args:
            start: Requested start line.
            total_lines: Number of lines in the document.

        """
        super().__init__(
            f"Start line {start} is out of bounds (document has {total_lines} lines)"
        )
        self.start = start
        self.total_lines = total_lines


class SelectionTooLargeError(ExcerptError):
    """Budget trimming would remove every line of the window.

    Raised when even a single-line excerpt does not fit the character
    budget. Callers are expected to degrade to a minimal excerpt instead
    of surfacing this error.

    Attributes:
        start: Actual start line of the last window that was tried.
        end: Actual end line of the last window that was tried.
        budget: Character budget that could not be met.

    """

    def __init__(self, start: int, end: int, budget: int) -> None:
        """Initialize SelectionTooLargeError with the last window tried.

        Args:
            start: Actual start line when trimming gave up.
            end: Actual end line when trimming gave up.
            budget: Character budget in effect.

        """
        super().__init__(
            f"Lines {start}-{end} cannot fit in a {budget} character budget"
        )
        self.start = start
        self.end = end
        self.budget = budget


class ConfigError(CodeExcerptError):
    """Configuration loading or validation error.

    Raised when:
    - Configuration file is missing or is not a regular file
    - Configuration file is not valid YAML or not a mapping
    - Configuration validation fails (wraps Pydantic ValidationError)
    """

    pass


class SourceError(CodeExcerptError):
    """Document fetch error.

    Raised when:
    - No source repository is configured
    - The origin answers with a non-retryable error status
    - Retries are exhausted on timeouts, transport errors, 429 or 5xx
    """

    pass


class DocumentNotFoundError(SourceError):
    """Document does not exist at the resolved path and ref.

    Attributes:
        file: Repository-relative file path that was requested.
        ref: Branch, tag or commit the request was made against.

    """

    def __init__(self, file: str, ref: str) -> None:
        """Initialize DocumentNotFoundError.

        Args:
            file: Repository-relative file path.
            ref: Resolved revision.

        """
        super().__init__(f"Document not found: {file} at {ref}")
        self.file = file
        self.ref = ref
