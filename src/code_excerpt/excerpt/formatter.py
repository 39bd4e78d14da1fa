"""Serialize RenderedExcerpt into chat message text.

Output format:
    `file` - Lines `a` to `b`
    > note
    ```lang
    ...body lines...
    ```

Also renders the plain-text failovers shown when a selection is out of
bounds or when not even one line fits the budget.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from code_excerpt.excerpt.types import NoteSet, RenderedExcerpt

FENCE = "```"

# Fence language tag by file extension
_LANGUAGE_MAP: dict[str, str] = {
    ".py": "py",
    ".pyw": "py",
    ".js": "js",
    ".jsx": "jsx",
    ".mjs": "js",
    ".cjs": "js",
    ".ts": "ts",
    ".tsx": "tsx",
    ".mts": "ts",
    ".cts": "ts",
    ".go": "go",
    ".rs": "rs",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cs": "cs",
    ".json": "json",
    ".md": "md",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".sh": "sh",
}


def detect_language(file: str) -> str:
    """Return the fence language tag for file, or "" if unknown."""
    return _LANGUAGE_MAP.get(PurePosixPath(file).suffix.lower(), "")


def format_notes(notes: NoteSet) -> list[str]:
    """Render notes as quoted lines."""
    return [f"> {note}" for note in notes]


def serialize_parts(
    header: str,
    notes: NoteSet,
    body_lines: Iterable[str],
    language: str = "",
) -> str:
    """Join header, notes and fenced body with newlines."""
    return "\n".join(
        [header, *format_notes(notes), f"{FENCE}{language}", *body_lines, FENCE]
    )


def serialize_excerpt(excerpt: RenderedExcerpt) -> str:
    """Serialize a rendered excerpt to message text.

    Args:
        excerpt: Excerpt to serialize.

    Returns:
        Message content; its length never exceeds the budget the excerpt
        was rendered with.

    """
    return serialize_parts(
        excerpt.header, excerpt.notes, excerpt.body_lines, excerpt.language
    )


def serialized_length(
    header: str,
    notes: NoteSet,
    body_chars: int,
    body_count: int,
    language: str = "",
) -> int:
    """Compute len(serialize_parts(...)) without building the string.

    Args:
        header: Header line.
        notes: Notes block.
        body_chars: Sum of body line lengths.
        body_count: Number of body lines.
        language: Fence language tag.

    Returns:
        Serialized length in characters.

    """
    notes_chars = sum(len(note) + 2 for note in notes)
    fences = len(FENCE) * 2 + len(language)
    line_count = 1 + len(notes) + 1 + body_count + 1
    return len(header) + notes_chars + fences + body_chars + line_count - 1


def format_failover(start: int, total_lines: int) -> str:
    """Render the message shown for an out-of-bounds selection."""
    return "\n".join(
        [
            "**Failover:** Line selection out of bounds.",
            f"> Start Line: `{start}`",
            f"> Total Lines: `{total_lines}`",
        ]
    )


def format_too_large(start: int, budget: int) -> str:
    """Render the message shown when not even one line fits the budget."""
    return "\n".join(
        [
            "**Failover:** Line selection too large.",
            f"> Start Line: `{start}`",
            f"> Budget: `{budget}`",
        ]
    )
