"""Tests for excerpt serialization."""

import pytest

from code_excerpt.excerpt.formatter import (
    detect_language,
    format_failover,
    format_too_large,
    serialize_excerpt,
    serialize_parts,
    serialized_length,
)
from code_excerpt.excerpt.types import MIN_BUDGET, NormalizedWindow, NoteSet, RenderedExcerpt


class TestDetectLanguage:
    """Tests for detect_language()."""

    @pytest.mark.parametrize(
        ("file", "expected"),
        [
            ("src/index.ts", "ts"),
            ("src/Component.TSX", "tsx"),
            ("lib/tool.py", "py"),
            ("main.go", "go"),
            ("README", ""),
            ("notes.unknownext", ""),
        ],
    )
    def test_detects_by_extension(self, file: str, expected: str) -> None:
        assert detect_language(file) == expected


class TestSerializeExcerpt:
    """Tests for serialize_excerpt()."""

    def test_layout(self) -> None:
        excerpt = RenderedExcerpt(
            file="a.ts",
            header="`a.ts` - Lines `1` to `2`",
            notes=NoteSet().add("first").add("second"),
            body_lines=("const a = 1;", "const b = 2;"),
            window=NormalizedWindow(1, 2, 1, 2),
            language="ts",
        )
        assert serialize_excerpt(excerpt) == "\n".join(
            [
                "`a.ts` - Lines `1` to `2`",
                "> first",
                "> second",
                "```ts",
                "const a = 1;",
                "const b = 2;",
                "```",
            ]
        )

    def test_no_notes_no_language(self) -> None:
        excerpt = RenderedExcerpt(
            file="README",
            header="h",
            notes=NoteSet(),
            body_lines=("x",),
            window=NormalizedWindow(1, 1, 1, 1),
        )
        assert serialize_excerpt(excerpt) == "h\n```\nx\n```"


class TestSerializedLength:
    """Tests for serialized_length()."""

    @pytest.mark.parametrize(
        ("notes", "body", "language"),
        [
            ((), ("a",), ""),
            (("n1",), ("abc", "", "de"), "ts"),
            (("n1", "a longer note"), ("x" * 40,) * 5, "py"),
        ],
    )
    def test_matches_serialized_string(
        self, notes: tuple[str, ...], body: tuple[str, ...], language: str
    ) -> None:
        note_set = NoteSet(notes)
        expected = len(serialize_parts("header", note_set, body, language))
        computed = serialized_length(
            "header", note_set, sum(len(line) for line in body), len(body), language
        )
        assert computed == expected


class TestFormatFailover:
    """Tests for format_failover()."""

    def test_reports_start_and_total(self) -> None:
        assert format_failover(20, 10) == (
            "**Failover:** Line selection out of bounds.\n"
            "> Start Line: `20`\n"
            "> Total Lines: `10`"
        )


class TestFormatTooLarge:
    """Tests for format_too_large()."""

    def test_reports_start_and_budget(self) -> None:
        assert format_too_large(7, 100) == (
            "**Failover:** Line selection too large.\n"
            "> Start Line: `7`\n"
            "> Budget: `100`"
        )

    def test_fits_minimum_budget(self) -> None:
        assert len(format_too_large(999_999, 999_999)) <= MIN_BUDGET
        assert len(format_failover(999_999, 999_999)) <= MIN_BUDGET
