"""Tests for excerpt rendering and budget trimming."""

import pytest

from code_excerpt.core.exceptions import OutOfBoundsError, SelectionTooLargeError
from code_excerpt.excerpt.formatter import serialize_excerpt
from code_excerpt.excerpt.trimmer import render_excerpt
from code_excerpt.excerpt.types import (
    NOTE_COMMENT_ALTERED,
    NOTE_TRIMMED,
    AnchorSelection,
    FormattingOptions,
    RangeSelection,
)


def _wide_lines(count: int, width: int = 30) -> list[str]:
    return [f"line {i:03d} " + "x" * width for i in range(1, count + 1)]


DOC_COMMENT = [
    "export class Client {",
    "  /**",
    "   * Creates a client.",
    "   * @param token The token.",
    "   */",
    "  constructor(token: string) {",
    "    this.token = token;",
    "  }",
    "}",
]


class TestRenderWithinBudget:
    """Tests for excerpts that already fit."""

    def test_range_kept_and_no_trim_note(self) -> None:
        lines = _wide_lines(20)
        excerpt = render_excerpt(lines, "src/a.ts", RangeSelection(3, 8))
        assert (excerpt.actual_start, excerpt.actual_end) == (3, 8)
        assert NOTE_TRIMMED not in excerpt.notes
        assert excerpt.body_lines == tuple(lines[2:8])
        assert excerpt.header == "`src/a.ts` - Lines `3` to `8`"
        assert excerpt.language == "ts"

    def test_blank_edges_reflected_in_header(self) -> None:
        excerpt = render_excerpt(["", "a", "b", ""], "a.py", RangeSelection(1, 4))
        assert (excerpt.actual_start, excerpt.actual_end) == (2, 3)
        assert excerpt.header == "`a.py` - Lines ~~`1`~~ `2` to ~~`4`~~ `3`"
        assert excerpt.body_lines == ("a", "b")

    def test_overflow_shift(self) -> None:
        excerpt = render_excerpt(_wide_lines(50, 2), "a.ts", RangeSelection(45, 60))
        assert (excerpt.actual_start, excerpt.actual_end) == (35, 50)
        assert "~~`60`~~ `50`" in excerpt.header

    def test_inverted_range_swapped(self) -> None:
        excerpt = render_excerpt(_wide_lines(20), "a.ts", RangeSelection(8, 3))
        assert (excerpt.actual_start, excerpt.actual_end) == (3, 8)
        assert excerpt.header == "`a.ts` - Lines `3` to `8`"

    def test_anchor_window(self) -> None:
        excerpt = render_excerpt(
            _wide_lines(40), "a.ts", AnchorSelection(anchor_line=20, radius=2, offset=1)
        )
        assert (excerpt.actual_start, excerpt.actual_end) == (19, 23)

    def test_language_override(self) -> None:
        excerpt = render_excerpt(
            _wide_lines(5), "a.ts", RangeSelection(1, 2), FormattingOptions(language="")
        )
        assert serialize_excerpt(excerpt).split("\n")[1] == "```"

    def test_out_of_bounds(self) -> None:
        with pytest.raises(OutOfBoundsError) as exc_info:
            render_excerpt(_wide_lines(10), "a.ts", RangeSelection(20, 22))
        assert (exc_info.value.start, exc_info.value.total_lines) == (20, 10)

    def test_deterministic(self) -> None:
        lines = _wide_lines(100)
        selection = AnchorSelection(anchor_line=50, radius=30)
        options = FormattingOptions(include_line_numbers=True)
        first = render_excerpt(lines, "a.ts", selection, options)
        second = render_excerpt(lines, "a.ts", selection, options)
        assert first == second
        assert serialize_excerpt(first) == serialize_excerpt(second)


class TestCommentContinuity:
    """Tests for block comments opened above the window."""

    def test_window_inside_doc_comment_is_repaired(self) -> None:
        excerpt = render_excerpt(DOC_COMMENT, "client.ts", RangeSelection(3, 7))
        assert excerpt.body_lines[0] == "  /* Creates a client."
        assert excerpt.body_lines[1] == "   * @param token The token."
        assert list(excerpt.notes) == [NOTE_COMMENT_ALTERED]

    def test_window_after_comment_untouched(self) -> None:
        excerpt = render_excerpt(DOC_COMMENT, "client.ts", RangeSelection(6, 8))
        assert excerpt.body_lines == tuple(DOC_COMMENT[5:8])
        assert len(excerpt.notes) == 0

    def test_line_numbers(self) -> None:
        excerpt = render_excerpt(
            DOC_COMMENT,
            "client.ts",
            RangeSelection(6, 8),
            FormattingOptions(include_line_numbers=True),
        )
        assert excerpt.body_lines == (
            "/* 6 */   constructor(token: string) {",
            "/* 7 */     this.token = token;",
            "/* 8 */   }",
        )


class TestBudgetTrimming:
    """Tests for fit-to-budget trimming."""

    def test_anchor_trims_alternately(self) -> None:
        lines = _wide_lines(100)
        selection = AnchorSelection(anchor_line=50, radius=30)
        untrimmed = render_excerpt(lines, "src/big.ts", selection, FormattingOptions(budget=10_000))
        assert 2400 <= len(serialize_excerpt(untrimmed)) <= 2600

        excerpt = render_excerpt(lines, "src/big.ts", selection)
        content = serialize_excerpt(excerpt)
        assert len(content) <= 2000

        top = excerpt.actual_start - 20
        bottom = 80 - excerpt.actual_end
        assert top > 0
        assert bottom > 0
        # Bottom goes first, then sides alternate
        assert bottom - top in (0, 1)

        assert list(excerpt.notes).count(NOTE_TRIMMED) == 1
        assert content.count(NOTE_TRIMMED) == 1
        assert excerpt.body_lines == tuple(lines[excerpt.actual_start - 1 : excerpt.actual_end])
        assert excerpt.header == (
            f"`src/big.ts` - Lines ~~`20`~~ `{excerpt.actual_start}` "
            f"to ~~`80`~~ `{excerpt.actual_end}`"
        )

    def test_trims_no_more_than_needed(self) -> None:
        lines = _wide_lines(100)
        selection = RangeSelection(1, 100)
        excerpt = render_excerpt(lines, "a.ts", selection, FormattingOptions(budget=1000))
        one_more = render_excerpt(
            lines,
            "a.ts",
            RangeSelection(1, excerpt.actual_end + 1),
            FormattingOptions(budget=100_000),
        )
        # The state before the last trim: one more line, the trimmed note and
        # a struck-through end marker
        before_last_trim = (
            len(serialize_excerpt(one_more)) + len(f"> {NOTE_TRIMMED}\n") + len("~~`100`~~ ")
        )
        assert before_last_trim > 1000

    def test_range_trims_bottom_only(self) -> None:
        lines = _wide_lines(100)
        excerpt = render_excerpt(lines, "a.ts", RangeSelection(10, 90))
        assert excerpt.actual_start == 10
        assert excerpt.actual_end < 90
        assert len(serialize_excerpt(excerpt)) <= 2000
        assert excerpt.header.startswith("`a.ts` - Lines `10` to ~~`90`~~")

    def test_notes_order_with_trimming(self) -> None:
        lines = DOC_COMMENT[:5] + _wide_lines(100)
        excerpt = render_excerpt(lines, "a.ts", RangeSelection(3, 105))
        assert list(excerpt.notes) == [NOTE_COMMENT_ALTERED, NOTE_TRIMMED]

    def test_single_line_too_large(self) -> None:
        with pytest.raises(SelectionTooLargeError) as exc_info:
            render_excerpt(["y" * 5000], "a.ts", RangeSelection(1, 1))
        assert exc_info.value.budget == 2000

    def test_never_trims_to_empty(self) -> None:
        lines = ["y" * 3000] * 3
        with pytest.raises(SelectionTooLargeError) as exc_info:
            render_excerpt(lines, "a.ts", AnchorSelection(anchor_line=2, radius=1))
        assert exc_info.value.start == exc_info.value.end

    @pytest.mark.parametrize("budget", [150, 300, 700, 2000])
    @pytest.mark.parametrize("line_numbers", [False, True])
    def test_budget_invariant(self, budget: int, line_numbers: bool) -> None:
        lines = [("  " * (i % 4)) + f"statement_{i}();" for i in range(1, 301)]
        options = FormattingOptions(include_line_numbers=line_numbers, budget=budget)
        for selection in (
            RangeSelection(1, 300),
            RangeSelection(120, 400),
            AnchorSelection(anchor_line=150, radius=80, offset=-20),
        ):
            excerpt = render_excerpt(lines, "a.ts", selection, options)
            assert len(serialize_excerpt(excerpt)) <= budget
            assert 1 <= excerpt.actual_start <= excerpt.actual_end <= 300
            assert len(excerpt.body_lines) == excerpt.actual_end - excerpt.actual_start + 1

    def test_logs_trim(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("DEBUG", logger="code_excerpt.excerpt.trimmer"):
            render_excerpt(_wide_lines(100), "a.ts", RangeSelection(1, 100))
        assert "Trimmed a.ts by" in caplog.text
